# config_manager.py - JSON config manager with environment overlay

import json
import os
from typing import Any, Dict, Mapping, Optional

from nextword_predictor.utils.logger_utils import Log

DEFAULT_COMPLETION_URL = "https://api.openai.com/v1/completions"
DEFAULT_CHAT_URL = "https://api.openai.com/v1/chat/completions"

MODES = ("completion", "chat")

# environment variable -> config key
ENV_KEYS = {
    "AI_GATEWAY_URL": "endpoint",
    "OPENAI_API_KEY": "api_key",
    "NEXTWORD_MODE": "mode",
    "NEXTWORD_MODEL": "model",
}


class Config:
    """
    Layered settings: built-in defaults, then an optional JSON file, then env.

    Nothing is written to disk unless a path was given and save() is called.
    """

    DEFAULTS: Dict[str, Any] = {
        "endpoint": "",
        "api_key": "",
        "mode": "completion",
        "model": "",
        "temperature": 0.7,
        "top_k": 5,
        "timeout": 30.0,
        "fallback_delay": 1.0,  # artificial latency of the local generator
        "min_usable": 3,  # fewer unique remote words than this -> full fallback
        "target_size": 5,
        "initial_text": "The future of work is",
        "seed": None,
    }

    def __init__(self, path: Optional[str] = None, env: Optional[Mapping[str, str]] = None):
        self.path = path
        self.data: Dict[str, Any] = dict(self.DEFAULTS)
        if path:
            self._load()
        self._apply_env(os.environ if env is None else env)
        self._validate()

    def _load(self):
        if not os.path.exists(self.path):
            Log.info(f"[Config] {self.path} not found, using defaults")
            return
        with open(self.path, "r", encoding="utf8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"{self.path} must hold a JSON object")
        unknown = sorted(k for k in loaded if k not in self.DEFAULTS)
        if unknown:
            Log.warning(f"[Config] ignoring unknown keys in {self.path}: {', '.join(unknown)}")
        self.data.update({k: v for k, v in loaded.items() if k in self.DEFAULTS})

    def _apply_env(self, env: Mapping[str, str]):
        for var, key in ENV_KEYS.items():
            val = env.get(var)
            if val:
                self.data[key] = val.strip()

    def _validate(self):
        self.data["mode"] = str(self.data["mode"]).strip().lower()
        if self.data["mode"] not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {self.data['mode']!r}")
        if int(self.data["top_k"]) < 5:
            raise ValueError("top_k must be at least 5")
        if not 1 <= int(self.data["min_usable"]) <= int(self.data["target_size"]):
            raise ValueError("need 1 <= min_usable <= target_size")

    # Accessors ----------------------------------------------------------------
    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def remote_enabled(self) -> bool:
        return bool(self.data["endpoint"] or self.data["api_key"])

    def resolved_endpoint(self) -> str:
        if self.data["endpoint"]:
            return self.data["endpoint"]
        return DEFAULT_CHAT_URL if self.data["mode"] == "chat" else DEFAULT_COMPLETION_URL

    def save(self):
        if not self.path:
            raise ValueError("no config path set")
        # never persist secrets pulled from the environment
        out = {k: v for k, v in self.data.items() if k != "api_key"}
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(out, f, indent=2)

    def show(self):
        """Rows of (key, display value) with the api key masked."""
        rows = []
        for k, v in self.data.items():
            if k == "api_key" and v:
                v = v[:3] + "..."
            rows.append((k, "" if v is None else str(v)))
        return rows

    def set(self, key, val):
        if key not in self.data:
            raise KeyError(f"No such option: {key}")
        default = self.DEFAULTS[key]
        previous = self.data[key]
        if default is None:
            self.data[key] = None if val in ("", "none", "None") else int(val)
        else:
            self.data[key] = type(default)(val)
        try:
            self._validate()
        except ValueError:
            self.data[key] = previous
            raise
        if self.path:
            self.save()
