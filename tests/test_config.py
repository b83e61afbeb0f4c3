# tests/test_config.py - defaults, JSON file layer, env overlay, set()
import json

import pytest

from nextword_predictor.utils.config_manager import DEFAULT_CHAT_URL, Config


def test_defaults_select_local_predictions():
    cfg = Config(env={})
    assert not cfg.remote_enabled
    assert cfg["min_usable"] == 3
    assert cfg["target_size"] == 5
    assert cfg["initial_text"] == "The future of work is"


def test_json_file_overrides_defaults_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"initial_text": "Once upon a", "bogus": 1}), encoding="utf8")
    cfg = Config(path=str(path), env={})
    assert cfg["initial_text"] == "Once upon a"
    assert cfg.get("bogus") is None


def test_missing_file_falls_back_to_defaults(tmp_path):
    cfg = Config(path=str(tmp_path / "nope.json"), env={})
    assert cfg["mode"] == "completion"


def test_env_overlays_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"mode": "completion"}), encoding="utf8")
    cfg = Config(path=str(path), env={"NEXTWORD_MODE": "chat", "OPENAI_API_KEY": " sk-abc "})
    assert cfg["mode"] == "chat"
    assert cfg["api_key"] == "sk-abc"
    assert cfg.remote_enabled
    assert cfg.resolved_endpoint() == DEFAULT_CHAT_URL


@pytest.mark.parametrize("env", [
    {"NEXTWORD_MODE": "telepathy"},
])
def test_invalid_mode_rejected(env):
    with pytest.raises(ValueError):
        Config(env=env)


@pytest.mark.parametrize("raw", ["Chat", " CHAT "])
def test_mode_is_case_insensitive(raw):
    assert Config(env={"NEXTWORD_MODE": raw})["mode"] == "chat"


def test_malformed_json_file_raises_value_error(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{not json", encoding="utf8")
    with pytest.raises(ValueError):
        Config(path=str(path), env={})


def test_non_object_json_file_rejected(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf8")
    with pytest.raises(ValueError):
        Config(path=str(path), env={})


def test_set_casts_and_persists_without_secrets(tmp_path):
    path = tmp_path / "config.json"
    cfg = Config(path=str(path), env={"OPENAI_API_KEY": "sk-secret"})
    cfg.set("target_size", "6")
    cfg.set("seed", "11")
    assert cfg["target_size"] == 6
    saved = json.loads(path.read_text(encoding="utf8"))
    assert saved["target_size"] == 6
    assert saved["seed"] == 11
    assert "api_key" not in saved


def test_set_rejects_unknown_and_invalid_values():
    cfg = Config(env={})
    with pytest.raises(KeyError):
        cfg.set("colour", "red")
    with pytest.raises(ValueError):
        cfg.set("min_usable", "9")
    assert cfg["min_usable"] == 3


def test_show_masks_api_key():
    rows = dict(Config(env={"OPENAI_API_KEY": "sk-123456"}).show())
    assert rows["api_key"] == "sk-..."
    assert rows["seed"] == ""
