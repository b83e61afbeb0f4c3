# nextword_predictor/core/sources.py
"""
Prediction sources - where raw next-word candidates come from.

Three interchangeable implementations of PredictionSourceProtocol:
 - CompletionSource: one completion request for a single token, reading the top-K
   log-probabilities and converting them with exp()
 - ChatSource: one chat request asking the model for a JSON array of
   {"word", "probability"} objects
 - FallbackSource: local, never fails; a few hand-written rules plus random draws
   from a small vocabulary

build_source(config) picks one at startup. Remote sources raise UpstreamError or
ParseError; turning those into fallback output is PredictionService's job.
"""

from __future__ import annotations

import asyncio
import json
import math
import random
import re
from typing import Any, Dict, Iterable, Optional

import httpx

from nextword_predictor.context.tokenizer import last_word
from nextword_predictor.core.errors import ParseError, UpstreamError
from nextword_predictor.core.protocols import CandidateList, PredictionSourceProtocol
from nextword_predictor.utils.logger_utils import Log

COMMON_WORDS = (
    "the", "and", "to", "of", "a", "in", "is", "it", "you", "that",
    "he", "was", "for", "on", "are", "as", "with", "his", "they", "i",
    "at", "be", "this", "have", "from", "or", "one", "had", "by", "word",
    "but", "not", "what", "all", "were", "we", "when", "your", "can", "said",
)

# keyed on the lower-cased last word of the input
_LAST_WORD_RULES: Dict[str, CandidateList] = {
    "the": [("quick", 0.8), ("brown", 0.7), ("lazy", 0.6), ("red", 0.5), ("blue", 0.4)],
    "and": [("the", 0.9), ("then", 0.7), ("so", 0.6), ("but", 0.5), ("or", 0.4)],
}
_GREETING_MARKERS = ("hello", "hi")
_GREETING_WORDS: CandidateList = [
    ("there", 0.8), ("world", 0.7), ("how", 0.6), ("are", 0.5), ("nice", 0.4),
]

# weight ranges for random picks: (low, span) -> low + random() * span
_DRAW_WEIGHT = (0.1, 0.8)
_PAD_WEIGHT = (0.1, 0.5)

CHAT_SYSTEM_PROMPT = (
    "You predict the next word of the user's text. "
    "Reply with only a JSON array of exactly 5 objects of the form "
    '{"word": "<next word>", "probability": <number between 0 and 1>}, '
    "most likely first. No prose, no code fences."
)

_fence_re = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


# ---------------------------------
# Local fallback generator
# ---------------------------------
class FallbackSource:
    """
    Dependency-free source that keeps the UI usable without an endpoint.

    generate() is synchronous and does no I/O; fetch() adds an artificial delay so
    the UI feels the same whichever source is live. Pass a seeded random.Random (or
    a fixed vocabulary) to make the output reproducible in tests.
    """

    def __init__(self,
                 rng: Optional[random.Random] = None,
                 vocabulary: Optional[Iterable[str]] = None,
                 delay: float = 0.0,
                 size: int = 5,
                 seed: Optional[int] = None):
        self.rng = rng if rng is not None else random.Random(seed)
        self.vocabulary = tuple(vocabulary) if vocabulary is not None else COMMON_WORDS
        self.delay = max(0.0, float(delay))
        self.size = size

    def _weight(self, bounds) -> float:
        low, span = bounds
        return self.rng.random() * span + low

    def generate(self, text: str) -> CandidateList:
        last = last_word(text)
        if last in _LAST_WORD_RULES:
            picks = list(_LAST_WORD_RULES[last])
        elif any(marker in text for marker in _GREETING_MARKERS):
            picks = list(_GREETING_WORDS)
        elif self.vocabulary:
            # independent draws, so repeats are possible
            picks = [(self.rng.choice(self.vocabulary), self._weight(_DRAW_WEIGHT))
                     for _ in range(self.size)]
        else:
            picks = []

        seen = set()
        unique: CandidateList = []
        for w, p in picks:
            if w not in seen:
                seen.add(w)
                unique.append((w, p))

        # top up with unused vocabulary until size is reached or words run out
        spare = [w for w in self.vocabulary if w not in seen]
        while len(unique) < self.size and spare:
            w = spare.pop(self.rng.randrange(len(spare)))
            unique.append((w, self._weight(_PAD_WEIGHT)))

        unique.sort(key=lambda kv: -kv[1])
        return unique[:self.size]

    async def fetch(self, text: str) -> CandidateList:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.generate(text)


# ---------------------------------
# Remote sources
# ---------------------------------
class _RemoteSource:
    """Shared HTTP plumbing: one POST per fetch, errors mapped to UpstreamError."""

    default_model = ""

    def __init__(self,
                 endpoint: str,
                 model: str = "",
                 api_key: str = "",
                 temperature: float = 0.7,
                 timeout: Optional[float] = None,
                 client: Optional[httpx.AsyncClient] = None):
        if not endpoint:
            raise ValueError("endpoint is required for a remote source")
        self.endpoint = endpoint
        self.model = model or self.default_model
        self.api_key = api_key
        self.temperature = float(temperature)
        self.timeout = timeout
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            if self._client is not None:
                resp = await self._client.post(self.endpoint, json=payload, headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.post(self.endpoint, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise UpstreamError(f"request to {self.endpoint} failed: {e!r}") from e

        if not resp.is_success:
            raise UpstreamError(f"HTTP {resp.status_code}: {resp.text[:200]}",
                                status_code=resp.status_code)
        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError("response body is not valid JSON") from e
        if not isinstance(body, dict):
            raise UpstreamError("response body is not a JSON object")
        return body


class CompletionSource(_RemoteSource):
    """Completion-style endpoint: max_tokens=1 with top-K logprobs."""

    default_model = "gpt-3.5-turbo-instruct"

    def __init__(self, endpoint: str, top_k: int = 5, **kwargs):
        super().__init__(endpoint, **kwargs)
        if top_k < 5:
            raise ValueError("top_k must be at least 5")
        self.top_k = int(top_k)

    def build_payload(self, text: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "prompt": text,
            "max_tokens": 1,
            "temperature": self.temperature,
            "logprobs": self.top_k,
            "echo": False,
        }

    async def fetch(self, text: str) -> CandidateList:
        body = await self._post(self.build_payload(text))
        try:
            top = body["choices"][0]["logprobs"]["top_logprobs"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("response has no top_logprobs") from e
        if not isinstance(top, dict):
            raise UpstreamError("top_logprobs entry is not a token map")

        out: CandidateList = []
        for token, lp in top.items():
            try:
                lp = float(lp)
            except (TypeError, ValueError) as e:
                raise UpstreamError(f"bad logprob for {token!r}: {lp!r}") from e
            if not math.isfinite(lp):
                raise UpstreamError(f"non-finite logprob for {token!r}: {lp!r}")
            prob = math.exp(min(lp, 0.0))
            if prob <= 0.0:
                # underflows to 0 below about -745
                Log.debug(f"[Sources] dropping {token!r}, logprob {lp} underflows")
                continue
            out.append((str(token), prob))
        # the token map is not guaranteed to be ordered
        out.sort(key=lambda kv: -kv[1])
        return out


def parse_candidate_array(content: str) -> CandidateList:
    """
    Decode a model reply of the form [{"word": ..., "probability": ...}, ...].
    Raises ParseError for anything else.
    """
    if not isinstance(content, str):
        raise ParseError("chat content is not a string")
    cleaned = _fence_re.sub("", content.strip())
    try:
        data = json.loads(cleaned)
    except ValueError as e:
        raise ParseError(f"chat content is not JSON: {content[:80]!r}") from e
    if not isinstance(data, list):
        raise ParseError("chat content is not a JSON array")

    out: CandidateList = []
    for item in data:
        if not isinstance(item, dict):
            raise ParseError(f"array item is not an object: {item!r}")
        word = item.get("word")
        prob = item.get("probability")
        if not isinstance(word, str):
            raise ParseError(f"missing or non-string word in {item!r}")
        if isinstance(prob, bool) or not isinstance(prob, (int, float)):
            raise ParseError(f"missing or non-numeric probability in {item!r}")
        if not (math.isfinite(prob) and 0 < prob <= 1):
            raise ParseError(f"probability outside (0, 1] in {item!r}")
        out.append((word, float(prob)))
    return out


class ChatSource(_RemoteSource):
    """Chat-style endpoint: the model writes the 5 predictions as JSON itself."""

    default_model = "gpt-4o-mini"

    def build_payload(self, text: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": CHAT_SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            "temperature": self.temperature,
            "max_tokens": 150,
        }

    async def fetch(self, text: str) -> CandidateList:
        body = await self._post(self.build_payload(text))
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("response has no message content") from e
        return parse_candidate_array(content)


# ---------------------------------
# Factory
# ---------------------------------
def build_fallback(config=None, rng: Optional[random.Random] = None) -> FallbackSource:
    if config is None:
        return FallbackSource(rng=rng)
    return FallbackSource(rng=rng,
                          delay=config["fallback_delay"],
                          size=int(config["target_size"]),
                          seed=config["seed"])


def build_source(config,
                 client: Optional[httpx.AsyncClient] = None,
                 rng: Optional[random.Random] = None,
                 offline: bool = False) -> PredictionSourceProtocol:
    """
    Choose the live source once, at startup.
    Remote when an endpoint or API key is configured, otherwise the local fallback.
    """
    if offline or not config.remote_enabled:
        if not offline:
            Log.warning("[Sources] no endpoint or API key configured, using local fallback predictions")
        return build_fallback(config, rng=rng)

    common = dict(
        model=config["model"],
        api_key=config["api_key"],
        temperature=config["temperature"],
        timeout=config["timeout"],
        client=client,
    )
    endpoint = config.resolved_endpoint()
    if config["mode"] == "chat":
        Log.info(f"[Sources] chat source -> {endpoint}")
        return ChatSource(endpoint, **common)
    Log.info(f"[Sources] completion source -> {endpoint}")
    return CompletionSource(endpoint, top_k=int(config["top_k"]), **common)
