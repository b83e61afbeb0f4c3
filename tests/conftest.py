# tests/conftest.py - shared fixtures: log isolation, deterministic fallbacks
import random

import httpx
import pytest

from nextword_predictor.core.sources import FallbackSource
from nextword_predictor.utils.logger_utils import Log


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path):
    """Keep log files out of the working tree."""
    old_path, old_echo = Log.path, Log.echo
    Log.configure(path=str(tmp_path / "nextword.log"), echo=False)
    yield
    Log.configure(path=old_path, echo=old_echo)


class FixedFallback:
    """Fallback stub returning the same candidates on every call."""

    def __init__(self, cands):
        self.cands = list(cands)
        self.calls = []

    def generate(self, text):
        self.calls.append(text)
        return list(self.cands)


@pytest.fixture
def fixed_fallback():
    return FixedFallback


@pytest.fixture
def seeded_fallback():
    return FallbackSource(rng=random.Random(1234))


@pytest.fixture
def mock_client():
    """Factory: httpx.AsyncClient whose requests are answered by `handler`."""
    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return _make
