# tests/test_service.py
import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

from nextword_predictor.core.errors import ParseError, UpstreamError
from nextword_predictor.core.protocols import PredictionSet
from nextword_predictor.core.service import PredictionService, build_service
from nextword_predictor.core.sources import CompletionSource, FallbackSource
from nextword_predictor.utils.config_manager import Config


class PredictionServiceTests(unittest.TestCase):

    def _service(self, fetch):
        source = MagicMock()
        source.fetch = fetch
        normalizer = MagicMock()
        normalizer.normalize.return_value = PredictionSet()
        return PredictionService(source, normalizer), normalizer

    def test_raw_candidates_passed_to_normalizer(self):
        svc, normalizer = self._service(AsyncMock(return_value=[("a", 0.5)]))
        asyncio.run(svc.predict("some text"))
        normalizer.normalize.assert_called_once_with([("a", 0.5)], "some text")
        self.assertGreaterEqual(svc.last_latency, 0.0)

    def test_upstream_error_degrades_to_empty_raw(self):
        svc, normalizer = self._service(AsyncMock(side_effect=UpstreamError("HTTP 503", status_code=503)))
        asyncio.run(svc.predict("x"))
        normalizer.normalize.assert_called_once_with([], "x")

    def test_parse_error_treated_like_upstream_error(self):
        svc, normalizer = self._service(AsyncMock(side_effect=ParseError("not json")))
        asyncio.run(svc.predict("x"))
        normalizer.normalize.assert_called_once_with([], "x")

    def test_other_faults_propagate(self):
        svc, normalizer = self._service(AsyncMock(side_effect=KeyError("bug")))
        with self.assertRaises(KeyError):
            asyncio.run(svc.predict("x"))
        normalizer.normalize.assert_not_called()


class BuildServiceTests(unittest.TestCase):

    def test_offline_config_wires_fallback_and_thresholds(self):
        cfg = Config(env={})
        cfg.set("min_usable", "2")
        svc = build_service(cfg)
        self.assertIsInstance(svc.source, FallbackSource)
        self.assertIsInstance(svc.normalizer.fallback, FallbackSource)
        self.assertEqual(svc.normalizer.min_usable, 2)
        self.assertEqual(svc.normalizer.target_size, 5)

    def test_remote_config_keeps_local_fallback_for_normalizer(self):
        svc = build_service(Config(env={"AI_GATEWAY_URL": "http://gw"}))
        self.assertIsInstance(svc.source, CompletionSource)
        self.assertIsInstance(svc.normalizer.fallback, FallbackSource)


if __name__ == "__main__":
    unittest.main()
