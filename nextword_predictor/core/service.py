# nextword_predictor/core/service.py
"""
PredictionService - source + normalizer, with fallback degradation.

Remote failures (UpstreamError, ParseError) are logged and treated as "the remote
gave nothing", which makes the normalizer substitute fallback output. Anything
else propagates to the SelectionController.
"""

from __future__ import annotations

import time

from nextword_predictor.core.errors import UpstreamError
from nextword_predictor.core.normalizer import PredictionNormalizer
from nextword_predictor.core.protocols import CandidateList, PredictionSet, PredictionSourceProtocol
from nextword_predictor.core.sources import build_fallback, build_source
from nextword_predictor.utils.logger_utils import Log


class PredictionService:

    def __init__(self, source: PredictionSourceProtocol, normalizer: PredictionNormalizer):
        self.source = source
        self.normalizer = normalizer
        self.last_latency = 0.0

    async def predict(self, text: str) -> PredictionSet:
        start = time.perf_counter()
        try:
            raw: CandidateList = await self.source.fetch(text)
        except UpstreamError as e:  # ParseError included
            Log.warning(f"[Service] {type(e).__name__}: {e} - degrading to fallback")
            raw = []

        with Log.time_block("normalize"):
            preds = self.normalizer.normalize(raw, text)
        self.last_latency = time.perf_counter() - start
        Log.metric("service.predict_latency", round(self.last_latency, 4), "s")
        return preds


def build_service(config, client=None, rng=None, offline: bool = False) -> PredictionService:
    """Wire a service from config: live source chosen once, fallback for the normalizer."""
    source = build_source(config, client=client, rng=rng, offline=offline)
    normalizer = PredictionNormalizer(
        build_fallback(config, rng=rng),
        min_usable=int(config["min_usable"]),
        target_size=int(config["target_size"]),
    )
    return PredictionService(source, normalizer)
