"""
nextword_predictor.core

The prediction engine behind the UIs.
Contains:
 - prediction sources: remote completion/chat endpoints and the local fallback (sources)
 - the five-item normalization contract (PredictionNormalizer)
 - source + normalizer glue with fallback degradation (PredictionService)
 - the selection/advance state machine (SelectionController)
"""

from .errors import PredictorError, InputError, UpstreamError, ParseError, ExhaustionError
from .protocols import Prediction, PredictionSet, SessionState, Status
from .sources import FallbackSource, CompletionSource, ChatSource, build_source
from .normalizer import PredictionNormalizer
from .service import PredictionService, build_service
from .controller import SelectionController

__all__ = [
    "PredictorError",
    "InputError",
    "UpstreamError",
    "ParseError",
    "ExhaustionError",
    "Prediction",
    "PredictionSet",
    "SessionState",
    "Status",
    "FallbackSource",
    "CompletionSource",
    "ChatSource",
    "build_source",
    "PredictionNormalizer",
    "PredictionService",
    "build_service",
    "SelectionController",
]
