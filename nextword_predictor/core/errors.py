# nextword_predictor/core/errors.py
"""
Error taxonomy for the prediction pipeline.

 - InputError: caller supplied nothing to predict from
 - UpstreamError: remote endpoint failed (status, network, malformed envelope)
 - ParseError: remote answered but the payload could not be read as candidates
 - ExhaustionError: not enough distinct words even after fallback padding
"""

from __future__ import annotations

from typing import Any, Optional


class PredictorError(Exception):
    """Base class for every error raised by the prediction pipeline."""


class InputError(PredictorError):
    pass


class UpstreamError(PredictorError):
    def __init__(self, msg: str, status_code: Optional[int] = None):
        super().__init__(msg)
        self.status_code = status_code


class ParseError(UpstreamError):
    pass


class ExhaustionError(PredictorError):
    """
    Raised only by PredictionNormalizer.normalize(strict=True).
    The short set is still usable and is carried on `.predictions`.
    """

    def __init__(self, msg: str, predictions: Any = None):
        super().__init__(msg)
        self.predictions = predictions
