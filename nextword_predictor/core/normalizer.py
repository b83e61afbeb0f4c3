# nextword_predictor/core/normalizer.py
"""
PredictionNormalizer - turns whatever a source produced into a PredictionSet.

Steps (in order):
 1. trim tokens, drop empties
 2. dedupe by exact token, first occurrence wins
 3. fewer than `min_usable` unique -> discard, use the fallback generator instead
 4. between `min_usable` and `target_size - 1` -> pad with unused fallback words
 5. truncate to `target_size`
 6. stable sort by weight, descending
 7. emit Prediction(word, probability=weight)

A set shorter than target_size after padding means the vocabulary ran out. That is
a legal result, not an error (unless strict=True is asked for).
"""

from __future__ import annotations

from typing import Iterable, List

from nextword_predictor.core.errors import ExhaustionError
from nextword_predictor.core.protocols import (
    Candidate,
    CandidateList,
    FallbackGeneratorProtocol,
    Prediction,
    PredictionSet,
)
from nextword_predictor.utils.logger_utils import Log

DEFAULT_MIN_USABLE = 3
DEFAULT_TARGET_SIZE = 5


def clean_candidates(raw: Iterable[Candidate]) -> CandidateList:
    """Steps 1-2: trim, drop empty tokens, keep the first occurrence of each token."""
    seen = set()
    out: CandidateList = []
    for token, weight in raw:
        word = str(token).strip()
        if not word or word in seen:
            continue
        seen.add(word)
        out.append((word, float(weight)))
    return out


class PredictionNormalizer:
    """
    Owns the "always five, always unique, always ordered" contract.

    The fallback generator is injected so tests can hand in a seeded or
    fixed-output one.
    """

    def __init__(self,
                 fallback: FallbackGeneratorProtocol,
                 min_usable: int = DEFAULT_MIN_USABLE,
                 target_size: int = DEFAULT_TARGET_SIZE):
        if target_size < 1:
            raise ValueError("target_size must be positive")
        if not 1 <= min_usable <= target_size:
            raise ValueError("need 1 <= min_usable <= target_size")
        self.fallback = fallback
        self.min_usable = int(min_usable)
        self.target_size = int(target_size)

    def normalize(self, raw: Iterable[Candidate], source_text: str, strict: bool = False) -> PredictionSet:
        cands = clean_candidates(raw)

        if len(cands) < self.min_usable:
            Log.info(f"[Normalizer] {len(cands)} usable candidates, substituting fallback")
            cands = clean_candidates(self.fallback.generate(source_text))

        if self.min_usable <= len(cands) < self.target_size:
            cands = self._pad(cands, source_text)

        cands = cands[:self.target_size]
        # sort() is stable, so equal weights keep input order
        cands.sort(key=lambda kv: -kv[1])

        result = PredictionSet([Prediction(w, p) for w, p in cands], target_size=self.target_size)
        if len(result) < self.target_size:
            Log.warning(f"[Normalizer] only {len(result)} predictions for {source_text!r} (vocabulary exhausted)")
            if strict:
                raise ExhaustionError(f"only {len(result)} of {self.target_size} predictions available", result)
        return result

    def _pad(self, cands: CandidateList, source_text: str) -> CandidateList:
        """Step 4: append unused fallback words, highest weight first."""
        present = {w for w, _ in cands}
        extra = [(w, p) for w, p in clean_candidates(self.fallback.generate(source_text))
                 if w not in present]
        extra.sort(key=lambda kv: -kv[1])
        padded: List[Candidate] = list(cands)
        for cand in extra:
            if len(padded) >= self.target_size:
                break
            padded.append(cand)
        if len(padded) > len(cands):
            Log.debug(f"[Normalizer] padded {len(padded) - len(cands)} fallback words")
        return padded
