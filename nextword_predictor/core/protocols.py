# nextword_predictor/core/protocols.py
"""
Typed records and Protocol interfaces shared by the prediction pipeline.

Sources, the normalizer, the controller and the UIs depend on these small shapes
rather than on each other's concrete classes, so any piece can be swapped for a
stub in tests.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple, runtime_checkable
from typing_extensions import TypedDict


# Typed structures used across components ------------------------------------

Candidate = Tuple[str, float]  # raw (token, weight) straight from a source
CandidateList = List[Candidate]


class PredictionDict(TypedDict):
    """JSON shape of a single prediction, as printed by `nextword predict`."""
    word: str
    probability: float


@dataclass(frozen=True)
class Prediction:
    word: str
    probability: float

    def to_dict(self) -> PredictionDict:
        return {"word": self.word, "probability": self.probability}


class PredictionSet:
    """
    Immutable, ranked sequence of predictions for one input text.

    Ordered by probability descending (ties keep first-seen order) and free of
    duplicate words. Normally holds exactly `target_size` entries; a shorter set
    means the vocabulary ran out.
    """

    __slots__ = ("_items", "target_size")

    def __init__(self, items: Sequence[Prediction] = (), target_size: int = 5):
        self._items: Tuple[Prediction, ...] = tuple(items)
        self.target_size = target_size

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Prediction]:
        return iter(self._items)

    def __getitem__(self, idx: int) -> Prediction:
        return self._items[idx]

    def __bool__(self) -> bool:
        return bool(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PredictionSet):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        inner = ", ".join(f"{p.word}={p.probability:.3f}" for p in self._items)
        return f"PredictionSet([{inner}])"

    @property
    def is_full(self) -> bool:
        return len(self._items) == self.target_size

    @property
    def exhausted(self) -> bool:
        """True for a non-empty set that came up short of target_size."""
        return 0 < len(self._items) < self.target_size

    def words(self) -> List[str]:
        return [p.word for p in self._items]

    def to_dict(self) -> dict:
        return {"predictions": [p.to_dict() for p in self._items]}


EMPTY_SET = PredictionSet()


class Status(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of one prediction session. Replaced wholesale by the controller on
    every transition; UIs only ever read it.
    """
    text: str = ""
    predictions: PredictionSet = field(default_factory=PredictionSet)
    status: Status = Status.IDLE
    error_message: Optional[str] = None


# Protocols ------------------------------------------------------------------

@runtime_checkable
class PredictionSourceProtocol(Protocol):
    """Anything that can propose weighted next-word candidates for a text."""

    async def fetch(self, text: str) -> CandidateList:
        """
        Return raw (token, weight) pairs. Remote implementations may raise
        UpstreamError/ParseError; the fallback implementation never raises.
        """
        ...


@runtime_checkable
class FallbackGeneratorProtocol(Protocol):
    """Synchronous local generator used by the normalizer for padding/recovery."""

    def generate(self, text: str) -> CandidateList:
        ...


@runtime_checkable
class StateListener(Protocol):
    def __call__(self, state: SessionState) -> None:
        ...
