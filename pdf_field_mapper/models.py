"""Domain models for extracted candidates and resolved field values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

NOT_FOUND = "not found"

STRATEGY_CANDIDATE = "candidate"
STRATEGY_INLINE_SCAN = "inline_scan"
STRATEGY_NEXT_LINE_SCAN = "next_line_scan"
STRATEGY_UNRESOLVED = "unresolved"


@dataclass(frozen=True, slots=True)
class CandidatePair:
    """Label/value pair mined from a single document line (or a label line and the one after it)."""

    label_raw: str
    label_normalized: str
    value_raw: str

    def key(self) -> Tuple[str, str]:
        """Return the (label_normalized, value_raw) deduplication key."""
        return (self.label_normalized, self.value_raw)


@dataclass(slots=True)
class FieldAssignment:
    """Value chosen for one expected field."""

    field: str
    value: str = NOT_FOUND
    strategy: str = STRATEGY_UNRESOLVED
    score: float = 0.0

    @property
    def found(self) -> bool:
        return self.strategy != STRATEGY_UNRESOLVED

    def as_tuple(self) -> Tuple[str, str]:
        return (self.field, self.value)

    def as_dict(self) -> dict:
        return {
            "field": self.field,
            "value": self.value,
            "strategy": self.strategy,
            "score": round(self.score, 4),
        }
