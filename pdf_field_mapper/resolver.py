"""Pick a document value for every expected field.

Each field is resolved on its own, so two fields may end up bound to the
same candidate or line. Strategies, first hit wins:

1. best-scoring extracted candidate, if its score reaches ``MATCH_THRESHOLD``;
2. a line containing the field name followed by the value;
3. a line that is only the field name, taking the next line as the value;
4. ``NOT_FOUND``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .extractor import extract_candidates
from .logging import get_logger
from .models import (
    NOT_FOUND,
    STRATEGY_CANDIDATE,
    STRATEGY_INLINE_SCAN,
    STRATEGY_NEXT_LINE_SCAN,
    STRATEGY_UNRESOLVED,
    CandidatePair,
    FieldAssignment,
)
from .normalizer import clean_line, normalize
from .scorer import score_label

__all__ = ["MATCH_THRESHOLD", "resolve_fields", "resolve_text", "split_lines"]

logger = get_logger(__name__)

MATCH_THRESHOLD = 0.45
TRAILING_JUNK = "|;,"
LINE_BREAK_PATTERN = re.compile(r"\r?\n")
WHITESPACE_PATTERN = re.compile(r"\s+")


def split_lines(text: Optional[str]) -> List[str]:
    return LINE_BREAK_PATTERN.split(text or "")


def _field_pattern(field: str) -> str:
    """Escape ``field`` for use in a regex, letting any whitespace run match ``\\s*``."""
    return r"\s*".join(re.escape(part) for part in WHITESPACE_PATTERN.split(field))


def _best_candidate(field: str, candidates: Sequence[CandidatePair]) -> Tuple[int, float]:
    best_index, best_score = -1, 0.0
    for index, candidate in enumerate(candidates):
        score = score_label(field, candidate.label_normalized)
        if score > best_score:
            best_index, best_score = index, score
    return best_index, best_score


def _scan_inline(pattern: re.Pattern[str], cleaned_lines: Sequence[str]) -> Optional[str]:
    for line in cleaned_lines:
        match = pattern.search(line)
        if match:
            return match.group(1).strip()
    return None


def _scan_next_line(
    pattern: re.Pattern[str],
    normalized_lines: Sequence[str],
    raw_lines: Sequence[str],
) -> Optional[str]:
    for index in range(len(normalized_lines) - 1):
        if not pattern.match(normalized_lines[index]):
            continue
        following = raw_lines[index + 1].strip()
        if following:
            return following
    return None


@dataclass(frozen=True, slots=True)
class _DocumentLines:
    raw: List[str]
    cleaned: List[str]
    normalized: List[str]

    @classmethod
    def build(cls, raw_lines: Sequence[Optional[str]]) -> "_DocumentLines":
        raw = [line or "" for line in raw_lines]
        return cls(
            raw=raw,
            cleaned=[clean_line(line) for line in raw],
            normalized=[normalize(line) for line in raw],
        )


def _resolve_field(
    field: str,
    lines: _DocumentLines,
    candidates: Sequence[CandidatePair],
) -> FieldAssignment:
    best_index, best_score = _best_candidate(field, candidates)
    if best_index >= 0 and best_score >= MATCH_THRESHOLD:
        value = candidates[best_index].value_raw.strip().rstrip(TRAILING_JUNK)
        return FieldAssignment(field=field, value=value, strategy=STRATEGY_CANDIDATE, score=best_score)

    escaped = _field_pattern(field)

    inline = re.compile(rf"{escaped}\s*(?:[:=\-])?\s*(?:\.+\s*)?(.+)$", re.IGNORECASE)
    value = _scan_inline(inline, lines.cleaned)
    if value is not None:
        return FieldAssignment(field=field, value=value, strategy=STRATEGY_INLINE_SCAN, score=best_score)

    label_only = re.compile(rf"^{escaped}(\s*[:=\-]\s*)?$", re.IGNORECASE)
    value = _scan_next_line(label_only, lines.normalized, lines.raw)
    if value is not None:
        return FieldAssignment(field=field, value=value, strategy=STRATEGY_NEXT_LINE_SCAN, score=best_score)

    return FieldAssignment(field=field, value=NOT_FOUND, strategy=STRATEGY_UNRESOLVED, score=best_score)


def resolve_fields(
    expected_fields: Sequence[str],
    raw_lines: Sequence[Optional[str]],
    candidates: Optional[Sequence[CandidatePair]] = None,
) -> List[FieldAssignment]:
    """Resolve every expected field against ``raw_lines``, keeping field order.

    ``candidates`` may be passed when they were already extracted from the
    same ``raw_lines``; they must never come from another document.
    """
    lines = _DocumentLines.build(raw_lines)
    if candidates is None:
        candidates = extract_candidates(lines.raw)

    assignments = []
    for field in expected_fields:
        assignment = _resolve_field(field or "", lines, candidates)
        logger.debug(
            "field_resolved",
            field=assignment.field,
            strategy=assignment.strategy,
            score=round(assignment.score, 4),
        )
        assignments.append(assignment)

    resolved = sum(1 for assignment in assignments if assignment.found)
    logger.info("fields_resolved", fields=len(assignments), resolved=resolved, candidates=len(candidates))
    return assignments


def resolve_text(expected_fields: Sequence[str], text: Optional[str]) -> List[FieldAssignment]:
    return resolve_fields(expected_fields, split_lines(text))
