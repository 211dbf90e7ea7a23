"""Mine label/value candidate pairs out of raw document lines.

Three layouts are recognised, tried in order on every line:

1. ``Label: value`` / ``Label = value`` / ``Label - value``, optionally with
   leader dots (``Name.....: value``).
2. Column-aligned ``Label      value`` with no separator, split on a gap of
   two or more spaces or tabs.
3. A line holding only a label (and maybe a separator); the following line
   is its value and both lines are consumed.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .logging import get_logger
from .models import CandidatePair
from .normalizer import clean_line, normalize

__all__ = ["extract_candidates"]

logger = get_logger(__name__)

# Unicode letter or digit, whitespace, ( ) / & . -
LABEL = r"(?:[^\W_]|[\s()/&.\-])"
SEPARATOR = r"[:=\-]"

INLINE_PATTERN = re.compile(rf"^({LABEL}{{2,60}})\s*{SEPARATOR}\s*(?:\.+\s*)?(.+)$")
WIDE_GAP_PATTERN = re.compile(rf"^({LABEL}{{2,60}})[ \t]{{2,}}(.{{2,}})$")
LABEL_ONLY_PATTERN = re.compile(rf"^({LABEL}{{2,60}})\s*{SEPARATOR}?\s*$")


def _prepare_lines(lines: Iterable[Optional[str]]) -> List[str]:
    prepared = []
    for line in lines:
        cleaned = clean_line(line).strip()
        if cleaned:
            prepared.append(cleaned)
    return prepared


def _make_pair(label: str, value: str) -> Optional[CandidatePair]:
    label_raw = label.strip()
    value_raw = value.strip()
    label_normalized = normalize(label_raw)
    if not label_normalized or not value_raw:
        return None
    return CandidatePair(label_raw=label_raw, label_normalized=label_normalized, value_raw=value_raw)


def extract_candidates(lines: Iterable[Optional[str]]) -> List[CandidatePair]:
    """Return deduplicated candidate pairs in the order they appear."""
    prepared = _prepare_lines(lines)
    pairs: List[CandidatePair] = []

    i = 0
    while i < len(prepared):
        line = prepared[i]
        i += 1

        match = INLINE_PATTERN.match(line)
        if match:
            pair = _make_pair(match.group(1), match.group(2))
            if pair:
                pairs.append(pair)
                continue

        match = WIDE_GAP_PATTERN.match(line)
        if match:
            pair = _make_pair(match.group(1), match.group(2))
            if pair:
                pairs.append(pair)
                continue

        match = LABEL_ONLY_PATTERN.match(line)
        if match and i < len(prepared):
            pair = _make_pair(match.group(1), prepared[i])
            if pair:
                pairs.append(pair)
                i += 1

    seen = set()
    unique: List[CandidatePair] = []
    for pair in pairs:
        key = pair.key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(pair)

    logger.debug("candidates_extracted", lines=len(prepared), pairs=len(pairs), unique=len(unique))
    return unique
