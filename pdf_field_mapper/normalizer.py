"""Text canonicalization used for label comparison."""

from __future__ import annotations

import re
from typing import List, Optional

__all__ = ["clean_line", "normalize", "tokenize"]

NBSP = "\u00A0"

# Hyphen, figure dash, en dash, em dash, minus sign
DASH_PATTERN = re.compile(r"[\u2010\u2012\u2013\u2014\u2212]")
# Full-width colon, small colon
COLON_PATTERN = re.compile(r"[\uFF1A\uFE55]")
# Anything but letters, digits, whitespace and - ( ) / & .
DISALLOWED_PATTERN = re.compile(r"[^\w\s\-()/&.]|_")
WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_line(text: Optional[str]) -> str:
    """Map NBSP, dash and colon variants to ASCII without touching anything else."""
    t = (text or "").replace(NBSP, " ")
    t = DASH_PATTERN.sub("-", t)
    return COLON_PATTERN.sub(":", t)


def normalize(text: Optional[str]) -> str:
    """Return the comparison form of ``text``. Never raises; ``None`` becomes ``""``."""
    # 1) NBSP to plain space
    t = (text or "").replace(NBSP, " ")

    # 2) Lower case
    t = t.lower()

    # 3) + 4) Dash and colon variants to ASCII
    t = DASH_PATTERN.sub("-", t)
    t = COLON_PATTERN.sub(":", t)

    # 5) Keep letters, digits, whitespace and a little punctuation
    t = DISALLOWED_PATTERN.sub("", t)

    # 6) Collapse whitespace and trim
    return WHITESPACE_PATTERN.sub(" ", t).strip()


def tokenize(text: Optional[str]) -> List[str]:
    return [token for token in normalize(text).split(" ") if token]
