"""Composite similarity between an expected field name and a document label."""

from __future__ import annotations

from Levenshtein import distance as levenshtein_distance

from .normalizer import normalize, tokenize

__all__ = ["score_label", "jaccard", "edit_similarity"]

EXACT_WEIGHT = 0.65
CONTAINMENT_WEIGHT = 0.25
TOKEN_WEIGHT = 0.6
EDIT_WEIGHT = 0.35


def jaccard(a: str, b: str) -> float:
    """Token-set Jaccard similarity; two empty token sets score 0."""
    left = set(tokenize(a))
    right = set(tokenize(b))
    union = len(left | right) or 1
    return len(left & right) / union


def edit_similarity(a: str, b: str) -> float:
    """``1 - distance / longest`` on the normalized forms, floored at 0."""
    h = normalize(a)
    k = normalize(b)
    max_len = max(len(h), len(k)) or 1
    dist = levenshtein_distance(h, k)
    return 1 - min(dist / max_len, 1)


def score_label(header: str, label: str) -> float:
    """Score how well ``label`` names the expected field ``header``, in [0, 1].

    Every term accumulates, so an exact match also collects the containment,
    token and edit bonuses before clamping.
    """
    h = normalize(header)
    k = normalize(label)
    if not h or not k:
        return 0.0

    score = 0.0
    if h == k:
        score += EXACT_WEIGHT
    if h in k or k in h:
        score += CONTAINMENT_WEIGHT
    score += TOKEN_WEIGHT * jaccard(h, k)
    score += EDIT_WEIGHT * edit_similarity(h, k)

    return max(0.0, min(1.0, score))
