"""
Name similarity scoring.

Names are compared by normalized Levenshtein similarity:
1 - edit_distance / max(len(a), len(b)), unit cost for insertions, deletions
and substitutions. No suffix or phonetic normalization is applied.
"""
from __future__ import annotations

from typing import Optional, Tuple

import pandas as pd
from rapidfuzz.distance import Levenshtein

from .config import MAYBE_THRESHOLD, TRUE_THRESHOLD
from .schema import MatchOutcome


def normalize_name(value, *, casefold: bool = False) -> Optional[str]:
    """
    Lower-case a name for comparison; None for missing values (None, NaN, pd.NA).

    casefold=True applies Unicode case folding instead of str.lower(), e.g. so
    that "Straße" and "STRASSE" compare equal.
    """
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        # list-like values are not scalars; fall through to str()
        pass
    s = str(value)
    return s.casefold() if casefold else s.lower()


def name_similarity(a: str, b: str) -> Optional[float]:
    """Similarity in [0, 1]; None when both names are empty."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return None
    return 1.0 - Levenshtein.distance(a, b) / max_len


def classify_similarity(similarity: Optional[float]) -> MatchOutcome:
    if similarity is None:
        return MatchOutcome.FALSE_MATCH
    if similarity >= TRUE_THRESHOLD:
        return MatchOutcome.TRUE_MATCH
    if similarity >= MAYBE_THRESHOLD:
        return MatchOutcome.MAYBE_MATCH
    return MatchOutcome.FALSE_MATCH


def score_names(a: Optional[str], b: Optional[str]) -> Tuple[Optional[float], MatchOutcome]:
    """Score two already-normalized names. A missing name is FALSE without comparison."""
    if a is None or b is None:
        return None, MatchOutcome.FALSE_MATCH
    similarity = name_similarity(a, b)
    return similarity, classify_similarity(similarity)
