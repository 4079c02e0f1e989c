"""
Test Name Similarity Scoring

Normalized Levenshtein similarity and its TRUE / MAYBE / FALSE thresholds.
"""
import numpy as np
import pandas as pd
import pytest

from riversnap.schema import MatchOutcome
from riversnap.similarity import classify_similarity, name_similarity, normalize_name, score_names


class TestNormalizeName:
    """Lower-casing and missing-value handling."""

    def test_lowercases(self):
        assert normalize_name("ROCK River") == "rock river"

    @pytest.mark.parametrize("missing", [None, np.nan, pd.NA, float("nan")])
    def test_missing_values_are_none(self, missing):
        assert normalize_name(missing) is None

    def test_empty_string_is_not_missing(self):
        assert normalize_name("") == ""

    def test_non_string_names_are_stringified(self):
        assert normalize_name(42) == "42"

    def test_casefold_is_explicit(self):
        assert normalize_name("Straße") == "straße"
        assert normalize_name("Straße", casefold=True) == "strasse"


class TestNameSimilarity:
    """1 - edit_distance / max(len(a), len(b))."""

    def test_identical_after_normalization(self):
        assert name_similarity(normalize_name("Rock River"), normalize_name("ROCK River")) == 1.0

    def test_charlie_charley(self):
        """Two substitutions over 13 characters."""
        s = name_similarity("charlie creek", "charley creek")
        assert s == pytest.approx(11 / 13)
        assert classify_similarity(s) is MatchOutcome.MAYBE_MATCH

    def test_insertions_and_deletions_cost_one(self):
        assert name_similarity("mill creek", "mill crk") == pytest.approx(0.8)
        assert name_similarity("abc", "") == 0.0

    def test_symmetric(self):
        pairs = [
            ("david brook", "charley creek"),
            ("frank creek", "donkey creek"),
            ("a", "abcdef"),
            ("", "x"),
        ]
        for a, b in pairs:
            assert name_similarity(a, b) == name_similarity(b, a)

    def test_both_empty_is_undefined(self):
        assert name_similarity("", "") is None

    def test_range(self):
        for a, b in [("x", "y"), ("long name", "ln"), ("same", "same")]:
            assert 0.0 <= name_similarity(a, b) <= 1.0


class TestClassifySimilarity:
    """Fixed thresholds: >=0.90 TRUE, >=0.70 MAYBE, else FALSE."""

    def test_thresholds_inclusive(self):
        assert classify_similarity(0.9) is MatchOutcome.TRUE_MATCH
        assert classify_similarity(0.7) is MatchOutcome.MAYBE_MATCH

    def test_bands(self):
        assert classify_similarity(1.0) is MatchOutcome.TRUE_MATCH
        assert classify_similarity(0.89) is MatchOutcome.MAYBE_MATCH
        assert classify_similarity(0.75) is MatchOutcome.MAYBE_MATCH
        assert classify_similarity(0.6999) is MatchOutcome.FALSE_MATCH
        assert classify_similarity(0.0) is MatchOutcome.FALSE_MATCH

    def test_undefined_is_false(self):
        assert classify_similarity(None) is MatchOutcome.FALSE_MATCH

    def test_one_edit_in_ten(self):
        assert score_names("abcdefghij", "abcdefghix") == (pytest.approx(0.9), MatchOutcome.TRUE_MATCH)


class TestScoreNames:
    """Missing names short-circuit to FALSE without scoring."""

    def test_missing_name_is_false(self):
        assert score_names(None, "rock river") == (None, MatchOutcome.FALSE_MATCH)
        assert score_names("rock river", None) == (None, MatchOutcome.FALSE_MATCH)

    def test_both_empty_is_false(self):
        assert score_names("", "") == (None, MatchOutcome.FALSE_MATCH)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
