"""Tests for fuzzy name and menu matching."""

import pytest

import services.menu_matcher as menu_matcher
from services.menu_matcher import (
    fuzz_threshold,
    matches,
    matches_name,
    matches_text,
    rank_match_fold,
    safe_rank_match_fold,
)


class TestFuzzThreshold:
    """Tests for length-scaled tolerance."""

    @pytest.mark.parametrize(
        "length,expected",
        [(0, 1), (1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (20, 3)],
    )
    def test_boundaries(self, length, expected):
        assert fuzz_threshold(length) == expected

    def test_monotonic(self):
        values = [fuzz_threshold(n) for n in range(30)]

        assert values == sorted(values)


class TestRankMatchFold:
    """Tests for the approximate distance."""

    def test_equal_after_folding(self):
        assert rank_match_fold("kottbullar", "köttbullar") == 0

    def test_counts_unmatched_characters(self):
        assert rank_match_fold("thaigrden", "thaigarden") == 1

    def test_not_a_subsequence(self):
        assert rank_match_fold("sushi", "thaigarden") == -1

    def test_query_longer_than_text(self):
        assert rank_match_fold("pizzeria", "pizza") == -1

    def test_empty_query(self):
        assert rank_match_fold("", "abc") == 3

    def test_safe_variant_contains_failures(self, monkeypatch):
        """Test that a failing comparison becomes None instead of raising."""

        def broken(query, text):
            raise ValueError("boom")

        monkeypatch.setattr(menu_matcher, "rank_match_fold", broken)

        assert safe_rank_match_fold("abc", "abcd") is None


class TestMatchesName:
    """Tests for restaurant name matching."""

    def test_substring(self):
        assert matches_name("Pizzeria Napoli", "NAPOLI", fuzz_threshold(6))

    def test_normalized_substring(self):
        assert matches_name("Bar & Kök 54", "kök54", fuzz_threshold(5))

    def test_diacritics_and_case_folded(self):
        assert matches_name("Köttbullar", "kottbullar", fuzz_threshold(10))

    def test_typo_within_threshold(self):
        assert matches_name("Thai Garden", "thaigrden", fuzz_threshold(9))

    def test_whole_name_folded(self):
        assert matches_name("Café Linné", "cafe linne", fuzz_threshold(10))

    def test_too_distant(self):
        """Test that a subsequence leaving too many letters over is rejected."""
        assert not matches_name("Café Linné", "Linne", fuzz_threshold(5))

    def test_unrelated(self):
        assert not matches_name("Thai Garden", "sushi", fuzz_threshold(5))
        assert not matches_name("Pizza Hut", "pizzza", fuzz_threshold(6))


class TestMatchesText:
    """Tests for menu text matching."""

    def test_containment_skips_approximate_step(self, monkeypatch):
        """Test that containment succeeds before the approximate step runs."""

        def fail(query, text):
            raise AssertionError("approximate step must not run")

        monkeypatch.setattr(menu_matcher, "safe_rank_match_fold", fail)

        assert matches_text("Ullevi-burgare med pommes", "ullevi", fuzz_threshold(6))
        assert matches_text("Ullevi-burgare", "ullevi burgare", fuzz_threshold(13))

    def test_empty_normalized_query(self):
        assert not matches_text("b", "!!", fuzz_threshold(0))

    def test_faulty_comparison_is_no_match(self, monkeypatch):
        def broken(query, text):
            raise TypeError("bad")

        monkeypatch.setattr(menu_matcher, "rank_match_fold", broken)

        assert not matches_text("köttbullar", "kottbullar", 3)

    def test_invalid_code_points(self):
        assert matches("abc\ud800 def", "abc")
        assert not matches("\udc80", "xyz")


class TestMatches:
    """Tests for the generic matcher."""

    @pytest.mark.parametrize(
        "field,query",
        [
            ("Dagens fisk med potatis", "FISK"),
            ("Veckans vegetariska", "vegetariska"),
            ("a", "a"),
            ("Lång meny med många rätter och desserter", "med många rätter och"),
        ],
    )
    def test_substring_always_matches(self, field, query):
        assert matches(field, query)

    def test_threshold_uses_normalized_length(self):
        """Test that punctuation does not widen the tolerance."""
        assert not matches("aXbXcXd", "a-b-c-d")
        assert matches("aXbXcd", "a-b-c-d")
