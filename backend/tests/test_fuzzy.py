"""
PerkBoard Backend - Approximate Matching Unit Tests
=====================================================

What we test:
    ✅ Typos within the threshold still match
    ✅ Unrelated words never match
    ✅ A long word does not match a short field that merely contains it
    ✅ Results are ordered best-first, ties in input order
"""

from types import SimpleNamespace

import pytest

from app.services.fuzzy import DEFAULT_THRESHOLD, rank_matches, similarity


def _named(*names):
    return [SimpleNamespace(name=name) for name in names]


class TestSimilarity:

    def test_exact_word_inside_longer_text(self):
        assert similarity("hard", "Dead Hard") == 100

    def test_case_and_punctuation_ignored(self):
        assert similarity("HEX", "Hex: Ruin") == 100

    def test_empty_inputs_score_zero(self):
        assert similarity("", "Dead Hard") == 0
        assert similarity("dead", "") == 0
        assert similarity("dead", None) == 0


class TestRankMatches:

    def test_typo_matches(self):
        perks = _named("Sprint Burst", "Bond")
        assert [p.name for p in rank_matches("sprintt", perks, ("name",))] == ["Sprint Burst"]

    def test_unrelated_word_does_not_match(self):
        assert rank_matches("zzzz", _named("Sprint Burst", "Dead Hard"), ("name",)) == []

    def test_long_word_does_not_match_short_field(self):
        assert rank_matches("deadhardsprint", _named("Dead"), ("name",)) == []

    def test_best_match_first(self):
        perks = _named("Kindrd", "Kindred")
        assert [p.name for p in rank_matches("kindred", perks, ("name",))] == ["Kindred", "Kindrd"]

    def test_ties_keep_input_order(self):
        first, second = _named("Dead Hard", "Dead Hard")
        assert rank_matches("dead", [first, second], ("name",)) == [first, second]

    def test_best_key_wins(self):
        post = SimpleNamespace(name="Gen rush", description="Runs Sprint Burst")
        assert rank_matches("sprint", [post], ("name", "description")) == [post]

    def test_missing_attribute_is_ignored(self):
        item = SimpleNamespace(name="Bond")
        assert rank_matches("bond", [item], ("name", "description")) == [item]

    @pytest.mark.parametrize("threshold, expected", [(0.0, []), (DEFAULT_THRESHOLD, ["Bond"])])
    def test_threshold_controls_tolerance(self, threshold, expected):
        matches = rank_matches("bondd", _named("Bond"), ("name",), threshold)
        assert [p.name for p in matches] == expected
