"""Tests for the strength breakdown scorer."""

import pytest

from keyforge.analyzers.composition import composition, infer_alphabet_size
from keyforge.analyzers.strength import (
    AFFIRMATIVE,
    SUGGEST_CASE,
    SUGGEST_COMPLEXITY,
    SUGGEST_DIGIT,
    SUGGEST_LENGTH,
    SUGGEST_LOWER,
    SUGGEST_REPEATS,
    SUGGEST_SEQUENCES,
    SUGGEST_SYMBOL,
    SUGGEST_UPPER,
    rate_strength,
    score_strength,
)
from keyforge.core.models import StrengthRating


class TestScoreStrength:
    def test_short_lowercase_word(self):
        result = score_strength("hgfkmtz")
        assert result.suggestions == [
            SUGGEST_LENGTH,
            SUGGEST_UPPER,
            SUGGEST_DIGIT,
            SUGGEST_SYMBOL,
            SUGGEST_CASE,
        ]
        assert result.length.score == 0

    def test_strong_password(self):
        result = score_strength("Tr0ub4dor&3xKq!Z")
        assert result.total == 12
        assert result.suggestions == [AFFIRMATIVE]
        assert result.patterns.feedback == "No weak patterns detected"
        assert result.rating == StrengthRating.VERY_STRONG
        assert result.percentage == 100

    def test_empty_string(self):
        result = score_strength("")
        assert result.total == 3
        assert result.suggestions == [
            SUGGEST_LENGTH,
            SUGGEST_UPPER,
            SUGGEST_LOWER,
            SUGGEST_DIGIT,
            SUGGEST_SYMBOL,
            SUGGEST_COMPLEXITY,
        ]

    @pytest.mark.parametrize(
        "text, score, suggestion",
        [
            ("aaa", 1, SUGGEST_REPEATS),
            ("abc123qwe", 1, SUGGEST_SEQUENCES),
            ("AAAbbb123", 1, SUGGEST_SEQUENCES),
        ],
    )
    def test_weak_patterns(self, text, score, suggestion):
        result = score_strength(text)
        assert result.patterns.score == score
        assert suggestion in result.suggestions
        assert result.patterns.feedback.startswith("Weak patterns:")

    def test_sequences_are_case_insensitive(self):
        assert SUGGEST_SEQUENCES in score_strength("xQWEx").suggestions

    @pytest.mark.parametrize("text, score", [("xxyyz", 2), ("xxxxyyyyzz", 0), ("abcd", 3)])
    def test_complexity(self, text, score):
        assert score_strength(text).complexity.score == score

    @pytest.mark.parametrize("text, score", [("a", 0), ("aB", 1), ("aB3", 2), ("aB3!", 3)])
    def test_variety(self, text, score):
        assert score_strength(text).variety.score == score

    @pytest.mark.parametrize("length, score", [(7, 0), (8, 1), (12, 2), (16, 3)])
    def test_length(self, length, score):
        assert score_strength("a" * length).length.score == score

    def test_suggestions_have_no_duplicates(self):
        result = score_strength("aaaaaa")
        assert len(result.suggestions) == len(set(result.suggestions))


class TestRateStrength:
    @pytest.mark.parametrize(
        "text, rating, pct",
        [
            ("", StrengthRating.VERY_WEAK, 16),
            ("password", StrengthRating.WEAK, 33),
            ("Password1", StrengthRating.GOOD, 66),
            ("Password1!", StrengthRating.STRONG, 83),
            ("Password123!", StrengthRating.VERY_STRONG, 100),
        ],
    )
    def test_levels(self, text, rating, pct):
        assert rate_strength(text) == (rating, pct)


class TestHelpers:
    def test_composition(self):
        comp = composition("Ab3!é")
        assert (comp.upper, comp.lower, comp.digit, comp.symbol) == (1, 1, 1, 2)
        assert comp.class_count == 4

    @pytest.mark.parametrize("text, size", [("aB3!", 88), ("abc", 26), ("aé", 27), ("", 0)])
    def test_infer_alphabet_size(self, text, size):
        assert infer_alphabet_size(text) == size
