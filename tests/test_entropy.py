"""Tests for the entropy and crack-time estimator."""

import math

import pytest

from keyforge.analyzers.entropy import (
    SECONDS_PER_BILLION_YEARS,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_YEAR,
    EntropyEstimator,
    estimate_candidate_entropy,
    estimate_entropy,
    format_crack_time,
)
from keyforge.core.models import EntropyConvention, GenerationPolicy, Strategy
from keyforge.core.orchestrator import generate_candidate


class TestFormatCrackTime:
    @pytest.mark.parametrize(
        "keyspace, expected",
        [
            (0, "<1s"),
            (59, "59 seconds"),
            (60, "1 minutes"),
            (SECONDS_PER_HOUR - 1, "59 minutes"),
            (SECONDS_PER_HOUR, "1 hours"),
            (SECONDS_PER_DAY, "1 days"),
            (SECONDS_PER_YEAR - 1, "364 days"),
            (SECONDS_PER_YEAR, "1 years"),
            (SECONDS_PER_YEAR * 999, "999 years"),
            (SECONDS_PER_BILLION_YEARS * 3, "3.0 billion years"),
            (SECONDS_PER_BILLION_YEARS * 5 // 2, "2.5 billion years"),
        ],
    )
    def test_bucket_boundaries(self, keyspace, expected):
        assert format_crack_time(keyspace, 1) == expected

    def test_long_billions_switch_to_scientific_notation(self):
        assert format_crack_time(SECONDS_PER_BILLION_YEARS * 10**14, 1) == (
            "100000000000000.0 billion years"
        )
        assert format_crack_time(SECONDS_PER_BILLION_YEARS * 123 * 10**20, 1) == (
            "1.23e+22 billion years"
        )

    def test_below_one_second(self):
        assert format_crack_time(999, 1000) == "<1s"
        assert format_crack_time(1000, 1000) == "1 seconds"


class TestEstimate:
    def test_printable_ascii_sixteen(self):
        result = estimate_entropy("x" * 16, 94)
        assert result.bits == pytest.approx(104.87, abs=0.01)
        assert result.crack_time.endswith("billion years")
        assert result.convention == EntropyConvention.NOMINAL
        assert result.alphabet_size == 94
        assert result.length == 16

    def test_default_alphabet_sixteen(self):
        assert estimate_entropy("y" * 16, 88).bits == pytest.approx(103.35, abs=0.01)

    def test_monotonic_in_length_and_alphabet(self):
        assert estimate_entropy("a" * 12, 62).bits > estimate_entropy("a" * 11, 62).bits
        assert estimate_entropy("a" * 12, 88).bits > estimate_entropy("a" * 12, 62).bits

    def test_huge_keyspace_does_not_overflow(self):
        result = estimate_entropy("z" * 4096, 88)
        assert math.isinf(result.crack_seconds)
        assert result.crack_time.endswith("e+7939 billion years")
        assert result.bits == pytest.approx(4096 * math.log2(88))

    def test_empty_input(self):
        result = estimate_entropy("", 88)
        assert result.bits == 0.0
        assert result.crack_time == "N/A"

    def test_non_positive_alphabet_rejected(self):
        with pytest.raises(ValueError):
            estimate_entropy("abc", 0)

    def test_single_symbol_alphabet(self):
        result = estimate_entropy("aaaa", 1)
        assert result.bits == 0.0
        assert result.crack_time == "<1s"

    def test_custom_guess_rate(self):
        result = EntropyEstimator(guesses_per_second=1).estimate("ab", 10)
        assert result.crack_time == "1 minutes"
        assert result.crack_seconds == 100.0
        assert result.guesses_per_second == 1

    @pytest.mark.parametrize("rate", [0, -5])
    def test_invalid_guess_rate(self, rate):
        with pytest.raises(ValueError):
            EntropyEstimator(guesses_per_second=rate)


class TestConventions:
    def test_structural_is_lower_for_patterns(self, rng):
        policy = GenerationPolicy(strategy=Strategy.PATTERN, pattern_template="word-number-symbol")
        candidate = generate_candidate(policy, rng=rng)
        nominal = estimate_candidate_entropy(candidate)
        structural = estimate_candidate_entropy(candidate, EntropyConvention.STRUCTURAL)
        assert structural.bits < nominal.bits
        assert structural.bits == pytest.approx(math.log2(candidate.keyspace))
        assert structural.alphabet_size is None

    def test_conventions_agree_for_uniform(self, default_policy, rng):
        candidate = generate_candidate(default_policy, rng=rng)
        nominal = estimate_candidate_entropy(candidate, EntropyConvention.NOMINAL)
        structural = estimate_candidate_entropy(candidate, EntropyConvention.STRUCTURAL)
        assert nominal.bits == pytest.approx(structural.bits)
        assert nominal.crack_time == structural.crack_time
