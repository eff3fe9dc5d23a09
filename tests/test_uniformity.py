"""Tests for the uniformity self-test and the statistics behind it."""

import math

import pytest

from keyforge.analyzers.uniformity import UniformityTester
from keyforge.core.errors import EmptyAlphabetError
from keyforge.core.models import CharacterClasses, GenerationPolicy
from keyforge.core.random_source import SeededRandomSource
from shared.math_utils import (
    chi_squared_test,
    decimal_digits,
    falling_factorial,
    format_large_int,
    upper_incomplete_gamma,
)


class StuckSource:
    """A source that always returns zero."""

    def randbelow(self, n):
        return 0


class TestUniformityTester:
    def test_seeded_source_passes(self):
        tester = UniformityTester(
            samples=500, length=32, significance=0.001, rng=SeededRandomSource(7)
        )
        result = tester.run()
        assert result.passed
        assert result.alphabet_size == 88
        assert result.degrees_of_freedom == 87
        assert result.sample_symbols == 500 * 32
        assert result.expected_count == pytest.approx(500 * 32 / 88)

    def test_stuck_source_fails(self):
        tester = UniformityTester(samples=100, length=32, rng=StuckSource())
        result = tester.run()
        assert not result.passed
        assert result.p_value < 1e-6
        assert result.max_count == 3200
        assert result.min_count == 0

    def test_uses_policy_alphabet(self, digits_policy):
        tester = UniformityTester(samples=200, length=10, rng=SeededRandomSource(1))
        result = tester.run(digits_policy)
        assert result.alphabet_size == 10
        assert result.sample_symbols == 2000

    def test_too_few_samples(self):
        with pytest.raises(ValueError, match="too few"):
            UniformityTester(samples=1, length=1, rng=SeededRandomSource(1)).run()

    def test_empty_alphabet(self):
        policy = GenerationPolicy(
            classes=CharacterClasses(upper=False, lower=False, digits=False, symbols=False)
        )
        with pytest.raises(EmptyAlphabetError):
            UniformityTester(rng=SeededRandomSource(1)).run(policy)

    @pytest.mark.parametrize(
        "kwargs",
        [{"samples": 0}, {"length": 0}, {"significance": 0.0}, {"significance": 1.0}],
    )
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            UniformityTester(**kwargs)


class TestChiSquared:
    def test_two_categories(self):
        chi2, p = chi_squared_test([60, 40], [50, 50])
        assert chi2 == pytest.approx(4.0)
        assert p == pytest.approx(0.0455, abs=1e-4)

    def test_three_categories(self):
        chi2, p = chi_squared_test([20, 30, 10], [20, 20, 20])
        assert chi2 == pytest.approx(10.0)
        assert p == pytest.approx(math.exp(-5))

    def test_perfect_fit(self):
        assert chi_squared_test([5, 5, 5], [5, 5, 5]) == (0.0, 1.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            chi_squared_test([1, 2], [1, 2, 3])

    def test_non_positive_expected(self):
        with pytest.raises(ValueError):
            chi_squared_test([1, 2], [0, 3])

    def test_incomplete_gamma_small_x_uses_series(self):
        # Q(1, x) = exp(-x)
        assert upper_incomplete_gamma(1.0, 0.5) == pytest.approx(math.exp(-0.5))


@pytest.mark.parametrize("n, k, expected", [(6, 0, 1), (6, 3, 120), (6, 6, 720), (3, 5, 0)])
def test_falling_factorial(n, k, expected):
    assert falling_factorial(n, k) == expected


def test_falling_factorial_rejects_negative():
    with pytest.raises(ValueError):
        falling_factorial(-1, 2)


@pytest.mark.parametrize(
    "n, digits",
    [(0, 1), (9, 1), (10, 2), (99, 2), (100, 3), (2**64, 20), (10**4500 - 1, 4500), (10**4500, 4501)],
    ids=lambda v: f"digits{v}" if isinstance(v, int) and v < 10**20 else "huge",
)
def test_decimal_digits(n, digits):
    assert decimal_digits(n) == digits


def test_format_large_int():
    assert format_large_int(88**16) == str(88**16)
    assert format_large_int(123 * 10**200) == "1.23e+202"
    assert format_large_int(88**4096).endswith("e+7964")
    assert format_large_int(123456, exact_digits=3) == "1.23e+5"
