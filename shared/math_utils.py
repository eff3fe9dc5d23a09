"""
KeyForge Mathematical Utilities
================================

Statistics and combinatorics used by the entropy estimator and the
uniformity self-test:

* ``falling_factorial`` for exact no-repeat keyspaces, so
  crack-time buckets never go through a lossy float;
* ``decimal_digits`` and ``format_large_int`` for keyspaces too long
  to pass through ``str()``;
* Pearson's chi-squared goodness-of-fit test with a p-value from the
  regularised upper incomplete gamma function (no SciPy dependency).

References:
    [1] Pearson, K. (1900). On the Criterion that a Given System of
        Deviations ... Philosophical Magazine, 50(302), 157-175.
    [2] Press, W. H. et al. (2007). Numerical Recipes (3rd ed.).
        Cambridge University Press, Section 6.2.
    [3] Knuth, D. E. (1997). The Art of Computer Programming, Vol. 2:
        Seminumerical Algorithms (3rd ed.), Section 3.3.1.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.floating]


# ========================== Combinatorics ==================================


def falling_factorial(n: int, k: int) -> int:
    """Return ``n * (n-1) * ... * (n-k+1)`` -- ordered draws without replacement.

    ``k == 0`` yields 1; ``k > n`` yields 0.
    """
    if k < 0 or n < 0:
        raise ValueError("n and k must be non-negative")
    if k > n:
        return 0
    return math.perm(n, k)


# ======================== Large integers ===================================

# Integers longer than this are written in scientific notation.
EXACT_DIGITS = 100


def decimal_digits(n: int) -> int:
    """Number of decimal digits of ``n >= 0``, computed without ``str(n)``.

    Keyspaces of long candidates run to thousands of digits, past the
    interpreter's int-to-str conversion limit.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    if n < 10:
        return 1
    digits = int((n.bit_length() - 1) * math.log10(2)) + 1
    if n >= 10 ** digits:
        digits += 1
    elif n < 10 ** (digits - 1):
        digits -= 1
    return digits


def format_large_int(n: int, exact_digits: int = EXACT_DIGITS) -> str:
    """``str(n)`` up to *exact_digits* digits, else ``"1.23e+4276"`` (truncated)."""
    digits = decimal_digits(n)
    if digits <= exact_digits:
        return str(n)
    lead = str(n // 10 ** (digits - 3))
    return f"{lead[0]}.{lead[1:]}e+{digits - 1}"


# ======================== Statistical Tests ================================


def chi_squared_test(
    observed: FloatArray | Sequence[float],
    expected: FloatArray | Sequence[float],
) -> tuple[float, float]:
    """Perform Pearson's chi-squared goodness-of-fit test.

    .. math::

        \\chi^2 = \\sum_i \\frac{(O_i - E_i)^2}{E_i}

    with ``k - 1`` degrees of freedom. The p-value is
    ``Q(dof / 2, chi2 / 2)``, equivalent to ``scipy.stats.chi2.sf``.

    Args:
        observed: Observed counts per category.
        expected: Expected counts per category.

    Returns:
        Tuple of ``(chi2_statistic, p_value)``.

    Raises:
        ValueError: If the shapes differ or an expected count is not positive.
    """
    obs = np.asarray(observed, dtype=np.float64)
    exp = np.asarray(expected, dtype=np.float64)

    if obs.shape != exp.shape:
        raise ValueError("Observed and expected arrays must have the same shape")
    if np.any(exp <= 0):
        raise ValueError("Expected counts must be > 0")

    chi2 = float(np.sum((obs - exp) ** 2 / exp))
    dof = obs.size - 1
    if dof <= 0:
        return chi2, 1.0

    return chi2, upper_incomplete_gamma(dof / 2.0, chi2 / 2.0)


def upper_incomplete_gamma(a: float, x: float) -> float:
    """Regularised upper incomplete gamma ``Q(a, x) = 1 - P(a, x)``.

    Series expansion below ``x < a + 1``, Lentz continued fraction above
    (Numerical Recipes, Section 6.2).
    """
    if a <= 0.0:
        raise ValueError("Shape parameter a must be > 0")
    if x <= 0.0:
        return 1.0
    if x < a + 1.0:
        return max(0.0, 1.0 - _lower_gamma_series(a, x))
    return min(1.0, _upper_gamma_fraction(a, x))


def _lower_gamma_series(a: float, x: float) -> float:
    """``P(a, x)`` by its power series."""
    term = 1.0 / a
    total = term
    denom = a
    for _ in range(500):
        denom += 1.0
        term *= x / denom
        total += term
        if abs(term) < abs(total) * 1e-15:
            break
    return total * math.exp(-x + a * math.log(x) - math.lgamma(a))


def _upper_gamma_fraction(a: float, x: float) -> float:
    """``Q(a, x)`` by the modified Lentz continued fraction."""
    tiny = 1e-300
    b = x + 1.0 - a
    c = 1.0 / tiny
    d = 1.0 / b
    result = d
    for i in range(1, 500):
        an = -i * (i - a)
        b += 2.0
        d = an * d + b
        d = tiny if abs(d) < tiny else d
        c = b + an / c
        c = tiny if abs(c) < tiny else c
        d = 1.0 / d
        step = d * c
        result *= step
        if abs(step - 1.0) < 1e-15:
            break
    return result * math.exp(-x + a * math.log(x) - math.lgamma(a))
