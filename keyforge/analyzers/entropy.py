"""
Entropy & Crack-Time Estimator
===============================

Entropy of a candidate drawn uniformly from an alphabet of ``k`` symbols:

.. math::

    H = L \\cdot \\log_2 k

and the brute-force model assumes an attacker testing a fixed number of
guesses per second (10^9 by default, an offline fast-hash GPU rig) who has
to sweep the whole keyspace ``k^L``. The resulting duration is reported as
a coarse bucket: ``<1s``, ``N seconds``, ``N minutes``, ``N hours``,
``N days``, ``N years``, then ``X billion years``.

Keyspaces are Python integers and every bucket boundary is compared in
integer arithmetic, so a 4096-symbol candidate is bucketed exactly
instead of overflowing a float. Figures too long to print exactly are shown
in scientific notation, e.g. ``1.23e+40 billion years``.

Two keyspace conventions are available (see :class:`EntropyConvention`):
the nominal ``k^L`` figure, which overstates structured strategies, and the
structural count of outputs the strategy can actually produce.

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
    - NIST SP 800-63B (2017), Appendix A -- Strength of Memorized Secrets.
    - Bonneau, J. (2012). The Science of Guessing. IEEE S&P.
"""

from __future__ import annotations

import math

from shared.math_utils import decimal_digits, format_large_int

from keyforge.core.models import Candidate, EntropyConvention, EntropyResult

DEFAULT_GUESSES_PER_SECOND = 1_000_000_000

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3_600
SECONDS_PER_DAY = 86_400
SECONDS_PER_YEAR = 31_536_000
SECONDS_PER_MILLENNIUM = SECONDS_PER_YEAR * 1_000
SECONDS_PER_BILLION_YEARS = SECONDS_PER_YEAR * 1_000_000_000

NOT_APPLICABLE = "N/A"

# Past this many digits the billion-years figure is shown as "1.23e+N".
EXACT_BILLIONS_DIGITS = 15


def format_crack_time(keyspace: int, guesses_per_second: int) -> str:
    """Bucket the time needed to try *keyspace* guesses.

    Values inside a bucket are floored to whole units; the last bucket is
    rounded to one decimal place.
    """
    if keyspace < guesses_per_second:
        return "<1s"

    seconds = keyspace // guesses_per_second
    if seconds < SECONDS_PER_MINUTE:
        return f"{seconds} seconds"
    if seconds < SECONDS_PER_HOUR:
        return f"{seconds // SECONDS_PER_MINUTE} minutes"
    if seconds < SECONDS_PER_DAY:
        return f"{seconds // SECONDS_PER_HOUR} hours"
    if seconds < SECONDS_PER_YEAR:
        return f"{seconds // SECONDS_PER_DAY} days"
    if seconds < SECONDS_PER_MILLENNIUM:
        return f"{seconds // SECONDS_PER_YEAR} years"

    denom = guesses_per_second * SECONDS_PER_BILLION_YEARS
    tenths = (keyspace * 20 + denom) // (2 * denom)
    whole = tenths // 10
    if decimal_digits(whole) > EXACT_BILLIONS_DIGITS:
        return f"{format_large_int(whole, EXACT_BILLIONS_DIGITS)} billion years"
    return f"{whole}.{tenths % 10} billion years"


def _seconds(keyspace: int, guesses_per_second: int) -> float:
    try:
        return keyspace / guesses_per_second
    except OverflowError:
        return math.inf


class EntropyEstimator:
    """Computes entropy bits and crack-time buckets.

    Usage::

        estimator = EntropyEstimator()
        result = estimator.estimate("k#9Qz!2m", 88)
        print(f"{result.bits:.1f} bits, {result.crack_time}")

    Args:
        guesses_per_second: Attacker guess rate of the brute-force model.
    """

    def __init__(self, guesses_per_second: int = DEFAULT_GUESSES_PER_SECOND) -> None:
        if guesses_per_second <= 0:
            raise ValueError("guesses_per_second must be positive")
        self.guesses_per_second = int(guesses_per_second)

    def estimate(self, candidate: str | Candidate, alphabet_size: int) -> EntropyResult:
        """Nominal entropy of *candidate* over an alphabet of *alphabet_size*.

        An empty candidate yields ``bits=0`` and crack time ``"N/A"``.

        Raises:
            ValueError: *alphabet_size* is not positive for a non-empty
                candidate.
        """
        value = candidate.value if isinstance(candidate, Candidate) else candidate
        length = len(value)
        if length == 0:
            return self._empty(EntropyConvention.NOMINAL, alphabet_size)
        if alphabet_size < 1:
            raise ValueError("alphabet_size must be at least 1")

        keyspace = alphabet_size ** length
        return EntropyResult(
            bits=length * math.log2(alphabet_size),
            crack_time=format_crack_time(keyspace, self.guesses_per_second),
            crack_seconds=_seconds(keyspace, self.guesses_per_second),
            convention=EntropyConvention.NOMINAL,
            alphabet_size=alphabet_size,
            length=length,
            guesses_per_second=self.guesses_per_second,
        )

    def estimate_candidate(
        self,
        candidate: Candidate,
        convention: EntropyConvention = EntropyConvention.NOMINAL,
    ) -> EntropyResult:
        """Entropy of a generated candidate under either convention.

        ``NOMINAL`` rates the value against ``candidate.alphabet_size``.
        ``STRUCTURAL`` uses ``candidate.keyspace``, the exact number of
        outputs the generating strategy could have produced.
        """
        if EntropyConvention(convention) == EntropyConvention.NOMINAL:
            return self.estimate(candidate.value, candidate.alphabet_size)

        if not candidate.value:
            return self._empty(EntropyConvention.STRUCTURAL, None)

        keyspace = candidate.keyspace
        return EntropyResult(
            bits=math.log2(keyspace),
            crack_time=format_crack_time(keyspace, self.guesses_per_second),
            crack_seconds=_seconds(keyspace, self.guesses_per_second),
            convention=EntropyConvention.STRUCTURAL,
            alphabet_size=None,
            length=candidate.length,
            guesses_per_second=self.guesses_per_second,
        )

    def _empty(self, convention: EntropyConvention, alphabet_size: int | None) -> EntropyResult:
        return EntropyResult(
            bits=0.0,
            crack_time=NOT_APPLICABLE,
            crack_seconds=0.0,
            convention=convention,
            alphabet_size=alphabet_size,
            length=0,
            guesses_per_second=self.guesses_per_second,
        )


_default_estimator = EntropyEstimator()


def estimate_entropy(candidate: str | Candidate, effective_alphabet_size: int) -> EntropyResult:
    """Nominal entropy at the default 10^9 guesses/second model."""
    return _default_estimator.estimate(candidate, effective_alphabet_size)


def estimate_candidate_entropy(
    candidate: Candidate,
    convention: EntropyConvention = EntropyConvention.NOMINAL,
) -> EntropyResult:
    """Entropy of a generated candidate at the default guess rate."""
    return _default_estimator.estimate_candidate(candidate, convention)
