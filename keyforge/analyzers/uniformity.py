"""
Uniformity Self-Test
=====================

Draws a batch of candidates from the Uniform generator and checks the
per-symbol frequencies against the uniform distribution with Pearson's
chi-squared goodness-of-fit test:

.. math::

    \\chi^2 = \\sum_{s \\in A} \\frac{(O_s - N/k)^2}{N/k}

with ``k - 1`` degrees of freedom, where ``N`` is the total number of
symbols drawn and ``k`` the alphabet size. The null hypothesis (every
symbol is equally likely) is rejected when the p-value falls below the
significance level (0.01 by default).

The test needs ``N >> k``; with fewer than five expected occurrences per
symbol the chi-squared approximation is unreliable and a
:class:`ValueError` is raised instead.

References:
    - Pearson, K. (1900). Philosophical Magazine, 50(302), 157-175.
    - Knuth, D. E. (1997). The Art of Computer Programming, Vol. 2,
      Section 3.3.1 -- the chi-square test.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from keyforge.core.errors import SampleSizeError
from keyforge.core.models import GenerationPolicy, Strategy, UniformityResult
from keyforge.core.random_source import SecureRandomSource, default_source
from keyforge.generators.charset import build_alphabet
from keyforge.generators.uniform import UniformGenerator
from shared.math_utils import chi_squared_test

MIN_EXPECTED_COUNT = 5.0


class UniformityTester:
    """Chi-squared test of Uniform generator output.

    Usage::

        tester = UniformityTester(samples=2000, length=32)
        result = tester.run(GenerationPolicy())
        print(f"chi2={result.chi_squared:.1f} p={result.p_value:.4f}")

    Args:
        samples: Number of candidates to draw.
        length: Length of each candidate.
        significance: Rejection threshold for the p-value.
        rng: Random source under test (the OS CSPRNG by default).
    """

    def __init__(
        self,
        samples: int = 2000,
        length: int = 32,
        significance: float = 0.01,
        rng: Optional[SecureRandomSource] = None,
    ) -> None:
        if samples < 1 or length < 1:
            raise ValueError("samples and length must be at least 1")
        if not 0.0 < significance < 1.0:
            raise ValueError("significance must be between 0 and 1")
        self.samples = samples
        self.length = length
        self.significance = significance
        self.rng = rng if rng is not None else default_source()
        self._generator = UniformGenerator()

    def run(self, policy: Optional[GenerationPolicy] = None) -> UniformityResult:
        """Sample the generator under *policy* and test the frequencies.

        The policy's length and strategy are overridden; only its alphabet
        settings matter.

        Raises:
            EmptyAlphabetError: The policy selects no characters.
            SampleSizeError: Too few samples for the alphabet size.
        """
        base = policy if policy is not None else GenerationPolicy()
        sample_policy = base.model_copy(
            update={"length": self.length, "strategy": Strategy.UNIFORM}
        )
        alphabet = build_alphabet(sample_policy)
        total = self.samples * self.length
        expected = total / alphabet.size
        if expected < MIN_EXPECTED_COUNT:
            raise SampleSizeError(
                f"{total} samples are too few for a {alphabet.size}-symbol alphabet; "
                f"need at least {int(MIN_EXPECTED_COUNT * alphabet.size)}"
            )

        index = {symbol: i for i, symbol in enumerate(alphabet.symbols)}
        counts = np.zeros(alphabet.size, dtype=np.int64)
        for _ in range(self.samples):
            candidate = self._generator.generate(sample_policy, alphabet, self.rng)
            for symbol in candidate.value:
                counts[index[symbol]] += 1

        chi2, p_value = chi_squared_test(counts, np.full(alphabet.size, expected))
        return UniformityResult(
            alphabet_size=alphabet.size,
            sample_symbols=total,
            chi_squared=chi2,
            degrees_of_freedom=alphabet.size - 1,
            p_value=p_value,
            significance=self.significance,
            passed=p_value >= self.significance,
            expected_count=expected,
            min_count=int(counts.min()),
            max_count=int(counts.max()),
        )
