"""
Structurally Constrained Generators
====================================

Variants of uniform generation that restrict symbol reuse:

* :class:`NoConsecutiveGenerator` -- no symbol equals its predecessor.
  A clashing pick is redrawn, at most :data:`MAX_REDRAWS` times per
  position. Past that budget the repeat is accepted so generation always
  terminates, and the position is counted in ``Candidate.forced_repeats``
  (only reachable with a one-symbol alphabet or a broken source).
* :class:`NoRepeatedGenerator` -- draws without replacement. When the
  requested length exceeds the alphabet size it stops once the alphabet is
  exhausted and marks the candidate ``truncated``.
"""

from __future__ import annotations

from typing import Optional

from shared.math_utils import falling_factorial

from keyforge.core.models import Alphabet, Candidate, GenerationPolicy, Strategy
from keyforge.core.random_source import SecureRandomSource, choice
from keyforge.generators.base import BaseGenerator

MAX_REDRAWS = 100


class NoConsecutiveGenerator(BaseGenerator):
    """Uniform picks with no two adjacent symbols equal."""

    strategy = Strategy.NO_CONSECUTIVE

    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        alphabet = self._require_alphabet(alphabet)
        symbols = alphabet.symbols
        out: list[str] = []
        forced = 0

        for _ in range(policy.length):
            pick = choice(rng, symbols)
            redraws = 0
            while out and pick == out[-1] and redraws < MAX_REDRAWS:
                pick = choice(rng, symbols)
                redraws += 1
            if out and pick == out[-1]:
                forced += 1
            out.append(pick)

        k = alphabet.size
        if k > 1:
            keyspace = k * (k - 1) ** (policy.length - 1)
        else:
            keyspace = 1

        return Candidate(
            value="".join(out),
            strategy=self.strategy,
            alphabet_size=k,
            requested_length=policy.length,
            keyspace=keyspace,
            forced_repeats=forced,
        )


class NoRepeatedGenerator(BaseGenerator):
    """Uniform picks without replacement."""

    strategy = Strategy.NO_REPEATED

    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        alphabet = self._require_alphabet(alphabet)
        remaining = list(alphabet.symbols)
        out: list[str] = []

        while len(out) < policy.length and remaining:
            out.append(remaining.pop(rng.randbelow(len(remaining))))

        return Candidate(
            value="".join(out),
            strategy=self.strategy,
            alphabet_size=alphabet.size,
            requested_length=policy.length,
            keyspace=max(1, falling_factorial(alphabet.size, len(out))),
            truncated=len(out) < policy.length,
        )
