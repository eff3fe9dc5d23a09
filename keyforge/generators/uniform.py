"""
Uniform Generator
==================

``length`` independent picks, each uniform over the alphabet. With a
secure source whose ``randbelow`` is unbiased, every string of the right
length over the alphabet is equally likely; the keyspace is exactly
``k ** length``.
"""

from __future__ import annotations

from typing import Optional

from keyforge.core.models import Alphabet, Candidate, GenerationPolicy, Strategy
from keyforge.core.random_source import SecureRandomSource, choice
from keyforge.generators.base import BaseGenerator


class UniformGenerator(BaseGenerator):
    """Independent uniform symbol picks."""

    strategy = Strategy.UNIFORM

    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        alphabet = self._require_alphabet(alphabet)
        value = "".join(choice(rng, alphabet.symbols) for _ in range(policy.length))
        return Candidate(
            value=value,
            strategy=self.strategy,
            alphabet_size=alphabet.size,
            requested_length=policy.length,
            keyspace=alphabet.size ** policy.length,
        )
