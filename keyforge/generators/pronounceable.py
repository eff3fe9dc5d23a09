"""
Pronounceable Generator
========================

Alternates consonants (even positions) and vowels (odd positions), then
capitalises the first character: ``"Kavodire"``. Class flags are ignored;
this is a structural variant of uniform generation over two small
sub-alphabets, so its true keyspace is far below that of a uniform string
of the same length.
"""

from __future__ import annotations

from typing import Optional

from keyforge.core.models import Alphabet, Candidate, GenerationPolicy, Strategy
from keyforge.core.random_source import SecureRandomSource, choice
from keyforge.generators.base import BaseGenerator
from keyforge.generators.wordlist import CONSONANTS, VOWELS


class PronounceableGenerator(BaseGenerator):
    """Consonant/vowel alternation."""

    strategy = Strategy.PRONOUNCEABLE

    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        chars: list[str] = []
        keyspace = 1
        for i in range(policy.length):
            pool = CONSONANTS if i % 2 == 0 else VOWELS
            chars.append(choice(rng, pool))
            keyspace *= len(pool)

        value = "".join(chars)
        if value:
            value = value[0].upper() + value[1:]

        return Candidate(
            value=value,
            strategy=self.strategy,
            alphabet_size=self.nominal_alphabet_size(policy, alphabet),
            requested_length=policy.length,
            keyspace=keyspace,
        )

    def symbol_space(self, policy: GenerationPolicy) -> str:
        return CONSONANTS + VOWELS + CONSONANTS.upper()
