"""
Passphrase Generator
=====================

``word_count`` independent draws from the fixed word list (repeats
allowed), joined with the policy's separator.
"""

from __future__ import annotations

from typing import Optional

from keyforge.core.models import Alphabet, Candidate, GenerationPolicy, Strategy
from keyforge.core.random_source import SecureRandomSource, choice
from keyforge.generators.base import BaseGenerator
from keyforge.generators.wordlist import WORDS


class PassphraseGenerator(BaseGenerator):
    """Diceware-style word passphrases."""

    strategy = Strategy.PASSPHRASE

    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        words = [choice(rng, WORDS) for _ in range(policy.word_count)]
        value = policy.separator.join(words)
        return Candidate(
            value=value,
            strategy=self.strategy,
            alphabet_size=self.nominal_alphabet_size(policy, alphabet),
            requested_length=len(value),
            keyspace=len(WORDS) ** policy.word_count,
        )

    def symbol_space(self, policy: GenerationPolicy) -> str:
        return "".join(WORDS) + policy.separator
