"""
Pattern Generator
==================

Fills a token template such as ``"word-number-symbol"``:

========  =================================================
Token     Output
========  =================================================
word      random list word, title-cased (``"Maple"``)
number    4-digit integer in [1000, 9999]
upper     one upper-case letter (post-exclusion)
lower     one lower-case letter (post-exclusion)
symbol    one symbol (post-exclusion)
========  =================================================

Separators in the template only delimit tokens; the output is the plain
concatenation of token outputs.
"""

from __future__ import annotations

from typing import Optional

from keyforge.core.models import (
    Alphabet,
    Candidate,
    CharClass,
    GenerationPolicy,
    Strategy,
)
from keyforge.core.random_source import SecureRandomSource, choice, randint
from keyforge.generators.base import BaseGenerator
from keyforge.generators.charset import DIGITS, class_pools
from keyforge.generators.wordlist import WORDS

NUMBER_LOW = 1000
NUMBER_HIGH = 9999

_TOKEN_CLASSES: dict[str, CharClass] = {
    "upper": CharClass.UPPER,
    "lower": CharClass.LOWER,
    "symbol": CharClass.SYMBOLS,
}


class PatternGenerator(BaseGenerator):
    """Template-driven generation."""

    strategy = Strategy.PATTERN

    def generate(
        self,
        policy: GenerationPolicy,
        alphabet: Optional[Alphabet],
        rng: SecureRandomSource,
    ) -> Candidate:
        pools = class_pools(policy)
        parts: list[str] = []
        keyspace = 1

        for token in policy.template_tokens:
            if token == "word":
                parts.append(choice(rng, WORDS).title())
                keyspace *= len(WORDS)
            elif token == "number":
                parts.append(str(randint(rng, NUMBER_LOW, NUMBER_HIGH)))
                keyspace *= NUMBER_HIGH - NUMBER_LOW + 1
            else:
                pool = pools[_TOKEN_CLASSES[token]]
                parts.append(choice(rng, pool))
                keyspace *= len(pool)

        value = "".join(parts)
        return Candidate(
            value=value,
            strategy=self.strategy,
            alphabet_size=self.nominal_alphabet_size(policy, alphabet),
            requested_length=len(value),
            keyspace=keyspace,
        )

    def symbol_space(self, policy: GenerationPolicy) -> str:
        pools = class_pools(policy)
        space: list[str] = []
        for token in set(policy.template_tokens):
            if token == "word":
                space.extend("".join(WORDS))
                space.extend(w[0].upper() for w in WORDS)
            elif token == "number":
                space.extend(DIGITS)
            else:
                space.extend(pools[_TOKEN_CLASSES[token]])
        return "".join(space)
