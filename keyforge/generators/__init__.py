"""
Forge Generators
=================

Charset builder and the interchangeable generation strategies. Use
:func:`get_generator` to look up the implementation for a
:class:`~keyforge.core.models.Strategy`.
"""

from keyforge.core.models import Strategy
from keyforge.generators.base import BaseGenerator
from keyforge.generators.charset import build_alphabet, class_pools
from keyforge.generators.constrained import (
    NoConsecutiveGenerator,
    NoRepeatedGenerator,
)
from keyforge.generators.passphrase import PassphraseGenerator
from keyforge.generators.pattern import PatternGenerator
from keyforge.generators.pronounceable import PronounceableGenerator
from keyforge.generators.uniform import UniformGenerator

GENERATORS: dict[Strategy, BaseGenerator] = {
    gen.strategy: gen
    for gen in (
        UniformGenerator(),
        PatternGenerator(),
        PassphraseGenerator(),
        PronounceableGenerator(),
        NoConsecutiveGenerator(),
        NoRepeatedGenerator(),
    )
}


def get_generator(strategy: Strategy) -> BaseGenerator:
    """Return the stateless generator registered for *strategy*."""
    return GENERATORS[Strategy(strategy)]


__all__ = [
    "BaseGenerator",
    "GENERATORS",
    "NoConsecutiveGenerator",
    "NoRepeatedGenerator",
    "PassphraseGenerator",
    "PatternGenerator",
    "PronounceableGenerator",
    "UniformGenerator",
    "build_alphabet",
    "class_pools",
    "get_generator",
]
