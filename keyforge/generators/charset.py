"""
Charset Builder
================

Turns a :class:`GenerationPolicy` into a concrete :class:`Alphabet`.

A custom alphabet is taken verbatim (de-duplicated). Otherwise the four
canonical classes are filtered by the exclusion rules, the enabled ones
are concatenated upper -> lower -> digits -> symbols, and duplicates are
dropped keeping first-seen order. The result is a pure function of the
policy.
"""

from __future__ import annotations

import string

from keyforge.core.errors import EmptyAlphabetError
from keyforge.core.models import Alphabet, CharClass, GenerationPolicy

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

CANONICAL_CLASSES: dict[CharClass, str] = {
    CharClass.UPPER: UPPERCASE,
    CharClass.LOWER: LOWERCASE,
    CharClass.DIGITS: DIGITS,
    CharClass.SYMBOLS: SYMBOLS,
}

# Look-alike glyphs, removed from every class.
SIMILAR_CHARS = frozenset("0OIl1")

# Structural punctuation, removed from the symbol class only.
AMBIGUOUS_SYMBOLS = frozenset("{}[]()\\/'\"~,;.<>")


def dedupe(symbols: str) -> str:
    """Drop repeated symbols, keeping first-seen order."""
    return "".join(dict.fromkeys(symbols))


def class_pools(policy: GenerationPolicy) -> dict[CharClass, str]:
    """Canonical class strings after the policy's exclusion rules.

    All four classes are returned regardless of which are enabled; the
    pattern generator draws ``upper``/``lower``/``symbol`` tokens from
    these pools directly.
    """
    pools: dict[CharClass, str] = {}
    for char_class, chars in CANONICAL_CLASSES.items():
        if policy.exclude_similar:
            chars = "".join(c for c in chars if c not in SIMILAR_CHARS)
        if policy.exclude_ambiguous and char_class == CharClass.SYMBOLS:
            chars = "".join(c for c in chars if c not in AMBIGUOUS_SYMBOLS)
        pools[char_class] = chars
    return pools


def build_alphabet(policy: GenerationPolicy) -> Alphabet:
    """Build the alphabet a symbol-based generator draws from.

    Args:
        policy: Generation policy.

    Returns:
        Non-empty :class:`Alphabet`.

    Raises:
        EmptyAlphabetError: No class is enabled, or exclusions removed
            every character of every enabled class.
    """
    if policy.custom_alphabet:
        return Alphabet(symbols=dedupe(policy.custom_alphabet), custom=True)

    pools = class_pools(policy)
    enabled = policy.classes.enabled()
    if not enabled:
        raise EmptyAlphabetError("Select at least one character class")

    symbols = dedupe("".join(pools[c] for c in enabled))
    if not symbols:
        raise EmptyAlphabetError(
            "Exclusion rules removed every character of the selected classes"
        )
    return Alphabet(symbols=symbols)
