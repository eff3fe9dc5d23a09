"""
Character Composition
======================

Counts of each character class in an arbitrary string. Upper, lower and
digit mean the ASCII ranges ``A-Z``, ``a-z`` and ``0-9``; anything else,
including non-ASCII letters, counts as a symbol.
"""

from __future__ import annotations

from dataclasses import dataclass

from keyforge.generators.charset import CANONICAL_CLASSES, DIGITS, LOWERCASE, UPPERCASE


@dataclass(frozen=True, slots=True)
class Composition:
    """Per-class character counts of a string."""

    upper: int = 0
    lower: int = 0
    digit: int = 0
    symbol: int = 0

    @property
    def has_upper(self) -> bool:
        return self.upper > 0

    @property
    def has_lower(self) -> bool:
        return self.lower > 0

    @property
    def has_digit(self) -> bool:
        return self.digit > 0

    @property
    def has_symbol(self) -> bool:
        return self.symbol > 0

    @property
    def class_count(self) -> int:
        """Number of classes present (0-4)."""
        return sum((self.has_upper, self.has_lower, self.has_digit, self.has_symbol))


def composition(text: str) -> Composition:
    """Count upper, lower, digit and symbol characters in *text*."""
    upper = lower = digit = symbol = 0
    for ch in text:
        if ch in UPPERCASE:
            upper += 1
        elif ch in LOWERCASE:
            lower += 1
        elif ch in DIGITS:
            digit += 1
        else:
            symbol += 1
    return Composition(upper=upper, lower=lower, digit=digit, symbol=symbol)


def infer_alphabet_size(text: str) -> int:
    """Estimate the alphabet an externally supplied secret was drawn from.

    Each canonical class that appears contributes its full size; characters
    outside every canonical class are counted individually.
    """
    size = 0
    for chars in CANONICAL_CLASSES.values():
        if any(ch in chars for ch in text):
            size += len(chars)
    known = "".join(CANONICAL_CLASSES.values())
    size += len({ch for ch in text if ch not in known})
    return size


__all__ = ["Composition", "composition", "infer_alphabet_size"]
