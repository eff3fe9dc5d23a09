"""
Strength Breakdown Scorer
==========================

Qualitative, policy-free analysis of an arbitrary secret along four
dimensions, each scored 0-3:

    length      3 if >= 16, 2 if >= 12, 1 if >= 8, else 0
    variety     classes present: 4 -> 3, 3 -> 2, 2 -> 1, else 0
    complexity  distinct/length: >= 0.8 -> 3, >= 0.6 -> 2, >= 0.4 -> 1
    patterns    3 minus one per weak pattern found (floor 0)

Weak patterns are a character repeated three or more times in a row, a
well-known sequential run (``123``, ``abc``, ``qwe``), and a string that is
entirely one letter case.

A coarser six-check meter rides alongside the breakdown: length >= 8,
lowercase, uppercase, digit, special character and length >= 12. The
number of checks passed maps onto :class:`StrengthRating`.

References:
    - NIST SP 800-63B (2017), Section 5.1.1.2.
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security.
"""

from __future__ import annotations

import re

from keyforge.analyzers.composition import composition
from keyforge.core.models import StrengthBreakdown, StrengthRating, SubScore

_REPEAT_RE = re.compile(r"(.)\1{2,}")
SEQUENTIAL_RUNS: tuple[str, ...] = ("123", "abc", "qwe")

SUGGEST_LENGTH = "Increase length to at least 12 characters"
SUGGEST_UPPER = "Add uppercase letters"
SUGGEST_LOWER = "Add lowercase letters"
SUGGEST_DIGIT = "Add digits"
SUGGEST_SYMBOL = "Add symbols"
SUGGEST_COMPLEXITY = "Increase complexity by using more distinct characters"
SUGGEST_REPEATS = "Avoid repeating the same character three or more times"
SUGGEST_SEQUENCES = "Avoid sequential patterns such as 123, abc or qwe"
SUGGEST_CASE = "Mix uppercase and lowercase letters"
AFFIRMATIVE = "Strong password: no improvements needed"

# (checks passed upper bound, rating, meter percentage)
_RATING_LEVELS: tuple[tuple[int, StrengthRating, int], ...] = (
    (1, StrengthRating.VERY_WEAK, 16),
    (2, StrengthRating.WEAK, 33),
    (3, StrengthRating.FAIR, 50),
    (4, StrengthRating.GOOD, 66),
    (5, StrengthRating.STRONG, 83),
    (6, StrengthRating.VERY_STRONG, 100),
)


def has_repeated_run(text: str) -> bool:
    return _REPEAT_RE.search(text) is not None


def has_sequential_run(text: str) -> bool:
    folded = text.lower()
    return any(run in folded for run in SEQUENTIAL_RUNS)


def is_single_case(text: str) -> bool:
    """True when every cased character shares one case (``"abc123"``)."""
    return text.islower() or text.isupper()


def rate_strength(text: str) -> tuple[StrengthRating, int]:
    """Six-check meter: returns the rating and its meter percentage."""
    comp = composition(text)
    passed = sum((
        len(text) >= 8,
        comp.has_lower,
        comp.has_upper,
        comp.has_digit,
        comp.has_symbol,
        len(text) >= 12,
    ))
    for ceiling, rating, percentage in _RATING_LEVELS:
        if passed <= ceiling:
            return rating, percentage
    return StrengthRating.VERY_STRONG, 100


class StrengthScorer:
    """Produces a :class:`StrengthBreakdown` for any string.

    Stateless; a single instance may be shared across threads.
    """

    def score(self, text: str) -> StrengthBreakdown:
        length = len(text)
        comp = composition(text)
        ratio = len(set(text)) / length if length else 0.0

        repeated = has_repeated_run(text)
        sequential = has_sequential_run(text)
        single_case = is_single_case(text)

        suggestions: list[str] = []
        if length < 12:
            suggestions.append(SUGGEST_LENGTH)
        if not comp.has_upper:
            suggestions.append(SUGGEST_UPPER)
        if not comp.has_lower:
            suggestions.append(SUGGEST_LOWER)
        if not comp.has_digit:
            suggestions.append(SUGGEST_DIGIT)
        if not comp.has_symbol:
            suggestions.append(SUGGEST_SYMBOL)
        if ratio < 0.6:
            suggestions.append(SUGGEST_COMPLEXITY)
        if repeated:
            suggestions.append(SUGGEST_REPEATS)
        if sequential:
            suggestions.append(SUGGEST_SEQUENCES)
        if single_case:
            suggestions.append(SUGGEST_CASE)

        suggestions = list(dict.fromkeys(suggestions))
        if not suggestions:
            suggestions = [AFFIRMATIVE]

        rating, percentage = rate_strength(text)
        return StrengthBreakdown(
            length=self._length_score(length),
            variety=self._variety_score(comp.class_count),
            complexity=self._complexity_score(ratio),
            patterns=self._pattern_score(repeated, sequential, single_case),
            suggestions=suggestions,
            rating=rating,
            percentage=percentage,
        )

    @staticmethod
    def _length_score(length: int) -> SubScore:
        if length >= 16:
            return SubScore(score=3, feedback=f"Excellent length ({length} characters)")
        if length >= 12:
            return SubScore(score=2, feedback=f"Good length ({length} characters)")
        if length >= 8:
            return SubScore(score=1, feedback=f"Acceptable length ({length} characters)")
        return SubScore(score=0, feedback=f"Too short ({length} characters)")

    @staticmethod
    def _variety_score(classes: int) -> SubScore:
        score = max(classes - 1, 0)
        return SubScore(score=score, feedback=f"{classes} of 4 character classes present")

    @staticmethod
    def _complexity_score(ratio: float) -> SubScore:
        if ratio >= 0.8:
            score = 3
        elif ratio >= 0.6:
            score = 2
        elif ratio >= 0.4:
            score = 1
        else:
            score = 0
        return SubScore(score=score, feedback=f"{ratio:.0%} distinct characters")

    @staticmethod
    def _pattern_score(repeated: bool, sequential: bool, single_case: bool) -> SubScore:
        found = []
        if repeated:
            found.append("repeated characters")
        if sequential:
            found.append("sequential run")
        if single_case:
            found.append("single letter case")
        score = max(3 - len(found), 0)
        if not found:
            return SubScore(score=score, feedback="No weak patterns detected")
        return SubScore(score=score, feedback="Weak patterns: " + ", ".join(found))


_default_scorer = StrengthScorer()


def score_strength(candidate: str) -> StrengthBreakdown:
    """Score *candidate* with the shared :class:`StrengthScorer`."""
    return _default_scorer.score(candidate)
