"""
Forge Core Data Models
=======================

Pydantic models for the credential generation engine: the caller-supplied
policies, the alphabet and candidates produced from them, and the derived
entropy, strength and validation results.

Every model is created per call and never mutated afterwards; policies and
candidates are frozen so they can be shared freely across worker threads.

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines --
      Authentication and Lifecycle Management.
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
"""

from __future__ import annotations

import enum
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_LENGTH = 4096
MAX_WORD_COUNT = 64
DEFAULT_WORD_COUNT = 4
DEFAULT_SEPARATOR = "-"

PATTERN_TOKENS: frozenset[str] = frozenset(
    {"word", "number", "upper", "lower", "symbol"}
)

# Tokens in a pattern template may be joined by any of these.
_TEMPLATE_SPLIT = re.compile(r"[\s,\-_+|/.:;]+")


def split_template(template: str) -> list[str]:
    """Split a pattern template such as ``"word-number-symbol"`` into tokens."""
    return [tok.lower() for tok in _TEMPLATE_SPLIT.split(template.strip()) if tok]


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class Strategy(str, enum.Enum):
    """Generation strategy selected by a policy."""

    UNIFORM = "uniform"
    PATTERN = "pattern"
    PASSPHRASE = "passphrase"
    PRONOUNCEABLE = "pronounceable"
    NO_CONSECUTIVE = "no_consecutive"
    NO_REPEATED = "no_repeated"

    @property
    def uses_alphabet(self) -> bool:
        """Whether the strategy draws from the policy's Alphabet."""
        return self in (
            Strategy.UNIFORM,
            Strategy.NO_CONSECUTIVE,
            Strategy.NO_REPEATED,
        )


class CharClass(str, enum.Enum):
    """Canonical character classes, in concatenation order."""

    UPPER = "upper"
    LOWER = "lower"
    DIGITS = "digits"
    SYMBOLS = "symbols"


class EntropyConvention(str, enum.Enum):
    """How the keyspace of a candidate is counted.

    NOMINAL:    ``alphabet_size ** length`` -- the historical figure. It
                overstates entropy for structured strategies (pattern,
                passphrase, pronounceable, no-repeat).
    STRUCTURAL: the exact number of outputs the strategy can produce.
    """

    NOMINAL = "nominal"
    STRUCTURAL = "structural"


class StrengthRating(str, enum.Enum):
    """Overall rating from the six-check strength meter."""

    VERY_WEAK = "very_weak"
    WEAK = "weak"
    FAIR = "fair"
    GOOD = "good"
    STRONG = "strong"
    VERY_STRONG = "very_strong"


class OutcomeStatus(str, enum.Enum):
    """Result of one slot in a generation batch.

    OK:            Candidate delivered and conforming.
    TRUNCATED:     Candidate delivered but shorter than requested
                   (no-repeat strategy ran out of symbols).
    UNSATISFIABLE: No conforming candidate within the attempt budget.
    """

    OK = "ok"
    TRUNCATED = "truncated"
    UNSATISFIABLE = "unsatisfiable"


# ===================================================================== #
#  Policies
# ===================================================================== #


class CharacterClasses(BaseModel):
    """Which canonical character classes a policy includes."""

    model_config = ConfigDict(frozen=True)

    upper: bool = True
    lower: bool = True
    digits: bool = True
    symbols: bool = True

    def enabled(self) -> list[CharClass]:
        """Enabled classes in canonical order."""
        flags = {
            CharClass.UPPER: self.upper,
            CharClass.LOWER: self.lower,
            CharClass.DIGITS: self.digits,
            CharClass.SYMBOLS: self.symbols,
        }
        return [cls for cls in CharClass if flags[cls]]


class GenerationPolicy(BaseModel):
    """Caller-supplied configuration driving generation.

    Attributes:
        length: Number of symbols for symbol-based strategies.
        classes: Character classes to include.
        exclude_similar: Drop the look-alike glyphs ``0 O I l 1``.
        exclude_ambiguous: Drop structural punctuation from the symbol class.
        custom_alphabet: Explicit alphabet; bypasses classes and exclusions.
        strategy: Generation strategy.
        pattern_template: Token template for :attr:`Strategy.PATTERN`.
        passphrase_word_count: Words in a passphrase (default 4).
        passphrase_separator: Word separator in a passphrase (default ``-``).
    """

    model_config = ConfigDict(frozen=True)

    length: int = Field(default=16, ge=0, le=MAX_LENGTH)
    classes: CharacterClasses = Field(default_factory=CharacterClasses)
    exclude_similar: bool = False
    exclude_ambiguous: bool = False
    custom_alphabet: Optional[str] = None
    strategy: Strategy = Strategy.UNIFORM
    pattern_template: Optional[str] = None
    passphrase_word_count: Optional[int] = Field(default=None, le=MAX_WORD_COUNT)
    passphrase_separator: Optional[str] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> GenerationPolicy:
        if self.strategy == Strategy.PASSPHRASE:
            if self.passphrase_word_count is not None and self.passphrase_word_count < 1:
                raise ValueError("passphrase_word_count must be at least 1")
        elif self.length < 1:
            raise ValueError("length must be at least 1")

        if self.strategy == Strategy.PATTERN:
            if not self.pattern_template:
                raise ValueError("pattern strategy requires a pattern_template")
            tokens = split_template(self.pattern_template)
            if not tokens:
                raise ValueError("pattern_template contains no tokens")
            unknown = sorted(set(tokens) - PATTERN_TOKENS)
            if unknown:
                raise ValueError(
                    f"Unknown pattern token(s): {', '.join(unknown)}; "
                    f"expected {', '.join(sorted(PATTERN_TOKENS))}"
                )

        if self.passphrase_separator is not None and len(self.passphrase_separator) > 1:
            raise ValueError("passphrase_separator must be a single character")
        return self

    @property
    def word_count(self) -> int:
        """Resolved passphrase word count."""
        if self.passphrase_word_count is None:
            return DEFAULT_WORD_COUNT
        return self.passphrase_word_count

    @property
    def separator(self) -> str:
        """Resolved passphrase separator."""
        if self.passphrase_separator is None:
            return DEFAULT_SEPARATOR
        return self.passphrase_separator

    @property
    def template_tokens(self) -> list[str]:
        """Parsed pattern tokens (empty unless a template is set)."""
        return split_template(self.pattern_template or "")


class RequirementsPolicy(BaseModel):
    """Optional compliance requirements a candidate must satisfy.

    ``max_length=None`` means the length is unbounded above.
    """

    model_config = ConfigDict(frozen=True)

    min_length: int = Field(default=0, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    require_upper: bool = False
    require_lower: bool = False
    require_digit: bool = False
    require_symbol: bool = False
    min_upper: int = Field(default=0, ge=0)
    min_lower: int = Field(default=0, ge=0)
    min_digit: int = Field(default=0, ge=0)
    min_symbol: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> RequirementsPolicy:
        if self.max_length is None:
            return self
        if self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) exceeds max_length ({self.max_length})"
            )
        for name in ("min_upper", "min_lower", "min_digit", "min_symbol"):
            value = getattr(self, name)
            if value > self.max_length:
                raise ValueError(
                    f"{name} ({value}) exceeds max_length ({self.max_length})"
                )
        return self


# ===================================================================== #
#  Alphabet and Candidates
# ===================================================================== #


class Alphabet(BaseModel):
    """Ordered, duplicate-free set of symbols eligible for generation."""

    model_config = ConfigDict(frozen=True)

    symbols: str = Field(..., min_length=1)
    custom: bool = False

    @property
    def size(self) -> int:
        return len(self.symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and len(symbol) == 1 and symbol in self.symbols


class Candidate(BaseModel):
    """One generated secret and the facts needed to rate it.

    Attributes:
        value: The generated string.
        strategy: Strategy that produced it.
        alphabet_size: Size of the alphabet the value is rated against
            (nominal convention).
        requested_length: Length the policy asked for.
        keyspace: Exact number of outputs the strategy could have produced
            for this policy (structural convention).
        truncated: ``True`` when the value is shorter than requested.
        forced_repeats: Positions where the no-consecutive rule had to
            accept a repeated symbol after exhausting its redraw budget.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    strategy: Strategy
    alphabet_size: int = Field(..., ge=0)
    requested_length: int = Field(..., ge=0)
    keyspace: int = Field(default=1, ge=1)
    truncated: bool = False
    forced_repeats: int = Field(default=0, ge=0)

    @property
    def length(self) -> int:
        return len(self.value)


# ===================================================================== #
#  Derived Results
# ===================================================================== #


class EntropyResult(BaseModel):
    """Entropy and brute-force estimate for one candidate.

    Attributes:
        bits: Entropy in bits.
        crack_time: Human bucket (``"<1s"``, ``"3 days"``, ``"N/A"``...).
        crack_seconds: Time to exhaust the keyspace at the model's guess
            rate (``inf`` when it does not fit in a float).
        convention: Keyspace convention the figures were computed with.
        alphabet_size: Alphabet size used (nominal convention only).
        length: Candidate length.
        guesses_per_second: Attacker model.
    """

    bits: float = Field(default=0.0, ge=0.0)
    crack_time: str = "N/A"
    crack_seconds: float = Field(default=0.0, ge=0.0)
    convention: EntropyConvention = EntropyConvention.NOMINAL
    alphabet_size: Optional[int] = None
    length: int = 0
    guesses_per_second: int = 1_000_000_000


class SubScore(BaseModel):
    """One dimension of a strength breakdown."""

    score: int = Field(..., ge=0, le=3)
    max: int = 3
    feedback: str = ""


class StrengthBreakdown(BaseModel):
    """Qualitative strength analysis of an arbitrary secret.

    Attributes:
        length: Length sub-score.
        variety: Character-class variety sub-score.
        complexity: Distinct-character ratio sub-score.
        patterns: Pattern-weakness sub-score (3 = no weak patterns).
        suggestions: Ordered, de-duplicated improvement suggestions.
        rating: Overall six-check rating.
        percentage: Meter fill for :attr:`rating`.
    """

    length: SubScore
    variety: SubScore
    complexity: SubScore
    patterns: SubScore
    suggestions: list[str] = Field(default_factory=list)
    rating: StrengthRating = StrengthRating.VERY_WEAK
    percentage: int = Field(default=0, ge=0, le=100)

    @property
    def total(self) -> int:
        """Sum of the four sub-scores (0-12)."""
        return (
            self.length.score
            + self.variety.score
            + self.complexity.score
            + self.patterns.score
        )


class ValidationResult(BaseModel):
    """Outcome of checking a candidate against a RequirementsPolicy."""

    valid: bool
    violations: list[str] = Field(default_factory=list)


class CandidateOutcome(BaseModel):
    """One slot of a generation batch.

    A failed slot never carries a substitute candidate.
    """

    index: int = Field(..., ge=0)
    status: OutcomeStatus
    candidate: Optional[Candidate] = None
    attempts: int = Field(default=0, ge=0)
    violations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        """Whether this slot produced a candidate."""
        return self.candidate is not None


class GenerationBatch(BaseModel):
    """All outcomes of one multi-candidate request, in request order."""

    policy: GenerationPolicy
    requirements: Optional[RequirementsPolicy] = None
    outcomes: list[CandidateOutcome] = Field(default_factory=list)

    @property
    def candidates(self) -> list[Candidate]:
        """Delivered candidates, in request order."""
        return [o.candidate for o in self.outcomes if o.candidate is not None]

    @property
    def failures(self) -> list[CandidateOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.UNSATISFIABLE]


class UniformityResult(BaseModel):
    """Chi-squared goodness-of-fit of generator output against uniform.

    Attributes:
        alphabet_size: Number of categories tested.
        sample_symbols: Total symbols drawn.
        chi_squared: Pearson statistic.
        degrees_of_freedom: ``alphabet_size - 1``.
        p_value: Probability of a statistic at least this large under
            the uniform hypothesis.
        significance: Rejection threshold.
        passed: ``p_value >= significance``.
        expected_count: Expected count per symbol.
        min_count: Smallest observed count.
        max_count: Largest observed count.
    """

    alphabet_size: int = 0
    sample_symbols: int = 0
    chi_squared: float = 0.0
    degrees_of_freedom: int = 0
    p_value: float = 1.0
    significance: float = 0.01
    passed: bool = False
    expected_count: float = 0.0
    min_count: int = 0
    max_count: int = 0
