"""
Forge Core Module
==================

Data models, error types, random sources and the retry orchestrator of
the credential generation engine. The :class:`ForgeEngine` facade lives in
:mod:`keyforge.core.engine` and is imported from there directly.
"""

from keyforge.core.errors import (
    EmptyAlphabetError,
    KeyForgeError,
    PresetError,
    RequirementsUnsatisfiableError,
    RngUnavailableError,
)
from keyforge.core.models import (
    Alphabet,
    Candidate,
    CandidateOutcome,
    CharacterClasses,
    CharClass,
    EntropyConvention,
    EntropyResult,
    GenerationBatch,
    GenerationPolicy,
    OutcomeStatus,
    RequirementsPolicy,
    Strategy,
    StrengthBreakdown,
    StrengthRating,
    SubScore,
    UniformityResult,
    ValidationResult,
)
from keyforge.core.random_source import (
    SecureRandomSource,
    SeededRandomSource,
    SystemRandomSource,
)

__all__ = [
    "Alphabet",
    "Candidate",
    "CandidateOutcome",
    "CharClass",
    "CharacterClasses",
    "EmptyAlphabetError",
    "EntropyConvention",
    "EntropyResult",
    "GenerationBatch",
    "GenerationPolicy",
    "KeyForgeError",
    "OutcomeStatus",
    "PresetError",
    "RequirementsPolicy",
    "RequirementsUnsatisfiableError",
    "RngUnavailableError",
    "SecureRandomSource",
    "SeededRandomSource",
    "Strategy",
    "StrengthBreakdown",
    "StrengthRating",
    "SubScore",
    "SystemRandomSource",
    "UniformityResult",
    "ValidationResult",
]
