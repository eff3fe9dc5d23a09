"""
Forge Analyzers
================

Checks and estimates applied to generated or user-supplied secrets:
constraint validation, entropy and crack time, the strength breakdown and
the generator uniformity self-test.
"""

from keyforge.analyzers.composition import Composition, composition, infer_alphabet_size
from keyforge.analyzers.entropy import (
    EntropyEstimator,
    estimate_candidate_entropy,
    estimate_entropy,
    format_crack_time,
)
from keyforge.analyzers.strength import StrengthScorer, rate_strength, score_strength
from keyforge.analyzers.uniformity import UniformityTester
from keyforge.analyzers.validator import (
    COMMON_SECRETS,
    is_common_secret,
    load_denylist,
    matching_entries,
    validate,
)

__all__ = [
    "COMMON_SECRETS",
    "Composition",
    "EntropyEstimator",
    "StrengthScorer",
    "UniformityTester",
    "composition",
    "estimate_candidate_entropy",
    "estimate_entropy",
    "format_crack_time",
    "infer_alphabet_size",
    "is_common_secret",
    "load_denylist",
    "matching_entries",
    "rate_strength",
    "score_strength",
    "validate",
]
