"""
KeyForge -- Credential Generation & Strength Analysis
======================================================

Generates cryptographically secure passwords, passphrases and
pattern-based secrets under a configurable policy, checks them against
compliance requirements, and estimates their strength.

Modules:
    - keyforge.core.engine: Facade wrapping every operation in a ScanResult
    - keyforge.core.orchestrator: Retry loop and batch generation
    - keyforge.core.models: Pydantic data models
    - keyforge.generators: Charset builder and generation strategies
    - keyforge.analyzers: Validation, entropy, strength and uniformity
    - keyforge.presets: Named policy presets
    - keyforge.output: Console and report output
    - keyforge.cli: Click-based command-line interface

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
"""

__version__ = "1.0.0"
__tool_name__ = "keyforge"

from keyforge.analyzers.entropy import estimate_candidate_entropy, estimate_entropy
from keyforge.analyzers.strength import score_strength
from keyforge.analyzers.validator import is_common_secret, validate
from keyforge.core.orchestrator import generate_candidate, generate_satisfying
from keyforge.generators.charset import build_alphabet

__all__ = [
    "__version__",
    "build_alphabet",
    "estimate_candidate_entropy",
    "estimate_entropy",
    "generate_candidate",
    "generate_satisfying",
    "is_common_secret",
    "score_strength",
    "validate",
]
