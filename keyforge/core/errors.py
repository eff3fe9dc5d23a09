"""
Forge Error Types
==================

Typed failures of the generation engine. Every failure is raised as one of
these, never returned as degraded output.
"""

from __future__ import annotations


class KeyForgeError(Exception):
    """Base class for all engine errors."""


class EmptyAlphabetError(KeyForgeError):
    """The policy selects no usable characters.

    Raised when no character class is enabled, or the exclusion rules
    removed every character of every selected class. The caller should
    ask the user to adjust the policy.
    """

    def __init__(self, message: str = "Policy selects no usable characters") -> None:
        super().__init__(message)


class RequirementsUnsatisfiableError(KeyForgeError):
    """The retry budget was exhausted without a conforming candidate.

    Attributes:
        attempts:   Number of generate+validate iterations performed.
        violations: Violations reported for the *last* attempt.
    """

    def __init__(self, attempts: int, violations: list[str]) -> None:
        self.attempts = attempts
        self.violations = list(violations)
        detail = "; ".join(self.violations) if self.violations else "no attempts made"
        super().__init__(
            f"No candidate satisfied the requirements after {attempts} "
            f"attempt(s): {detail}"
        )


class RngUnavailableError(KeyForgeError):
    """The operating system's secure randomness source cannot be used.

    Fatal and non-retryable; the engine never falls back to a
    non-cryptographic generator.
    """


class PresetError(KeyForgeError):
    """A policy preset is unknown, read-only, or its store file is unreadable."""


class ConfigError(KeyForgeError, ValueError):
    """A ``[forge]`` setting is out of range or names an unknown value."""


class SampleSizeError(KeyForgeError, ValueError):
    """Too few samples for the chi-squared test to mean anything."""
