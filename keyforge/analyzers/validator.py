"""
Constraint Validator
=====================

Checks a candidate against a :class:`RequirementsPolicy` and against a
denylist of common secrets.

:func:`validate` collects every violation rather than stopping at the
first, in a fixed order: length bounds, class presence, per-class minimum
counts. Each message names the rule and its threshold so a caller can show
all problems at once.

:func:`is_common_secret` is advisory. It never rejects a generated
candidate; the orchestrator turns a match into a warning.

References:
    - NIST SP 800-63B (2017), Section 5.1.1.2 -- comparing memorised
      secrets against lists of commonly used values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from keyforge.analyzers.composition import composition
from keyforge.core.models import RequirementsPolicy, ValidationResult

# Frequently used passwords and fragments (subset; supply a full list via
# ``load_denylist`` for production use).
COMMON_SECRETS: tuple[str, ...] = (
    "password", "123456", "12345678", "qwerty", "abc123", "monkey",
    "1234567", "letmein", "trustno1", "dragon", "baseball", "iloveyou",
    "master", "sunshine", "ashley", "bailey", "passw0rd", "shadow",
    "123123", "654321", "superman", "qazwsx", "michael", "football",
    "password1", "password123", "admin", "welcome", "hello", "charlie",
    "donald", "login", "starwars", "qwerty123", "1q2w3e4r", "zaq1zaq1",
    "1qaz2wsx", "princess", "azerty", "000000", "access", "default",
    "changeme", "12345", "111111", "666666", "7777777", "123456789",
    "hunter2", "secret", "letmein1", "whatever", "freedom", "mustang",
)

_CLASS_LABELS: tuple[tuple[str, str], ...] = (
    ("upper", "uppercase letter"),
    ("lower", "lowercase letter"),
    ("digit", "digit"),
    ("symbol", "symbol"),
)


def validate(candidate: str, requirements: RequirementsPolicy) -> ValidationResult:
    """Check *candidate* against every rule of *requirements*.

    Args:
        candidate: Secret to check.
        requirements: Compliance policy.

    Returns:
        :class:`ValidationResult` listing all violations, in rule order.
    """
    violations: list[str] = []
    length = len(candidate)

    if length < requirements.min_length:
        violations.append(
            f"Length {length} is below the minimum of {requirements.min_length}"
        )
    if requirements.max_length is not None and length > requirements.max_length:
        violations.append(
            f"Length {length} exceeds the maximum of {requirements.max_length}"
        )

    comp = composition(candidate)

    for key, label in _CLASS_LABELS:
        required = getattr(requirements, f"require_{key}")
        if required and getattr(comp, key) == 0:
            violations.append(f"Must contain at least one {label}")

    for key, label in _CLASS_LABELS:
        minimum = getattr(requirements, f"min_{key}")
        found = getattr(comp, key)
        if found < minimum:
            violations.append(
                f"Requires at least {minimum} {label}s, found {found}"
            )

    return ValidationResult(valid=not violations, violations=violations)


def is_common_secret(candidate: str, denylist: Iterable[str]) -> bool:
    """Whether *candidate* overlaps a denylist entry.

    True when the candidate, compared case-insensitively, contains an entry
    or is contained in one. Empty candidates and empty entries never match.
    """
    needle = candidate.casefold()
    if not needle:
        return False
    for entry in denylist:
        word = entry.strip().casefold()
        if word and (word in needle or needle in word):
            return True
    return False


def matching_entries(candidate: str, denylist: Iterable[str]) -> list[str]:
    """Every denylist entry that overlaps *candidate* (see :func:`is_common_secret`)."""
    return [entry for entry in denylist if is_common_secret(candidate, (entry,))]


def load_denylist(path: str | Path) -> tuple[str, ...]:
    """Read a denylist file: one entry per line, ``#`` starts a comment.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    entries: list[str] = []
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            entry = line.split("#", 1)[0].strip()
            if entry:
                entries.append(entry)
    return tuple(dict.fromkeys(entries))
