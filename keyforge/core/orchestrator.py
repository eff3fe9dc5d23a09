"""
Retry Orchestrator
===================

Drives a generator, optionally validating each candidate against a
:class:`RequirementsPolicy` and retrying within a bounded budget.

Without requirements the generator runs exactly once and its candidate is
returned untouched. With requirements, generate+validate repeats up to
``max_attempts`` times; the first conforming candidate wins, and if none
conforms :class:`RequirementsUnsatisfiableError` is raised with the
violations of the last attempt. A non-conforming candidate is never
returned.

:func:`generate_satisfying` runs that loop once per requested candidate.
Every slot gets its own :class:`CandidateOutcome`; an unsatisfiable slot
does not abort the rest of the batch. Input errors (empty alphabet) and
randomness failures do abort it, since every slot would fail the same way.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from keyforge.analyzers.validator import COMMON_SECRETS, is_common_secret, validate
from keyforge.core.errors import EmptyAlphabetError, RequirementsUnsatisfiableError
from keyforge.core.models import (
    Alphabet,
    Candidate,
    CandidateOutcome,
    GenerationBatch,
    GenerationPolicy,
    OutcomeStatus,
    RequirementsPolicy,
)
from keyforge.core.random_source import SecureRandomSource, default_source
from keyforge.generators import build_alphabet, get_generator

DEFAULT_MAX_ATTEMPTS = 100


def resolve_alphabet(policy: GenerationPolicy) -> Optional[Alphabet]:
    """Alphabet for *policy*, or ``None`` for a structured strategy without one.

    Raises:
        EmptyAlphabetError: A symbol-based strategy has no usable characters.
    """
    if policy.strategy.uses_alphabet:
        return build_alphabet(policy)
    try:
        return build_alphabet(policy)
    except EmptyAlphabetError:
        return None


def _attempt(
    policy: GenerationPolicy,
    alphabet: Optional[Alphabet],
    requirements: Optional[RequirementsPolicy],
    max_attempts: int,
    rng: SecureRandomSource,
) -> tuple[Candidate, int]:
    generator = get_generator(policy.strategy)
    if requirements is None:
        return generator.generate(policy, alphabet, rng), 1

    violations: list[str] = []
    for attempt in range(1, max_attempts + 1):
        candidate = generator.generate(policy, alphabet, rng)
        result = validate(candidate.value, requirements)
        if result.valid:
            return candidate, attempt
        violations = result.violations
    raise RequirementsUnsatisfiableError(max_attempts, violations)


def generate_candidate(
    policy: GenerationPolicy,
    requirements: Optional[RequirementsPolicy] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    rng: Optional[SecureRandomSource] = None,
) -> Candidate:
    """Generate one candidate, retrying until it meets *requirements*.

    Args:
        policy: Generation policy.
        requirements: Optional compliance requirements.
        max_attempts: Retry budget when requirements are given.
        rng: Random source (the OS CSPRNG by default).

    Raises:
        EmptyAlphabetError: The policy selects no usable characters.
        RequirementsUnsatisfiableError: Budget exhausted.
        RngUnavailableError: OS randomness is unavailable.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    source = rng if rng is not None else default_source()
    candidate, _ = _attempt(
        policy, resolve_alphabet(policy), requirements, max_attempts, source
    )
    return candidate


def _warnings(candidate: Candidate, denylist: tuple[str, ...]) -> list[str]:
    warnings: list[str] = []
    if candidate.truncated:
        warnings.append(
            f"Truncated to {candidate.length} of {candidate.requested_length} "
            f"characters: the alphabet has only {candidate.alphabet_size} symbols"
        )
    if candidate.forced_repeats:
        warnings.append(
            f"{candidate.forced_repeats} consecutive repeat(s) could not be avoided"
        )
    if is_common_secret(candidate.value, denylist):
        warnings.append("Candidate resembles a common secret")
    return warnings


def _outcome(
    index: int,
    policy: GenerationPolicy,
    alphabet: Optional[Alphabet],
    requirements: Optional[RequirementsPolicy],
    max_attempts: int,
    rng: SecureRandomSource,
    denylist: tuple[str, ...],
) -> CandidateOutcome:
    try:
        candidate, attempts = _attempt(policy, alphabet, requirements, max_attempts, rng)
    except RequirementsUnsatisfiableError as exc:
        return CandidateOutcome(
            index=index,
            status=OutcomeStatus.UNSATISFIABLE,
            attempts=exc.attempts,
            violations=exc.violations,
            error=str(exc),
        )

    status = OutcomeStatus.TRUNCATED if candidate.truncated else OutcomeStatus.OK
    return CandidateOutcome(
        index=index,
        status=status,
        candidate=candidate,
        attempts=attempts,
        warnings=_warnings(candidate, denylist),
    )


def generate_satisfying(
    policy: GenerationPolicy,
    requirements: Optional[RequirementsPolicy] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    count: int = 1,
    *,
    rng: Optional[SecureRandomSource] = None,
    denylist: Optional[Iterable[str]] = None,
    workers: int = 1,
) -> GenerationBatch:
    """Generate *count* independent candidates.

    Args:
        policy: Generation policy.
        requirements: Optional compliance requirements.
        max_attempts: Retry budget per candidate.
        count: Number of candidates requested.
        rng: Random source (the OS CSPRNG by default).
        denylist: Common secrets to warn about (built-in list by default).
        workers: Thread pool size; ``1`` generates sequentially.

    Returns:
        :class:`GenerationBatch` with one outcome per slot, in order.

    Raises:
        EmptyAlphabetError: The policy selects no usable characters.
        RngUnavailableError: OS randomness is unavailable.
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    source = rng if rng is not None else default_source()
    words = tuple(denylist) if denylist is not None else COMMON_SECRETS
    alphabet = resolve_alphabet(policy)

    def run(index: int) -> CandidateOutcome:
        return _outcome(index, policy, alphabet, requirements, max_attempts, source, words)

    if workers > 1 and count > 1:
        with ThreadPoolExecutor(max_workers=min(workers, count)) as pool:
            outcomes = list(pool.map(run, range(count)))
    else:
        outcomes = [run(i) for i in range(count)]

    return GenerationBatch(policy=policy, requirements=requirements, outcomes=outcomes)
