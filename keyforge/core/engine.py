"""
Forge Engine
=============

Central facade of the KeyForge toolkit. :class:`ForgeEngine` wires the
configuration, the random source, the denylist and the logger to the
library functions and wraps each operation in a :class:`ScanResult`, the
one shape the console and report layers understand.

Architecture follows the Facade pattern (Gamma et al., 1994): the CLI and
any embedding application talk to the engine; the generators, the retry
orchestrator and the analyzers stay plain, policy-driven functions.

Secrets only ever appear in the result metadata that the caller asked
for. Findings, summaries and log records carry masked values.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from shared.config import KeyForgeConfig
from shared.logger import KeyForgeLogger, mask_secret
from shared.math_utils import decimal_digits, format_large_int
from shared.models import Finding, Risk, ScanResult, Severity

from keyforge.analyzers.composition import infer_alphabet_size
from keyforge.analyzers.entropy import EntropyEstimator
from keyforge.analyzers.strength import StrengthScorer
from keyforge.analyzers.uniformity import UniformityTester
from keyforge.analyzers.validator import COMMON_SECRETS, load_denylist, matching_entries
from keyforge.core.errors import ConfigError
from keyforge.core.models import (
    CandidateOutcome,
    EntropyConvention,
    EntropyResult,
    GenerationPolicy,
    OutcomeStatus,
    RequirementsPolicy,
    StrengthRating,
)
from keyforge.core.orchestrator import generate_satisfying
from keyforge.core.random_source import SecureRandomSource, default_source
from keyforge.generators.charset import build_alphabet

TOOL_NAME = "forge"

_NIST_REF = "NIST SP 800-63B (2017), Section 5.1.1.2 -- Memorized Secret Verifiers."

# Entropy at which a generated secret is considered to carry no risk.
_SAFE_BITS = 128.0

_RATING_SEVERITY: dict[StrengthRating, Severity] = {
    StrengthRating.VERY_WEAK: Severity.CRITICAL,
    StrengthRating.WEAK: Severity.HIGH,
    StrengthRating.FAIR: Severity.MEDIUM,
    StrengthRating.GOOD: Severity.LOW,
    StrengthRating.STRONG: Severity.INFO,
    StrengthRating.VERY_STRONG: Severity.INFO,
}


def _plural(count: int, one: str, many: str) -> str:
    return f"{count} {one if count == 1 else many}"


def _risk_from_bits(bits: float) -> float:
    return max(0.0, min(100.0, 100.0 * (1.0 - bits / _SAFE_BITS)))


class ForgeEngine:
    """Orchestrates generation, analysis and self-test operations.

    Usage::

        engine = ForgeEngine()
        result = engine.generate(GenerationPolicy(length=20), count=3)
        for entry in result.metadata["candidates"]:
            print(entry["value"], entry["entropy"]["crack_time"])

    Attributes:
        config: KeyForge configuration instance.
        rng: Random source every generator draws from.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[KeyForgeConfig] = None,
        rng: Optional[SecureRandomSource] = None,
        denylist: Optional[Iterable[str]] = None,
    ) -> None:
        self.config = config or KeyForgeConfig()
        self.rng = rng if rng is not None else default_source()

        settings = self.config.global_settings
        self.logger = KeyForgeLogger(
            "engine",
            log_level="DEBUG" if settings.debug else settings.log_level,
            log_file=settings.log_file or None,
            json_logs=settings.log_json,
        )

        forge = self.config.forge
        if denylist is not None:
            self.denylist = tuple(denylist)
        elif forge.denylist_path:
            try:
                self.denylist = load_denylist(forge.denylist_path)
            except (OSError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Cannot read denylist {forge.denylist_path}: {exc}") from exc
        else:
            self.denylist = COMMON_SECRETS

        self._check_settings()
        self._estimator = EntropyEstimator(forge.guesses_per_second)
        self._scorer = StrengthScorer()

    def _check_settings(self) -> None:
        """Reject unusable ``[forge]`` values before any operation runs.

        Raises:
            ConfigError: A setting is out of range or unknown.
        """
        forge = self.config.forge
        problems = []
        if forge.guesses_per_second <= 0:
            problems.append("guesses_per_second must be positive")
        if forge.max_attempts < 1:
            problems.append("max_attempts must be at least 1")
        if forge.uniformity_samples < 1 or forge.uniformity_length < 1:
            problems.append("uniformity_samples and uniformity_length must be at least 1")
        if not 0.0 < forge.chi_squared_significance < 1.0:
            problems.append("chi_squared_significance must be between 0 and 1")
        if forge.entropy_convention not in {c.value for c in EntropyConvention}:
            problems.append(f"unknown entropy_convention '{forge.entropy_convention}'")
        if problems:
            raise ConfigError("Invalid [forge] settings: " + "; ".join(problems))

    # ------------------------------------------------------------------ #
    #  Policy helpers
    # ------------------------------------------------------------------ #

    def policy_values(self, **overrides: Any) -> dict[str, Any]:
        """The ``[forge]`` defaults with *overrides* on top, not yet validated.

        ``None`` overrides are skipped. Callers that layer more fields on
        top validate the merged dict once, so a pattern strategy and its
        template can arrive together.
        """
        forge = self.config.forge
        values: dict[str, Any] = {
            "length": forge.default_length,
            "strategy": forge.default_strategy,
        }
        strategy = overrides.get("strategy") or forge.default_strategy
        strategy = str(getattr(strategy, "value", strategy))
        if strategy == "passphrase":
            values["passphrase_word_count"] = forge.passphrase_word_count
            values["passphrase_separator"] = forge.passphrase_separator
        elif strategy == "pattern":
            values["pattern_template"] = forge.default_pattern
        values.update({k: v for k, v in overrides.items() if v is not None})
        return values

    def default_policy(self, **overrides: Any) -> GenerationPolicy:
        """A policy seeded from the ``[forge]`` defaults, then *overrides*."""
        return GenerationPolicy(**self.policy_values(**overrides))

    # ------------------------------------------------------------------ #
    #  Generation
    # ------------------------------------------------------------------ #

    def generate(
        self,
        policy: GenerationPolicy,
        requirements: Optional[RequirementsPolicy] = None,
        count: int = 1,
        max_attempts: Optional[int] = None,
        convention: Optional[EntropyConvention] = None,
    ) -> ScanResult:
        """Generate *count* candidates and rate each one.

        Args:
            policy: Generation policy.
            requirements: Optional compliance requirements.
            count: Number of candidates.
            max_attempts: Retry budget per candidate (config default).
            convention: Entropy convention (config default).

        Returns:
            ScanResult whose ``metadata["candidates"]`` lists every slot in
            request order.

        Raises:
            EmptyAlphabetError: The policy selects no usable characters.
            RngUnavailableError: OS randomness is unavailable.
        """
        forge = self.config.forge
        attempts = max_attempts if max_attempts is not None else forge.max_attempts
        conv = EntropyConvention(convention or forge.entropy_convention)

        result = ScanResult(
            tool_name=TOOL_NAME,
            target=f"{policy.strategy.value} x{count}",
        )

        with self.logger.operation("generate"), self.logger.timed("candidate generation"):
            self.logger.info(
                "Generating candidates",
                strategy=policy.strategy.value,
                count=count,
                max_attempts=attempts,
            )
            batch = generate_satisfying(
                policy,
                requirements,
                attempts,
                count,
                rng=self.rng,
                denylist=self.denylist,
                workers=self.config.global_settings.max_workers,
            )

            entries: list[dict[str, Any]] = []
            weakest: Optional[float] = None
            for outcome in batch.outcomes:
                entropy = None
                if outcome.candidate is not None:
                    entropy = self._estimator.estimate_candidate(outcome.candidate, conv)
                    weakest = entropy.bits if weakest is None else min(weakest, entropy.bits)
                entries.append(self._outcome_entry(outcome, entropy))
                self._outcome_findings(result, outcome, entropy)

        result.metadata = {
            "policy": policy.model_dump(mode="json"),
            "requirements": requirements.model_dump(mode="json") if requirements else None,
            "convention": conv.value,
            "candidates": entries,
        }
        if weakest is not None:
            result.risk = Risk(
                score=_risk_from_bits(weakest),
                factors=[f"Weakest candidate carries {weakest:.1f} bits ({conv.value})"],
            )

        delivered = len(batch.candidates)
        failed = len(batch.failures)
        if failed:
            self.logger.warning("Some candidates were unsatisfiable", failed=failed)
        return result.finalize(
            f"Generated {delivered} of {count} candidate(s) with the "
            f"{policy.strategy.value} strategy"
            + (f"; {failed} unsatisfiable" if failed else "")
        )

    @staticmethod
    def _outcome_entry(
        outcome: CandidateOutcome, entropy: Optional[EntropyResult]
    ) -> dict[str, Any]:
        candidate = outcome.candidate
        return {
            "index": outcome.index,
            "status": outcome.status.value,
            "value": candidate.value if candidate else None,
            "length": candidate.length if candidate else 0,
            "alphabet_size": candidate.alphabet_size if candidate else None,
            "keyspace": format_large_int(candidate.keyspace) if candidate else None,
            "attempts": outcome.attempts,
            "entropy": entropy.model_dump(mode="json") if entropy else None,
            "warnings": list(outcome.warnings),
            "violations": list(outcome.violations),
            "error": outcome.error,
        }

    def _outcome_findings(
        self,
        result: ScanResult,
        outcome: CandidateOutcome,
        entropy: Optional[EntropyResult],
    ) -> None:
        slot = f"Candidate #{outcome.index + 1}"

        if outcome.status == OutcomeStatus.UNSATISFIABLE:
            self.logger.warning(
                "Requirements unsatisfiable",
                index=outcome.index,
                attempts=outcome.attempts,
            )
            result.add_finding(Finding(
                severity=Severity.HIGH,
                title="Requirements unsatisfiable",
                description=(
                    f"{slot}: no candidate met the requirements within "
                    f"{outcome.attempts} attempt(s)."
                ),
                evidence={"violations": outcome.violations},
                recommendation=(
                    "Relax the requirements, enable the missing character "
                    "classes or raise the attempt budget."
                ),
            ))
            return

        candidate = outcome.candidate
        if candidate is None:
            return
        masked = mask_secret(candidate.value)

        if candidate.truncated:
            self.logger.warning("Candidate truncated", index=outcome.index)
            result.add_finding(Finding(
                severity=Severity.MEDIUM,
                title="Candidate truncated",
                description=(
                    f"{slot} ({masked}) has {candidate.length} of the "
                    f"{candidate.requested_length} requested characters; the "
                    f"no-repeat strategy exhausted its {candidate.alphabet_size}-symbol "
                    f"alphabet."
                ),
                recommendation="Shorten the length or widen the alphabet.",
            ))
        if candidate.forced_repeats:
            self.logger.warning(
                "Consecutive repeats forced",
                index=outcome.index,
                forced=candidate.forced_repeats,
            )
            result.add_finding(Finding(
                severity=Severity.MEDIUM,
                title="Consecutive repeats forced",
                description=(
                    f"{slot} ({masked}) contains {candidate.forced_repeats} adjacent "
                    f"repeat(s) the no-consecutive rule could not avoid."
                ),
                recommendation="Use an alphabet of at least two symbols.",
            ))

        hits = matching_entries(candidate.value, self.denylist)
        if hits:
            self.logger.warning("Common secret detected", index=outcome.index)
            result.add_finding(Finding(
                severity=Severity.HIGH,
                title="Common secret detected",
                description=(
                    f"{slot} ({masked}) overlaps "
                    f"{_plural(len(hits), 'denylist entry', 'denylist entries')}."
                ),
                evidence={"matches": [mask_secret(h) for h in hits]},
                recommendation="Discard this candidate and generate another.",
                references=[_NIST_REF],
            ))

        if entropy is not None:
            result.add_finding(Finding(
                severity=Severity.INFO,
                title="Candidate generated",
                description=(
                    f"{slot} ({masked}): {entropy.bits:.1f} bits "
                    f"({entropy.convention.value}), crack time {entropy.crack_time}."
                ),
                evidence={
                    "attempts": outcome.attempts,
                    "keyspace_digits": decimal_digits(candidate.keyspace),
                },
            ))

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    def analyze_password(self, password: str) -> ScanResult:
        """Strength breakdown, entropy and denylist check of *password*.

        The entropy estimate uses the alphabet inferred from the character
        classes present in the password.
        """
        masked = mask_secret(password)
        result = ScanResult(tool_name=TOOL_NAME, target=masked or "<empty>")

        with self.logger.operation("analyze"):
            self.logger.info("Analysing password", target=masked, length=len(password))
            breakdown = self._scorer.score(password)
            pool = infer_alphabet_size(password)
            entropy = self._estimator.estimate(password, pool)
            hits = matching_entries(password, self.denylist)

        result.metadata = {
            "length": len(password),
            "alphabet_size": pool,
            "strength": breakdown.model_dump(mode="json"),
            "total": breakdown.total,
            "entropy": entropy.model_dump(mode="json"),
            "common_secret": bool(hits),
        }

        if hits:
            result.add_finding(Finding(
                severity=Severity.CRITICAL,
                title="Common secret detected",
                description=(
                    f"The password overlaps {_plural(len(hits), 'entry', 'entries')} of the common "
                    f"secrets list and would fall to a dictionary attack."
                ),
                evidence={"matches": [mask_secret(h) for h in hits]},
                recommendation="Choose a password that does not contain common words.",
                references=[_NIST_REF],
            ))

        severity = _RATING_SEVERITY[breakdown.rating]
        title = (
            "Weak password"
            if breakdown.rating in (StrengthRating.VERY_WEAK, StrengthRating.WEAK)
            else "Password strength"
        )
        result.add_finding(Finding(
            severity=severity,
            title=title,
            description=(
                f"Rated {breakdown.rating.value.replace('_', ' ')} "
                f"({breakdown.percentage}%), breakdown score {breakdown.total}/12, "
                f"{entropy.bits:.1f} bits, crack time {entropy.crack_time}."
            ),
            evidence={
                "length": breakdown.length.score,
                "variety": breakdown.variety.score,
                "complexity": breakdown.complexity.score,
                "patterns": breakdown.patterns.score,
            },
            recommendation="; ".join(breakdown.suggestions),
            references=[_NIST_REF],
        ))

        score = _risk_from_bits(entropy.bits)
        if hits:
            score = 100.0
        result.risk = Risk(score=score, factors=list(breakdown.suggestions))
        return result.finalize(
            f"Password {masked or '<empty>'}: {breakdown.rating.value}, "
            f"{entropy.bits:.1f} bits"
        )

    # ------------------------------------------------------------------ #
    #  Alphabet inspection
    # ------------------------------------------------------------------ #

    def alphabet(self, policy: GenerationPolicy) -> ScanResult:
        """Build and describe the alphabet of *policy*.

        Raises:
            EmptyAlphabetError: The policy selects no usable characters.
        """
        with self.logger.operation("alphabet"):
            alphabet = build_alphabet(policy)
            self.logger.debug("Alphabet built", size=alphabet.size, custom=alphabet.custom)

        result = ScanResult(tool_name=TOOL_NAME, target="alphabet")
        per_symbol = self._estimator.estimate("x", alphabet.size).bits
        result.metadata = {
            "symbols": alphabet.symbols,
            "size": alphabet.size,
            "custom": alphabet.custom,
            "bits_per_symbol": per_symbol,
        }
        if alphabet.size < 10:
            result.add_finding(Finding(
                severity=Severity.MEDIUM,
                title="Small alphabet",
                description=(
                    f"Only {alphabet.size} symbols remain; each character adds "
                    f"{per_symbol:.2f} bits."
                ),
                recommendation="Enable more character classes or relax exclusions.",
            ))
        return result.finalize(
            f"Alphabet of {alphabet.size} symbols ({per_symbol:.2f} bits/symbol)"
        )

    # ------------------------------------------------------------------ #
    #  Uniformity self-test
    # ------------------------------------------------------------------ #

    def uniformity(
        self,
        policy: Optional[GenerationPolicy] = None,
        samples: Optional[int] = None,
        length: Optional[int] = None,
    ) -> ScanResult:
        """Chi-squared self-test of the Uniform generator on this engine's source."""
        forge = self.config.forge
        tester = UniformityTester(
            samples=samples or forge.uniformity_samples,
            length=length or forge.uniformity_length,
            significance=forge.chi_squared_significance,
            rng=self.rng,
        )
        result = ScanResult(tool_name=TOOL_NAME, target="uniformity self-test")

        with self.logger.operation("uniformity"), self.logger.timed("uniformity self-test"):
            outcome = tester.run(policy)

        result.metadata = outcome.model_dump(mode="json")
        if outcome.passed:
            result.add_finding(Finding(
                severity=Severity.INFO,
                title="Uniformity test passed",
                description=(
                    f"chi2={outcome.chi_squared:.2f} with {outcome.degrees_of_freedom} "
                    f"degrees of freedom, p={outcome.p_value:.4f}."
                ),
            ))
        else:
            self.logger.error("Uniformity test failed", p_value=outcome.p_value)
            result.add_finding(Finding(
                severity=Severity.HIGH,
                title="Uniformity test failed",
                description=(
                    f"p={outcome.p_value:.6f} is below the significance level "
                    f"{outcome.significance}; symbol frequencies deviate from uniform."
                ),
                evidence={"min_count": outcome.min_count, "max_count": outcome.max_count},
                recommendation="Check the random source; rerun with more samples.",
                references=["Knuth, TAOCP Vol. 2, Section 3.3.1."],
            ))
        return result.finalize(
            f"Uniformity {'passed' if outcome.passed else 'failed'} "
            f"(p={outcome.p_value:.4f}, {outcome.sample_symbols} symbols)"
        )
