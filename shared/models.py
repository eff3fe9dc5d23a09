"""
KeyForge Result Models
=======================

Every engine operation (generate, analyze, alphabet, uniformity) returns a
:class:`ScanResult`: a list of :class:`Finding` objects, an optional
:class:`Risk` and the raw payload under ``metadata``. The console renderer
and the JSON/HTML reports consume nothing else.

References:
    - OWASP Risk Rating Methodology.
      https://owasp.org/www-community/OWASP_Risk_Rating_Methodology
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import datetime as _dt
import json as _json
from collections import Counter
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


class Severity(str, Enum):
    """How bad a finding is. Members are declared most severe first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def css_class(self) -> str:
        return "severity-" + self.value.lower()

    @property
    def rank(self) -> int:
        """0 for CRITICAL up to 4 for INFO."""
        return list(Severity).index(self)


class RiskLevel(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NEGLIGIBLE = "NEGLIGIBLE"

    @classmethod
    def from_score(cls, score: float) -> RiskLevel:
        for floor, level in _RISK_FLOORS:
            if score >= floor:
                return level
        return cls.NEGLIGIBLE


# Lowest score (inclusive) that maps to each level.
_RISK_FLOORS: tuple[tuple[float, RiskLevel], ...] = (
    (90.0, RiskLevel.CRITICAL),
    (70.0, RiskLevel.HIGH),
    (40.0, RiskLevel.MEDIUM),
    (10.0, RiskLevel.LOW),
)


class Finding(BaseModel):
    """One observation about a candidate, a password or the generator.

    ``evidence`` is always stored as text; dicts and lists handed to the
    constructor are serialised to JSON so reports can print them as-is.
    """

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True, extra="ignore")

    severity: Severity
    title: str = Field(..., min_length=1, max_length=256)
    description: str = Field(..., min_length=1)
    evidence: str = ""
    recommendation: str = ""
    references: list[str] = Field(default_factory=list)

    @field_validator("evidence", mode="before")
    @classmethod
    def _evidence_as_text(cls, value: Any) -> str:
        if isinstance(value, (dict, list)):
            return _json.dumps(value, ensure_ascii=False, default=str)
        return value if isinstance(value, str) else str(value)


class Risk(BaseModel):
    """A 0-100 risk score; ``level`` is filled in from the score if omitted."""

    score: float = Field(..., ge=0.0, le=100.0)
    level: Optional[RiskLevel] = None
    factors: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _fill_level(self) -> Risk:
        if self.level is None:
            self.level = RiskLevel.from_score(self.score)
        return self


class ScanResult(BaseModel):
    """Envelope returned by every :class:`keyforge.core.engine.ForgeEngine` call.

    ``target`` never holds a clear secret; the engine masks analysed
    passwords before building the result.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    tool_name: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    start_time: _dt.datetime = Field(default_factory=_utcnow)
    end_time: Optional[_dt.datetime] = None
    findings: list[Finding] = Field(default_factory=list)
    risk: Optional[Risk] = None
    summary: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def duration_seconds(self) -> float | None:
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def finding_count(self) -> int:
        return len(self.findings)

    @property
    def severity_counts(self) -> dict[str, int]:
        """Findings per severity; every severity is present, zero or not."""
        seen = Counter(f.severity.value for f in self.findings)
        return {sev.value: seen.get(sev.value, 0) for sev in Severity}

    @property
    def highest_severity(self) -> Severity | None:
        if not self.findings:
            return None
        return min((f.severity for f in self.findings), key=lambda sev: sev.rank)

    def add_finding(self, finding: Finding) -> None:
        self.findings.append(finding)

    def finalize(self, summary: str | None = None) -> ScanResult:
        """Stamp ``end_time`` and set the summary, then return ``self``.

        Without an explicit summary, one is built from the severity counts,
        e.g. ``"2 findings (HIGH: 1, INFO: 1)"``.
        """
        self.end_time = _utcnow()
        if summary is None:
            nonzero = [f"{sev}: {n}" for sev, n in self.severity_counts.items() if n]
            summary = f"{self.finding_count} findings ({', '.join(nonzero) or 'none'})"
        self.summary = summary
        return self
