"""Core-native domain models used by the stateless consensus pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SEVERITIES = ("LOW", "MEDIUM", "HIGH", "CRITICAL")
SEVERITY_RANK = {name: rank for rank, name in enumerate(SEVERITIES)}

DECLARED_CONFIDENCES = ("LOW", "MEDIUM", "HIGH")
DECLARED_CONFIDENCE_RANK = {name: rank for rank, name in enumerate(DECLARED_CONFIDENCES)}

CONFIRMED = "CONFIRMED"
LIKELY = "LIKELY"
INVESTIGATE = "INVESTIGATE"
DISPUTED = "DISPUTED"
FALSE_POSITIVE = "FALSE_POSITIVE"
CONSENSUS_CONFIDENCES = (CONFIRMED, LIKELY, INVESTIGATE, DISPUTED, FALSE_POSITIVE)

# DISPUTED has no rank.
CONSENSUS_RANK = {FALSE_POSITIVE: 0, INVESTIGATE: 1, LIKELY: 2, CONFIRMED: 3}

PRIORITIES = ("CRITICAL_PRIORITY", "HIGH_PRIORITY", "MEDIUM_PRIORITY", "LOW_PRIORITY", "INFO")

CONTEXT_TYPES = ("SAAS", "ECOMMERCE", "HEALTHCARE", "SOCIAL_UGC", "STATIC_CONTENT", "AI_ML", "GENERAL")
GENERAL = "GENERAL"

VERDICTS = (CONFIRMED, FALSE_POSITIVE)


class ConsensusError(Exception):
    """Base exception for consensus pipeline failures."""


class DuplicateFindingError(ConsensusError):
    """Raised when two input findings share the same ``(id, source)`` pair."""

    def __init__(self, finding_id: str, source: str):
        super().__init__(
            f"Duplicate finding identity: id '{finding_id}' reported twice by source '{source}'."
        )
        self.finding_id = finding_id
        self.source = source


@dataclass(frozen=True, slots=True)
class Location:
    """Where a finding points: an artifact and optionally a 1-based line."""

    artifact: str
    line: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"artifact": self.artifact, "line": self.line}


@dataclass(slots=True)
class Finding:
    """One normalized report of a potential issue from one analyzer."""

    id: str
    source: str
    title: str
    location: Location | None = None
    severity: str = "MEDIUM"
    declared_confidence: str = "LOW"
    category: str = ""
    rationale: str = ""
    remediation: str = ""

    @property
    def ref(self) -> str:
        """Run-wide unique reference for this finding."""
        return f"{self.source}/{self.id}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        location = data.get("location")
        return cls(
            id=data["id"],
            source=data["source"],
            title=data["title"],
            location=Location(location["artifact"], location.get("line")) if location else None,
            severity=data.get("severity", "MEDIUM"),
            declared_confidence=data.get("declared_confidence", "LOW"),
            category=data.get("category", ""),
            rationale=data.get("rationale", ""),
            remediation=data.get("remediation", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "location": self.location.to_dict() if self.location else None,
            "severity": self.severity,
            "declared_confidence": self.declared_confidence,
            "category": self.category,
            "rationale": self.rationale,
            "remediation": self.remediation,
        }


@dataclass(slots=True)
class Resolution:
    """External adjudication for one group, keyed by its group key."""

    group_key: str
    verdict: str
    reasoning: str = ""

    def __post_init__(self) -> None:
        if self.verdict not in VERDICTS:
            valid = ", ".join(VERDICTS)
            raise ValueError(f"Invalid resolution verdict '{self.verdict}'. Valid verdicts: {valid}")

    def to_dict(self) -> dict[str, Any]:
        return {"group_key": self.group_key, "verdict": self.verdict, "reasoning": self.reasoning}


@dataclass(slots=True)
class FindingGroup:
    """Findings unified by a shared location or subject.

    A group is created once by the grouper; later stages only annotate it.
    """

    group_key: str
    members: list[Finding] = field(default_factory=list)
    artifact: str | None = None
    line_start: int | None = None
    line_end: int | None = None
    consensus_confidence: str | None = None
    priority: str | None = None
    excluded: bool = False
    exclusion_reason: str = ""
    conflicts: list[tuple[str, str]] = field(default_factory=list)
    resolution: Resolution | None = None

    @property
    def sources(self) -> list[str]:
        """Distinct contributing sources, sorted."""
        return sorted({m.source for m in self.members})

    @property
    def severity(self) -> str:
        """Worst-case severity across members."""
        return max((m.severity for m in self.members), key=SEVERITY_RANK.__getitem__)

    @property
    def title(self) -> str:
        return self.members[0].title if self.members else ""

    @property
    def disputed(self) -> bool:
        return self.consensus_confidence == DISPUTED

    def contradicting_sources(self) -> set[str]:
        refs = {ref for pair in self.conflicts for ref in pair}
        return {m.source for m in self.members if m.ref in refs}

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_key": self.group_key,
            "artifact": self.artifact,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "title": self.title,
            "severity": self.severity,
            "sources": self.sources,
            "consensus_confidence": self.consensus_confidence,
            "priority": self.priority,
            "excluded": self.excluded,
            "exclusion_reason": self.exclusion_reason,
            "conflicts": [list(pair) for pair in self.conflicts],
            "resolution": self.resolution.to_dict() if self.resolution else None,
            "members": [m.to_dict() for m in self.members],
        }


@dataclass(slots=True)
class ProjectContext:
    """External classification of the audited project.

    ``relevant_categories`` overrides the static lookup table when given.
    """

    type: str = GENERAL
    relevant_categories: frozenset[str] | None = None


@dataclass(slots=True)
class AnalyzerOutput:
    """One analyzer's raw output, read through the adapter named by ``format``."""

    source: str
    records: list[Any] = field(default_factory=list)
    format: str = "canonical"


@dataclass(slots=True)
class NormalizationError:
    """A raw record rejected by the normalizer."""

    source: str
    index: int
    reason: str
    record: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "index": self.index, "reason": self.reason, "record": self.record}
