"""Pydantic contracts for the v1 stateless consensus API."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
DeclaredConfidence = Literal["LOW", "MEDIUM", "HIGH"]
ConsensusConfidence = Literal["CONFIRMED", "LIKELY", "INVESTIGATE", "DISPUTED", "FALSE_POSITIVE"]
Priority = Literal["CRITICAL_PRIORITY", "HIGH_PRIORITY", "MEDIUM_PRIORITY", "LOW_PRIORITY", "INFO"]
Verdict = Literal["CONFIRMED", "FALSE_POSITIVE"]
MatrixCell = Literal["flagged", "not_flagged", "contradicted"]


class _StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class LocationContract(_StrictModel):
    artifact: str = Field(min_length=1)
    line: int | None = Field(default=None, ge=1)


class FindingContract(_StrictModel):
    id: str
    source: str
    title: str
    location: LocationContract | None = None
    severity: Severity
    declared_confidence: DeclaredConfidence
    category: str = ""
    rationale: str = ""
    remediation: str = ""


class AnalyzerOutputContract(_StrictModel):
    """One analyzer's raw output. Records are validated by the normalizer, not here."""

    source: str = ""
    format: str = "canonical"
    records: list[Any] = Field(default_factory=list)


class ProjectContextContract(_StrictModel):
    type: str = "GENERAL"
    relevant_categories: list[str] | None = None


class ResolutionContract(_StrictModel):
    group_key: str = Field(min_length=1)
    verdict: Verdict
    reasoning: str = ""


class ConsolidateOptions(_StrictModel):
    line_tolerance: int = Field(default=0, ge=0)
    contradiction_predicate: Literal["none", "clearance-markers"] = "none"
    expected_sources: list[str] = Field(default_factory=list)


class ConsolidateRequest(_StrictModel):
    analyzer_outputs: list[AnalyzerOutputContract] = Field(default_factory=list)
    context: ProjectContextContract = Field(default_factory=ProjectContextContract)
    resolutions: list[ResolutionContract] = Field(default_factory=list)
    options: ConsolidateOptions = Field(default_factory=ConsolidateOptions)


class FindingGroupContract(_StrictModel):
    group_key: str
    artifact: str | None = None
    line_start: int | None = None
    line_end: int | None = None
    title: str
    severity: Severity
    sources: list[str]
    consensus_confidence: ConsensusConfidence | None = None
    priority: Priority | None = None
    excluded: bool = False
    exclusion_reason: str = ""
    conflicts: list[list[str]] = Field(default_factory=list)
    resolution: ResolutionContract | None = None
    members: list[FindingContract]


class AgreementRowContract(_StrictModel):
    group_key: str
    cells: dict[str, MatrixCell]


class AgreementMatrixContract(_StrictModel):
    sources: list[str] = Field(default_factory=list)
    rows: list[AgreementRowContract] = Field(default_factory=list)


class NormalizationErrorContract(_StrictModel):
    source: str
    index: int = Field(ge=0)
    reason: str
    record: Any = None


class ReportContract(_StrictModel):
    context_type: str
    context_fallback: bool = False
    summary: dict[Priority, int]
    totals: dict[str, int]
    prioritized: dict[Priority, list[FindingGroupContract]]
    disputes: list[FindingGroupContract] = Field(default_factory=list)
    excluded: list[FindingGroupContract] = Field(default_factory=list)
    agreement_matrix: AgreementMatrixContract
    errors: list[NormalizationErrorContract] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    unmatched_resolutions: list[ResolutionContract] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class MetaContract(_StrictModel):
    engine_version: str
    timings: dict[str, float] | None = None


class ConsolidateResponse(_StrictModel):
    report: ReportContract
    errors: list[NormalizationErrorContract] = Field(default_factory=list)
    meta: MetaContract
