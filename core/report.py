"""Report assembler: summary, prioritized listing, disputes, exclusions, agreement matrix."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .domain import (
    PRIORITIES,
    SEVERITY_RANK,
    FindingGroup,
    NormalizationError,
    Resolution,
)
from .grouping import group_sort_key

FLAGGED = "flagged"
NOT_FLAGGED = "not_flagged"
CONTRADICTED = "contradicted"


@dataclass(slots=True)
class AgreementMatrix:
    """Rows are group keys, columns are sources."""

    sources: list[str] = field(default_factory=list)
    rows: list[tuple[str, dict[str, str]]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sources": list(self.sources),
            "rows": [{"group_key": key, "cells": dict(cells)} for key, cells in self.rows],
        }


@dataclass(slots=True)
class Report:
    """Fully assembled consolidation report."""

    context_type: str
    context_fallback: bool = False
    summary: dict[str, int] = field(default_factory=dict)
    totals: dict[str, int] = field(default_factory=dict)
    prioritized: dict[str, list[FindingGroup]] = field(default_factory=dict)
    disputes: list[FindingGroup] = field(default_factory=list)
    excluded: list[FindingGroup] = field(default_factory=list)
    agreement_matrix: AgreementMatrix = field(default_factory=AgreementMatrix)
    errors: list[NormalizationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    unmatched_resolutions: list[Resolution] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def cited_finding_count(self) -> int:
        """Findings cited across prioritized, disputed and excluded sections."""
        groups = [g for bucket in self.prioritized.values() for g in bucket]
        groups += self.disputes + self.excluded
        return sum(len(g.members) for g in groups)

    def to_dict(self) -> dict[str, Any]:
        return {
            "context_type": self.context_type,
            "context_fallback": self.context_fallback,
            "summary": dict(self.summary),
            "totals": dict(self.totals),
            "prioritized": {
                priority: [g.to_dict() for g in groups]
                for priority, groups in self.prioritized.items()
            },
            "disputes": [g.to_dict() for g in self.disputes],
            "excluded": [g.to_dict() for g in self.excluded],
            "agreement_matrix": self.agreement_matrix.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
            "unmatched_resolutions": [r.to_dict() for r in self.unmatched_resolutions],
            "notes": list(self.notes),
        }


def bucket_sort_key(group: FindingGroup) -> tuple:
    """Severity descending, then natural group key order."""
    return (-SEVERITY_RANK[group.severity], group_sort_key(group))


def build_agreement_matrix(
    groups: Iterable[FindingGroup],
    expected_sources: Iterable[str] = (),
) -> AgreementMatrix:
    ordered = sorted(groups, key=group_sort_key)
    sources = sorted({s for g in ordered for s in g.sources} | set(expected_sources))

    rows = []
    for group in ordered:
        flagged = set(group.sources)
        contradicted = group.contradicting_sources()
        cells = {}
        for source in sources:
            if source in contradicted:
                cells[source] = CONTRADICTED
            elif source in flagged:
                cells[source] = FLAGGED
            else:
                cells[source] = NOT_FLAGGED
        rows.append((group.group_key, cells))
    return AgreementMatrix(sources=sources, rows=rows)


def assemble_report(
    groups: list[FindingGroup],
    *,
    context_type: str,
    context_fallback: bool = False,
    errors: Iterable[NormalizationError] = (),
    warnings: Iterable[str] = (),
    unmatched_resolutions: Iterable[Resolution] = (),
    expected_sources: Iterable[str] = (),
) -> Report:
    """Render annotated groups into the report structure.

    Every group lands in exactly one section: a priority bucket, disputes,
    or excluded.
    """
    prioritized: dict[str, list[FindingGroup]] = {priority: [] for priority in PRIORITIES}
    disputes: list[FindingGroup] = []
    excluded: list[FindingGroup] = []

    for group in groups:
        if group.excluded:
            excluded.append(group)
        elif group.priority is not None:
            prioritized[group.priority].append(group)
        else:
            disputes.append(group)

    for bucket in prioritized.values():
        bucket.sort(key=bucket_sort_key)
    disputes.sort(key=bucket_sort_key)
    excluded.sort(key=bucket_sort_key)

    errors = list(errors)
    finding_count = sum(len(g.members) for g in groups)
    notes = []
    if finding_count == 0:
        if errors:
            notes.append(
                f"No valid findings: {len(errors)} record(s) were rejected during normalization "
                f"(context: {context_type})."
            )
        else:
            notes.append(f"No findings: analyzers reported no issues (context: {context_type}).")
    if context_fallback:
        notes.append("Project context type was not recognised; no category filtering was applied.")

    return Report(
        context_type=context_type,
        context_fallback=context_fallback,
        summary={priority: len(prioritized[priority]) for priority in PRIORITIES},
        totals={
            "findings": finding_count,
            "groups": len(groups),
            "prioritized": sum(len(b) for b in prioritized.values()),
            "disputed": len(disputes),
            "excluded": len(excluded),
            "errors": len(errors),
        },
        prioritized=prioritized,
        disputes=disputes,
        excluded=excluded,
        agreement_matrix=build_agreement_matrix(groups, expected_sources),
        errors=errors,
        warnings=list(warnings),
        unmatched_resolutions=list(unmatched_resolutions),
        notes=notes,
    )
