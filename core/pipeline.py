"""Stateless consensus pipeline: normalize, group, filter, vote, resolve, rank, report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .conflicts import apply_conflicts, apply_resolutions, no_contradictions
from .domain import AnalyzerOutput, ProjectContext, Resolution
from .grouping import DEFAULT_LINE_TOLERANCE, group_findings
from .normalizer import NormalizationResult, ensure_unique_identities, normalize_outputs
from .ports import ContradictionPredicate, RecordAdapter
from .priority import apply_priorities
from .relevance import apply_relevance, resolve_context_type
from .report import Report, assemble_report
from .voting import apply_votes

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineOptions:
    """Per-run tuning knobs. Nothing here outlives a run."""

    line_tolerance: int = DEFAULT_LINE_TOLERANCE
    predicate: ContradictionPredicate = no_contradictions
    expected_sources: list[str] = field(default_factory=list)
    relevance_table: Mapping[str, frozenset[str] | None] | None = None
    adapters: dict[str, RecordAdapter] | None = None


def consolidate_normalized(
    normalized: NormalizationResult,
    context: ProjectContext,
    resolutions: Iterable[Resolution] = (),
    options: PipelineOptions | None = None,
) -> Report:
    """Run stages 2-7 over an already-normalized finding set."""
    opts = options or PipelineOptions()
    ensure_unique_identities(normalized.findings)

    context_type, fell_back = resolve_context_type(context.type)
    run_context = ProjectContext(type=context_type, relevant_categories=context.relevant_categories)

    groups = group_findings(normalized.findings, line_tolerance=opts.line_tolerance)
    apply_relevance(groups, run_context, table=opts.relevance_table)
    apply_votes(groups)
    apply_conflicts(groups, opts.predicate)
    unmatched = apply_resolutions(groups, resolutions)
    apply_priorities(groups)

    report = assemble_report(
        groups,
        context_type=context_type,
        context_fallback=fell_back,
        errors=normalized.errors,
        warnings=normalized.warnings,
        unmatched_resolutions=unmatched,
        expected_sources=opts.expected_sources,
    )
    logger.info(
        "Consolidated %d finding(s) into %d group(s): %d prioritized, %d disputed, %d excluded.",
        report.totals["findings"],
        report.totals["groups"],
        report.totals["prioritized"],
        report.totals["disputed"],
        report.totals["excluded"],
    )
    return report


def run_pipeline(
    outputs: Iterable[AnalyzerOutput],
    context: ProjectContext,
    resolutions: Iterable[Resolution] = (),
    options: PipelineOptions | None = None,
) -> Report:
    """Run the whole pipeline over raw analyzer outputs.

    Raises ``DuplicateFindingError`` on a repeated ``(id, source)`` pair; every
    other input problem is reported inside the returned ``Report``.
    """
    opts = options or PipelineOptions()
    normalized = normalize_outputs(outputs, adapters=opts.adapters)
    return consolidate_normalized(normalized, context, resolutions, opts)
