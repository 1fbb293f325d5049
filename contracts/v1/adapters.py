"""Adapters between v1 contracts and core domain objects."""

from __future__ import annotations

from core.conflicts import get_predicate
from core.domain import AnalyzerOutput, ProjectContext, Resolution
from core.pipeline import PipelineOptions
from core.report import Report

from .schemas import (
    AnalyzerOutputContract,
    ConsolidateRequest,
    ConsolidateResponse,
    MetaContract,
    ProjectContextContract,
    ReportContract,
    ResolutionContract,
)


def analyzer_output_from_contract(contract: AnalyzerOutputContract) -> AnalyzerOutput:
    return AnalyzerOutput(
        source=contract.source,
        records=list(contract.records),
        format=contract.format,
    )


def context_from_contract(contract: ProjectContextContract) -> ProjectContext:
    categories = contract.relevant_categories
    return ProjectContext(
        type=contract.type,
        relevant_categories=frozenset(categories) if categories is not None else None,
    )


def resolution_from_contract(contract: ResolutionContract) -> Resolution:
    return Resolution(
        group_key=contract.group_key,
        verdict=contract.verdict,
        reasoning=contract.reasoning,
    )


def adapt_consolidate_request(req: ConsolidateRequest) -> dict:
    """Unpack a v1 consolidate request into pipeline arguments."""
    return {
        "outputs": [analyzer_output_from_contract(o) for o in req.analyzer_outputs],
        "context": context_from_contract(req.context),
        "resolutions": [resolution_from_contract(r) for r in req.resolutions],
        "options": PipelineOptions(
            line_tolerance=req.options.line_tolerance,
            predicate=get_predicate(req.options.contradiction_predicate),
            expected_sources=list(req.options.expected_sources),
        ),
    }


def report_to_contract(report: Report) -> ReportContract:
    return ReportContract.model_validate(report.to_dict())


def adapt_report_to_response(
    report: Report,
    *,
    engine_version: str,
    timings: dict[str, float] | None = None,
) -> ConsolidateResponse:
    """Wrap a core report in the v1 consolidate response contract."""
    contract = report_to_contract(report)
    return ConsolidateResponse(
        report=contract,
        errors=contract.errors,
        meta=MetaContract(engine_version=engine_version, timings=timings),
    )
