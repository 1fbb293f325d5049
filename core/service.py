"""Stateless core orchestration service (contract in, contract out)."""

from __future__ import annotations

import time

from contracts.v1.adapters import adapt_consolidate_request, adapt_report_to_response
from contracts.v1.schemas import ConsolidateRequest, ConsolidateResponse

from . import __version__
from .normalizer import NormalizationResult
from .pipeline import consolidate_normalized, run_pipeline
from .ports import ContradictionPredicate


def _engine_version() -> str:
    """Report engine version for response metadata."""
    return __version__


def consolidate(
    request: ConsolidateRequest,
    *,
    predicate: ContradictionPredicate | None = None,
) -> ConsolidateResponse:
    """Consolidate raw analyzer outputs into one report.

    ``predicate`` replaces the request's named contradiction predicate, for
    in-process callers that bring their own judgement.
    """
    started = time.perf_counter()
    args = adapt_consolidate_request(request)
    if predicate is not None:
        args["options"].predicate = predicate
    report = run_pipeline(**args)
    elapsed = time.perf_counter() - started
    return adapt_report_to_response(
        report,
        engine_version=_engine_version(),
        timings={"total_seconds": elapsed},
    )


def consolidate_prenormalized(
    request: ConsolidateRequest,
    normalized: NormalizationResult,
    *,
    predicate: ContradictionPredicate | None = None,
) -> ConsolidateResponse:
    """Like ``consolidate`` but over findings the caller already normalized.

    ``request.analyzer_outputs`` is ignored; context, resolutions and options
    still apply.
    """
    started = time.perf_counter()
    args = adapt_consolidate_request(request)
    if predicate is not None:
        args["options"].predicate = predicate
    report = consolidate_normalized(
        normalized,
        args["context"],
        args["resolutions"],
        args["options"],
    )
    elapsed = time.perf_counter() - started
    return adapt_report_to_response(
        report,
        engine_version=_engine_version(),
        timings={"total_seconds": elapsed},
    )
