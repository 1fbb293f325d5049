"""Platform consolidation workflow: fan normalization out per analyzer, then run the core."""

from __future__ import annotations

import asyncio
import logging

import core.service as core_service
from contracts.v1.adapters import analyzer_output_from_contract
from contracts.v1.schemas import ConsolidateRequest, ConsolidateResponse
from core.domain import AnalyzerOutput
from core.normalizer import (
    NormalizationResult,
    ensure_unique_identities,
    merge_results,
    normalize_output,
)
from core.ports import ContradictionPredicate, RecordAdapter

logger = logging.getLogger(__name__)


async def normalize_concurrently(
    outputs: list[AnalyzerOutput],
    *,
    adapters: dict[str, RecordAdapter] | None = None,
) -> NormalizationResult:
    """Normalize each analyzer output in a worker thread; fan back in, in input order."""
    results = await asyncio.gather(
        *(asyncio.to_thread(normalize_output, output, adapters=adapters) for output in outputs)
    )
    merged = merge_results(results)
    ensure_unique_identities(merged.findings)
    logger.info(
        "Normalized %d analyzer output(s): %d finding(s), %d rejected record(s).",
        len(outputs),
        len(merged.findings),
        len(merged.errors),
    )
    return merged


async def run_consolidation(
    request: ConsolidateRequest,
    *,
    predicate: ContradictionPredicate | None = None,
    adapters: dict[str, RecordAdapter] | None = None,
) -> ConsolidateResponse:
    """Consolidate in-process with concurrent normalization.

    Raises ``DuplicateFindingError`` when two findings share an ``(id, source)``.
    """
    outputs = [analyzer_output_from_contract(o) for o in request.analyzer_outputs]
    normalized = await normalize_concurrently(outputs, adapters=adapters)
    return core_service.consolidate_prenormalized(request, normalized, predicate=predicate)
