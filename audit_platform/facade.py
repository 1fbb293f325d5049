"""Platform orchestration facade that keeps FS/config concerns local."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from contracts.v1.schemas import (
    AnalyzerOutputContract,
    ConsolidateOptions,
    ConsolidateRequest,
    ConsolidateResponse,
    ProjectContextContract,
    ResolutionContract,
)
from core.ports import ContradictionPredicate

from .config import ConsolidationSettings
from .core_client import CoreClient
from .registry import expected_sources_for_audit, source_aliases_for_audit
from .services.consolidation_service import run_consolidation


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: invalid JSON ({e})") from e


class PlatformFacade:
    """Local orchestration facade that prepares payloads for the stateless core.

    With a ``core_client`` the core runs remotely; otherwise in-process.
    """

    def __init__(
        self,
        *,
        settings: ConsolidationSettings | None = None,
        core_client: CoreClient | None = None,
        predicate: ContradictionPredicate | None = None,
    ):
        self.settings = settings or ConsolidationSettings()
        self.core_client = core_client
        self.predicate = predicate

    @staticmethod
    def load_analyzer_output(path: Path) -> AnalyzerOutputContract:
        """Load one analyzer's output file.

        Accepts a bare list of records (source = file stem) or an object with
        ``source``, ``format`` and ``findings``/``records``.
        """
        data = _read_json(path)
        if isinstance(data, list):
            return AnalyzerOutputContract(source=path.stem, records=data)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a list of findings or an object")

        records = data.get("findings", data.get("records", []))
        if not isinstance(records, list):
            raise ValueError(f"{path}: 'findings' must be a list")
        return AnalyzerOutputContract(
            source=str(data.get("source") or path.stem),
            format=str(data.get("format") or "canonical"),
            records=records,
        )

    @staticmethod
    def load_resolutions(path: Path) -> list[ResolutionContract]:
        """Load adjudications from a list or an object with ``resolutions``."""
        data = _read_json(path)
        if isinstance(data, dict):
            data = data.get("resolutions", [])
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of resolutions")
        return [ResolutionContract.model_validate(item) for item in data]

    def build_request(
        self,
        *,
        analyzer_outputs: list[AnalyzerOutputContract],
        context_type: str,
        resolutions: list[ResolutionContract] | None = None,
        audit_type: str | None = None,
        depth: str | None = None,
        focus: list[str] | None = None,
    ) -> ConsolidateRequest:
        """Assemble a consolidate request from loaded inputs and settings.

        With an audit type, outputs whose source is a bare analyzer key
        (``edge``) are renamed to that analyzer's subagent type.
        """
        expected = expected_sources_for_audit(audit_type, depth, focus) if audit_type else []
        if audit_type:
            aliases = source_aliases_for_audit(audit_type)
            analyzer_outputs = [
                output.model_copy(update={"source": aliases[output.source]})
                if output.source in aliases else output
                for output in analyzer_outputs
            ]
        categories = self.settings.relevant_categories.get((context_type or "").strip().upper())
        return ConsolidateRequest(
            analyzer_outputs=analyzer_outputs,
            context=ProjectContextContract(type=context_type, relevant_categories=categories),
            resolutions=resolutions or [],
            options=ConsolidateOptions(
                line_tolerance=self.settings.line_tolerance,
                contradiction_predicate=self.settings.contradiction_predicate,
                expected_sources=expected,
            ),
        )

    async def consolidate(self, request: ConsolidateRequest) -> ConsolidateResponse:
        """Run the request against the remote core, or in-process."""
        if self.core_client is not None:
            return await asyncio.to_thread(self.core_client.consolidate, request)
        return await run_consolidation(request, predicate=self.predicate)

    async def consolidate_files(
        self,
        paths: list[Path],
        *,
        context_type: str,
        resolutions_path: Path | None = None,
        audit_type: str | None = None,
        depth: str | None = None,
        focus: list[str] | None = None,
    ) -> ConsolidateResponse:
        """Load analyzer output files and consolidate them."""
        outputs = [self.load_analyzer_output(path) for path in paths]
        resolutions = self.load_resolutions(resolutions_path) if resolutions_path else []
        request = self.build_request(
            analyzer_outputs=outputs,
            context_type=context_type,
            resolutions=resolutions,
            audit_type=audit_type,
            depth=depth,
            focus=focus,
        )
        return await self.consolidate(request)
