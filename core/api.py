"""FastAPI app for the stateless consensus core."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException

import core.service as core_service
from core import __version__ as CORE_VERSION
from core.domain import DuplicateFindingError
from contracts.v1.schemas import ConsolidateRequest, ConsolidateResponse

app = FastAPI(
    title="audit-consensus-core",
    description="Stateless consensus API (analyzer findings in, prioritized report out)",
    version=CORE_VERSION,
)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness/readiness probe endpoint."""
    return {"status": "ok"}


@app.post("/v1/consolidate", response_model=ConsolidateResponse)
def consolidate_v1(request: ConsolidateRequest) -> ConsolidateResponse:
    """Consolidate analyzer outputs using the v1 stateless contract."""
    try:
        return core_service.consolidate(request)
    except DuplicateFindingError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
