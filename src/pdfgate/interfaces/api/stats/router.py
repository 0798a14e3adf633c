"""Runtime metrics endpoint."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from pdfgate.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/metrics")
async def metrics(request: Request) -> JSONResponse:
    """Return in-memory runtime metrics.

    Includes render stats, admission gate utilisation, browser pool
    lifecycle counters, and graceful-shutdown status.
    """
    state = cast(AppState, request.app.state)

    content: dict[str, Any] = {}

    render_metrics = getattr(state, "metrics", None)
    if render_metrics is not None:
        content.update(render_metrics.snapshot())

    admission = getattr(state, "admission", None)
    content["admission"] = admission.snapshot() if admission is not None else None

    pool = getattr(state, "browser_pool", None)
    content["browser_pool"] = pool.snapshot() if pool is not None else None

    content["graceful_shutdown"] = state.graceful_shutdown.snapshot()

    return JSONResponse(content=content)
