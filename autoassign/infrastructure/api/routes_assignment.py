"""Assignment endpoints — manual cycle trigger and audit history."""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from autoassign.application.ports.clock import Clock
from autoassign.application.use_cases.assignment_history import GetAssignmentHistoryUseCase
from autoassign.application.use_cases.run_cycle import RunAssignmentCycleUseCase
from autoassign.config import settings
from autoassign.infrastructure.api.dependencies import (
    get_clock,
    get_history_uc,
    get_run_cycle_uc,
)
from autoassign.infrastructure.api.schemas import serialize_cycle, serialize_record

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auto-assignment", tags=["auto-assignment"])


@router.post("/run")
async def run_now(
    uc: RunAssignmentCycleUseCase = Depends(get_run_cycle_uc),
    clock: Clock = Depends(get_clock),
):
    """Manually trigger one auto-assignment cycle (same path as the periodic runner)."""
    deadline = clock.now() + timedelta(seconds=settings.cycle_timeout_seconds)
    result = await uc.execute(deadline=deadline)
    logger.info("Manual auto-assignment run: %d assigned", result.assigned)
    return serialize_cycle(result)


@router.get("/history")
async def get_history(
    limit: int | None = Query(default=None),
    offset: int = Query(default=0),
    uc: GetAssignmentHistoryUseCase = Depends(get_history_uc),
):
    """Assignment audit log, newest first."""
    page = await uc.execute(limit=limit, offset=offset)
    return {
        "status": "ok",
        "total": page.total,
        "count": len(page.records),
        "limit": page.limit,
        "offset": page.offset,
        "history": [serialize_record(r) for r in page.records],
    }
