"""PeriodicCycleRunner — the timer that fires an auto-assignment cycle every N seconds."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from autoassign.application.ports.clock import Clock
from autoassign.application.use_cases.run_cycle import CycleResult, RunAssignmentCycleUseCase
from autoassign.domain.errors import AutoAssignError

logger = logging.getLogger(__name__)


class PeriodicCycleRunner:
    """Runs the same use case as the manual trigger, on a fixed interval.

    Each tick gets its own session. A failed cycle is logged and the runner
    simply waits for the next tick; there is no retry within a tick.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        build_use_case: Callable[[AsyncSession, Clock], RunAssignmentCycleUseCase],
        clock: Clock,
        interval_seconds: float,
        timeout_seconds: float,
    ):
        self._session_factory = session_factory
        self._build_use_case = build_use_case
        self._clock = clock
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="auto-assignment-runner")
        logger.info("Auto-assignment runner started (every %.0fs)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        logger.info("Auto-assignment runner stopped")

    async def run_once(self) -> CycleResult | None:
        """One tick. Returns None when the cycle failed."""
        deadline = self._clock.now() + timedelta(seconds=self._timeout)
        async with self._session_factory() as session:
            use_case = self._build_use_case(session, self._clock)
            try:
                result = await use_case.execute(deadline=deadline)
            except AutoAssignError as e:
                logger.error("Scheduled auto-assignment failed: %s %s", e.message, e.details)
                return None

        if result.assigned > 0:
            logger.info("Scheduled run assigned %d tickets", result.assigned)
            for r in result.results:
                logger.info("  - %s → %s (%s)", r.work_item_number, r.assigned_agent_id, r.reason.value)
        else:
            logger.info("Scheduled run: no tickets assigned (%s)", result.status)
        return result

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception:
                logger.exception("Error in auto-assignment runner tick")
            await asyncio.sleep(self._interval)
