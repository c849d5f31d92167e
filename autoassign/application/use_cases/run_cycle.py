"""RunAssignmentCycleUseCase — one pass of eligibility → queue → assign → audit."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from autoassign.application.ports.agent_repo import AgentDirectory
from autoassign.application.ports.audit_repo import AuditLogRepository
from autoassign.application.ports.business_hours_repo import BusinessHoursRepository
from autoassign.application.ports.clock import Clock
from autoassign.application.ports.policy_repo import PolicyRepository
from autoassign.application.ports.unit_of_work import UnitOfWork
from autoassign.application.ports.work_item_repo import WorkItemRepository
from autoassign.domain.entities.assignment_record import AssignmentRecord
from autoassign.domain.entities.policy import DEFAULT_POLICY_ID
from autoassign.domain.errors import AutoAssignError, InternalError, StoreError
from autoassign.domain.policies.assigner import plan_assignments, reason_for_load
from autoassign.domain.policies.business_hours import (
    is_within_business_hours,
    local_weekday,
)
from autoassign.domain.policies.eligibility import select_eligible_agents
from autoassign.domain.policies.work_queue import DEFAULT_PAGE_SIZE, build_queue
from autoassign.domain.value_objects.enums import AssignmentReason

logger = logging.getLogger(__name__)


class CycleStatus:
    COMPLETED = "completed"
    POLICY_MISSING = "policy_missing"
    DISABLED = "disabled"
    OUTSIDE_BUSINESS_HOURS = "outside_business_hours"
    NO_ELIGIBLE_AGENTS = "no_eligible_agents"
    EMPTY_QUEUE = "empty_queue"
    DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass
class AssignmentResult:
    """Summary of one assignment made during a cycle."""

    work_item_id: str
    work_item_number: str
    assigned_agent_id: str
    reason: AssignmentReason


@dataclass
class CycleResult:
    status: str
    assigned: int = 0
    skipped: int = 0
    results: list[AssignmentResult] = field(default_factory=list)
    started_at: datetime | None = None


class CycleLocks:
    """Single-flight guard: at most one cycle per policy id runs at a time.

    A second trigger waits for the running cycle, then runs its own cycle
    against fresh data. The guard is per process.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def for_policy(self, policy_id: str) -> asyncio.Lock:
        lock = self._locks.get(policy_id)
        if lock is None:
            lock = self._locks[policy_id] = asyncio.Lock()
        return lock

    def is_running(self, policy_id: str) -> bool:
        lock = self._locks.get(policy_id)
        return lock is not None and lock.locked()


# Shared by the periodic runner and the manual trigger
cycle_locks = CycleLocks()


class RunAssignmentCycleUseCase:
    """Orchestrates one auto-assignment cycle."""

    def __init__(
        self,
        policy_repo: PolicyRepository,
        agent_directory: AgentDirectory,
        work_item_repo: WorkItemRepository,
        audit_repo: AuditLogRepository,
        business_hours_repo: BusinessHoursRepository,
        clock: Clock,
        unit_of_work: UnitOfWork,
        policy_id: str = DEFAULT_POLICY_ID,
        page_size: int = DEFAULT_PAGE_SIZE,
        timezone: str = "UTC",
        locks: CycleLocks | None = None,
    ):
        self._policies = policy_repo
        self._agents = agent_directory
        self._work_items = work_item_repo
        self._audit = audit_repo
        self._business_hours = business_hours_repo
        self._clock = clock
        self._uow = unit_of_work
        self._policy_id = policy_id
        self._page_size = page_size
        self._timezone = timezone
        self._locks = locks or cycle_locks

    async def execute(self, deadline: datetime | None = None) -> CycleResult:
        """Run one cycle under the per-policy lock.

        Pipeline:
        1. Load policy (missing or disabled → nothing to do)
        2. Business-hours gate
        3. Eligible agents with freshly counted load
        4. Work queue
        5. Plan assignments, then persist each item with its audit record
           in its own transaction

        *deadline* stops the persistence loop before the next item; items
        already committed stay assigned.

        Raises:
            StoreError: a store read/write failed. The cycle is aborted;
                items committed so far stay valid.
            InternalError: anything unexpected.
        """
        lock = self._locks.for_policy(self._policy_id)
        if lock.locked():
            logger.info("Cycle for policy %s already running, waiting", self._policy_id)
        async with lock:
            return await self._run(deadline)

    async def _run(self, deadline: datetime | None) -> CycleResult:
        started_at = self._clock.now()
        context = {"policy_id": self._policy_id, "cycle_started_at": started_at.isoformat()}
        logger.info("Starting auto-assignment cycle for policy %s", self._policy_id)

        try:
            return await self._assign(started_at, deadline, context)
        except AutoAssignError as e:
            await self._uow.rollback()
            e.details = {**context, **e.details}
            logger.exception("Auto-assignment cycle aborted: %s (%s)", e.message, e.details)
            raise
        except Exception as e:
            await self._uow.rollback()
            logger.exception("Unexpected error in auto-assignment cycle (%s)", context)
            raise InternalError("Auto-assignment cycle failed", details=context) from e

    async def _assign(
        self,
        started_at: datetime,
        deadline: datetime | None,
        context: dict,
    ) -> CycleResult:
        # Step 1: policy, read fresh every cycle
        policy = await self._policies.get(self._policy_id)
        if policy is None:
            logger.warning("No assignment policy %s configured, treating as disabled", self._policy_id)
            return CycleResult(status=CycleStatus.POLICY_MISSING, started_at=started_at)
        if not policy.enabled:
            logger.info("Auto-assignment is disabled")
            return CycleResult(status=CycleStatus.DISABLED, started_at=started_at)
        context["policy_version"] = policy.version

        # Step 2: business hours
        if policy.business_hours_only:
            window = await self._business_hours.get_window(
                local_weekday(started_at, self._timezone)
            )
            if not is_within_business_hours(window, started_at, self._timezone):
                logger.info("Outside business hours, skipping")
                return CycleResult(
                    status=CycleStatus.OUTSIDE_BUSINESS_HOURS, started_at=started_at
                )

        # Step 3: eligible agents
        eligible = select_eligible_agents(policy, await self._agents.get_candidates())
        if not eligible:
            logger.info("No eligible agents found")
            return CycleResult(status=CycleStatus.NO_ELIGIBLE_AGENTS, started_at=started_at)
        logger.info("Found %d eligible agents", len(eligible))

        # Step 4: work queue
        candidates = await self._work_items.get_unassigned(
            policy.channels, policy.priority_order, self._page_size
        )
        queue = build_queue(policy, candidates, self._page_size)
        if not queue:
            logger.info("No unassigned work items")
            return CycleResult(status=CycleStatus.EMPTY_QUEUE, started_at=started_at)
        logger.info("Found %d unassigned work items", len(queue))

        # Step 5: plan, then persist item by item
        plan = plan_assignments(policy, eligible, queue)
        result = CycleResult(
            status=CycleStatus.COMPLETED,
            skipped=len(plan.skipped),
            started_at=started_at,
        )
        # Loads planned for items another actor claimed first
        unclaimed: Counter[str] = Counter()

        for index, decision in enumerate(plan.decisions):
            now = self._clock.now()
            if deadline is not None and now >= deadline:
                logger.warning(
                    "Cycle deadline exceeded after %d assignments, %d items left for next cycle",
                    result.assigned, len(plan.decisions) - index,
                )
                result.status = CycleStatus.DEADLINE_EXCEEDED
                break

            item = decision.work_item
            context.update(work_item_id=item.id, agent_id=decision.agent_id)

            item.assign_to(decision.agent_id, now)
            if not await self._work_items.assign(item):
                await self._uow.rollback()
                unclaimed[decision.agent_id] += 1
                logger.warning(
                    "Work item %s was assigned elsewhere during the cycle, skipping",
                    item.human_number,
                )
                continue

            load_after = decision.agent_load_after - unclaimed[decision.agent_id]
            reason = decision.reason
            if unclaimed[decision.agent_id]:
                # The plan counted an item this agent never got
                reason = reason_for_load(policy, load_after - 1)
            await self._audit.append(
                AssignmentRecord(
                    id=None,
                    work_item_id=item.id,
                    work_item_number=item.human_number,
                    assigned_agent_id=decision.agent_id,
                    reason=reason,
                    agent_load_after_assignment=load_after,
                    timestamp=now,
                )
            )
            await self._uow.commit()

            result.assigned += 1
            result.results.append(
                AssignmentResult(
                    work_item_id=item.id,
                    work_item_number=item.human_number,
                    assigned_agent_id=decision.agent_id,
                    reason=reason,
                )
            )
            logger.info(
                "Assigned %s to %s (%s, now has %d)",
                item.human_number, decision.agent_id, reason.value, load_after,
            )

        logger.info(
            "Cycle complete: %d assigned, %d skipped", result.assigned, result.skipped
        )
        return result
