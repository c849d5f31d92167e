"""SQLAlchemy repository implementations."""

from __future__ import annotations

from contextlib import asynccontextmanager

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.persistence.models import (
    AgentModel,
    AssignmentRecordModel,
    BusinessHoursModel,
    PolicyModel,
    WorkItemModel,
)
from autoassign.application.ports.agent_repo import AgentDirectory
from autoassign.application.ports.audit_repo import AuditLogRepository
from autoassign.application.ports.business_hours_repo import BusinessHoursRepository
from autoassign.application.ports.policy_repo import PolicyRepository
from autoassign.application.ports.unit_of_work import UnitOfWork
from autoassign.application.ports.work_item_repo import WorkItemRepository
from autoassign.domain.entities.agent import Agent, AgentOverrides
from autoassign.domain.entities.assignment_record import AssignmentRecord
from autoassign.domain.entities.policy import AssignmentPolicy
from autoassign.domain.entities.work_item import WorkItem
from autoassign.domain.errors import StoreError
from autoassign.domain.value_objects.business_hours import BusinessHoursWindow
from autoassign.domain.value_objects.enums import (
    LOAD_BEARING_STATUSES,
    AssignmentReason,
    AvailabilityStatus,
    Priority,
    PriorityOrder,
    WorkItemStatus,
)

# Staff roles that can receive auto-assigned work (bots and viewers cannot)
ASSIGNABLE_ROLES = ("admin", "agent")


@asynccontextmanager
async def _store_errors(operation: str, **details):
    """Translate driver/ORM failures into StoreError with replay context."""
    try:
        yield
    except SQLAlchemyError as e:
        raise StoreError(f"{operation} failed", {**details, "cause": str(e)}) from e


# ─── Mappers ─────────────────────────────────────────────────────────


def _policy_to_domain(m: PolicyModel) -> AssignmentPolicy:
    return AssignmentPolicy(
        id=m.id,
        enabled=m.enabled,
        max_assigned_tickets=m.max_assigned_tickets,
        refill_threshold=m.refill_threshold,
        priority_order=PriorityOrder(m.priority_order),
        channels=frozenset(m.channels or ()),
        business_hours_only=m.business_hours_only,
        version=m.version,
        updated_at=m.updated_at,
    )


def _policy_column_value(policy: AssignmentPolicy, name: str):
    value = getattr(policy, name)
    if name == "priority_order":
        return value.value
    if name == "channels":
        return sorted(value)
    return value


def _agent_to_domain(m: AgentModel, load: int) -> Agent:
    return Agent(
        id=m.id,
        name=m.name,
        availability_status=AvailabilityStatus(m.availability_status),
        auto_assign_enabled=m.auto_assign_enabled is not False,
        auto_assign_max=m.auto_assign_max,
        auto_assign_channels=(
            frozenset(m.auto_assign_channels) if m.auto_assign_channels is not None else None
        ),
        current_load=load,
    )


def _overrides_to_domain(m: AgentModel) -> AgentOverrides:
    return AgentOverrides(
        agent_id=m.id,
        name=m.name,
        auto_assign_enabled=m.auto_assign_enabled is not False,
        auto_assign_max=m.auto_assign_max,
        auto_assign_channels=(
            frozenset(m.auto_assign_channels) if m.auto_assign_channels is not None else None
        ),
    )


def _work_item_to_domain(m: WorkItemModel) -> WorkItem:
    return WorkItem(
        id=m.id,
        human_number=m.human_number,
        channel=m.channel,
        priority=Priority(m.priority),
        created_at=m.created_at,
        status=WorkItemStatus(m.status),
        assigned_agent_id=m.assigned_agent_id,
        updated_at=m.updated_at,
    )


def _record_to_domain(m: AssignmentRecordModel, agent_name: str | None = None) -> AssignmentRecord:
    return AssignmentRecord(
        id=m.id,
        work_item_id=m.work_item_id,
        work_item_number=m.work_item_number,
        assigned_agent_id=m.assigned_agent_id,
        reason=AssignmentReason(m.reason),
        agent_load_after_assignment=m.agent_load_after_assignment,
        timestamp=m.assigned_at,
        agent_name=agent_name,
    )


def _load_subquery():
    """Live open / in-progress count per assigned agent."""
    return (
        select(
            WorkItemModel.assigned_agent_id.label("agent_id"),
            func.count().label("load"),
        )
        .where(
            WorkItemModel.assigned_agent_id.is_not(None),
            WorkItemModel.status.in_([s.value for s in LOAD_BEARING_STATUSES]),
            WorkItemModel.deleted_at.is_(None),
        )
        .group_by(WorkItemModel.assigned_agent_id)
        .subquery()
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlPolicyRepository(PolicyRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get(self, policy_id: str) -> AssignmentPolicy | None:
        async with _store_errors("Loading policy", policy_id=policy_id):
            # populate_existing: always read fresh, never the identity-map copy
            m = await self._s.get(PolicyModel, policy_id, populate_existing=True)
        return _policy_to_domain(m) if m else None

    async def save(
        self,
        policy: AssignmentPolicy,
        fields: frozenset[str],
        expected_version: int,
    ) -> bool:
        values = {name: _policy_column_value(policy, name) for name in fields}
        values["version"] = policy.version
        if policy.updated_at is not None:
            values["updated_at"] = policy.updated_at

        async with _store_errors(
            "Saving policy", policy_id=policy.id, expected_version=expected_version
        ):
            result = await self._s.execute(
                update(PolicyModel)
                .where(
                    PolicyModel.id == policy.id,
                    PolicyModel.version == expected_version,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount == 1


class SqlAgentDirectory(AgentDirectory):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_candidates(self) -> list[Agent]:
        load = _load_subquery()
        async with _store_errors("Loading agents"):
            result = await self._s.execute(
                select(AgentModel, func.coalesce(load.c.load, 0))
                .outerjoin(load, load.c.agent_id == AgentModel.id)
                .where(AgentModel.role.in_(ASSIGNABLE_ROLES))
                .order_by(AgentModel.id)
            )
            rows = result.all()
        return [_agent_to_domain(m, count) for m, count in rows]

    async def get_overrides(self, agent_id: str) -> AgentOverrides | None:
        async with _store_errors("Loading agent overrides", agent_id=agent_id):
            m = await self._s.get(AgentModel, agent_id)
        return _overrides_to_domain(m) if m else None

    async def update_overrides(self, agent_id: str, changes: dict) -> AgentOverrides | None:
        async with _store_errors("Updating agent overrides", agent_id=agent_id):
            m = await self._s.get(AgentModel, agent_id)
            if m is None:
                return None
            if "auto_assign_enabled" in changes:
                m.auto_assign_enabled = changes["auto_assign_enabled"]
            if "auto_assign_max" in changes:
                m.auto_assign_max = changes["auto_assign_max"]
            if "auto_assign_channels" in changes:
                channels = changes["auto_assign_channels"]
                m.auto_assign_channels = sorted(channels) if channels is not None else None
            await self._s.flush()
        return _overrides_to_domain(m)


class SqlWorkItemRepository(WorkItemRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_unassigned(
        self,
        channels: frozenset[str],
        priority_order: PriorityOrder,
        limit: int,
    ) -> list[WorkItem]:
        if not channels:
            return []

        if priority_order == PriorityOrder.PRIORITY_FIRST:
            rank = case(
                {p.value: p.rank for p in Priority},
                value=WorkItemModel.priority,
                else_=len(Priority),
            )
            order_by = (rank.asc(), WorkItemModel.created_at.asc(), WorkItemModel.id.asc())
        elif priority_order == PriorityOrder.NEWEST_FIRST:
            order_by = (WorkItemModel.created_at.desc(), WorkItemModel.id.asc())
        else:
            order_by = (WorkItemModel.created_at.asc(), WorkItemModel.id.asc())

        async with _store_errors("Loading unassigned work items"):
            result = await self._s.execute(
                select(WorkItemModel)
                .where(
                    WorkItemModel.assigned_agent_id.is_(None),
                    WorkItemModel.status == WorkItemStatus.OPEN.value,
                    WorkItemModel.deleted_at.is_(None),
                    WorkItemModel.channel.in_(sorted(channels)),
                )
                .order_by(*order_by)
                .limit(limit)
            )
            return [_work_item_to_domain(m) for m in result.scalars()]

    async def assign(self, item: WorkItem) -> bool:
        async with _store_errors(
            "Assigning work item", work_item_id=item.id, agent_id=item.assigned_agent_id
        ):
            result = await self._s.execute(
                update(WorkItemModel)
                .where(
                    WorkItemModel.id == item.id,
                    WorkItemModel.assigned_agent_id.is_(None),
                )
                .values(
                    assigned_agent_id=item.assigned_agent_id,
                    status=item.status.value,
                    updated_at=item.updated_at,
                )
            )
            await self._s.flush()
        return result.rowcount == 1


class SqlAuditLogRepository(AuditLogRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def append(self, record: AssignmentRecord) -> AssignmentRecord:
        m = AssignmentRecordModel(
            work_item_id=record.work_item_id,
            work_item_number=record.work_item_number,
            assigned_agent_id=record.assigned_agent_id,
            reason=record.reason.value,
            agent_load_after_assignment=record.agent_load_after_assignment,
            assigned_at=record.timestamp,
        )
        async with _store_errors(
            "Appending assignment record",
            work_item_id=record.work_item_id,
            agent_id=record.assigned_agent_id,
        ):
            self._s.add(m)
            await self._s.flush()
        return _record_to_domain(m)

    async def count(self) -> int:
        async with _store_errors("Counting assignment records"):
            result = await self._s.execute(
                select(func.count()).select_from(AssignmentRecordModel)
            )
            return result.scalar_one()

    async def get_history(self, limit: int, offset: int = 0) -> list[AssignmentRecord]:
        async with _store_errors("Loading assignment history"):
            result = await self._s.execute(
                select(AssignmentRecordModel, AgentModel.name)
                .outerjoin(AgentModel, AgentModel.id == AssignmentRecordModel.assigned_agent_id)
                .order_by(
                    AssignmentRecordModel.assigned_at.desc(),
                    AssignmentRecordModel.id.desc(),
                )
                .limit(limit)
                .offset(offset)
            )
            rows = result.all()
        return [_record_to_domain(m, name) for m, name in rows]


class SqlBusinessHoursRepository(BusinessHoursRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_window(self, day_of_week: int) -> BusinessHoursWindow | None:
        async with _store_errors("Loading business hours", day_of_week=day_of_week):
            m = await self._s.get(BusinessHoursModel, day_of_week)
        if m is None:
            return None
        return BusinessHoursWindow(
            day_of_week=m.day_of_week,
            is_open=m.is_open,
            open_time=m.open_time,
            close_time=m.close_time,
        )


class SqlUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def commit(self) -> None:
        async with _store_errors("Commit"):
            await self._s.commit()

    async def rollback(self) -> None:
        async with _store_errors("Rollback"):
            await self._s.rollback()
