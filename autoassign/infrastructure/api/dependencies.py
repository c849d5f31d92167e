"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.clock.system_clock import SystemClock
from autoassign.adapters.persistence.database import get_session
from autoassign.adapters.persistence.repositories import (
    SqlAgentDirectory,
    SqlAuditLogRepository,
    SqlBusinessHoursRepository,
    SqlPolicyRepository,
    SqlUnitOfWork,
    SqlWorkItemRepository,
)
from autoassign.application.ports.clock import Clock
from autoassign.application.use_cases.agent_overrides import (
    GetAgentOverridesUseCase,
    UpdateAgentOverridesUseCase,
)
from autoassign.application.use_cases.assignment_history import GetAssignmentHistoryUseCase
from autoassign.application.use_cases.manage_policy import (
    GetPolicyUseCase,
    UpdatePolicyUseCase,
)
from autoassign.application.use_cases.run_cycle import RunAssignmentCycleUseCase
from autoassign.config import settings

# Stateless singleton
_clock = SystemClock()


def get_clock() -> Clock:
    return _clock


def build_run_cycle_uc(session: AsyncSession, clock: Clock) -> RunAssignmentCycleUseCase:
    """Shared by the manual trigger and the periodic runner so both paths behave the same."""
    return RunAssignmentCycleUseCase(
        policy_repo=SqlPolicyRepository(session),
        agent_directory=SqlAgentDirectory(session),
        work_item_repo=SqlWorkItemRepository(session),
        audit_repo=SqlAuditLogRepository(session),
        business_hours_repo=SqlBusinessHoursRepository(session),
        clock=clock,
        unit_of_work=SqlUnitOfWork(session),
        policy_id=settings.policy_id,
        page_size=settings.queue_page_size,
        timezone=settings.business_hours_timezone,
    )


def get_run_cycle_uc(
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> RunAssignmentCycleUseCase:
    return build_run_cycle_uc(session, clock)


def get_policy_uc(session: AsyncSession = Depends(get_session)) -> GetPolicyUseCase:
    return GetPolicyUseCase(SqlPolicyRepository(session), policy_id=settings.policy_id)


def get_update_policy_uc(
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
) -> UpdatePolicyUseCase:
    return UpdatePolicyUseCase(
        SqlPolicyRepository(session),
        clock=clock,
        unit_of_work=SqlUnitOfWork(session),
        policy_id=settings.policy_id,
    )


def get_history_uc(session: AsyncSession = Depends(get_session)) -> GetAssignmentHistoryUseCase:
    return GetAssignmentHistoryUseCase(
        SqlAuditLogRepository(session), default_limit=settings.history_default_limit
    )


def get_agent_overrides_uc(
    session: AsyncSession = Depends(get_session),
) -> GetAgentOverridesUseCase:
    return GetAgentOverridesUseCase(SqlAgentDirectory(session))


def get_update_agent_overrides_uc(
    session: AsyncSession = Depends(get_session),
) -> UpdateAgentOverridesUseCase:
    return UpdateAgentOverridesUseCase(SqlAgentDirectory(session), SqlUnitOfWork(session))
