"""Per-agent auto-assignment overrides — read and partial update."""

from __future__ import annotations

import logging

from autoassign.application.ports.agent_repo import AgentDirectory
from autoassign.application.ports.unit_of_work import UnitOfWork
from autoassign.application.use_cases.manage_policy import normalize_channels
from autoassign.domain.entities.agent import AgentOverrides
from autoassign.domain.errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

OVERRIDE_FIELDS = frozenset({"auto_assign_enabled", "auto_assign_max", "auto_assign_channels"})


def validate_override_changes(changes: dict) -> dict:
    """Type-check an override update. ``None`` clears an override back to the policy default."""
    unknown = set(changes) - OVERRIDE_FIELDS
    if unknown:
        raise ValidationError("Unknown override fields", {"fields": sorted(unknown)})

    clean: dict = {}
    if "auto_assign_enabled" in changes:
        value = changes["auto_assign_enabled"]
        if not isinstance(value, bool):
            raise ValidationError(
                "auto_assign_enabled must be a boolean", {"value": repr(value)}
            )
        clean["auto_assign_enabled"] = value

    if "auto_assign_max" in changes:
        value = changes["auto_assign_max"]
        if value is not None:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError("auto_assign_max must be an integer", {"value": repr(value)})
            if value < 1:
                raise ValidationError(
                    "auto_assign_max must be at least 1, use null to clear it",
                    {"value": value},
                )
        clean["auto_assign_max"] = value

    if "auto_assign_channels" in changes:
        value = changes["auto_assign_channels"]
        clean["auto_assign_channels"] = (
            None if value is None else normalize_channels("auto_assign_channels", value)
        )

    return clean


class GetAgentOverridesUseCase:
    def __init__(self, agent_directory: AgentDirectory):
        self._agents = agent_directory

    async def execute(self, agent_id: str) -> AgentOverrides:
        overrides = await self._agents.get_overrides(agent_id)
        if overrides is None:
            raise NotFound("Agent not found", {"agent_id": agent_id})
        return overrides


class UpdateAgentOverridesUseCase:
    def __init__(self, agent_directory: AgentDirectory, unit_of_work: UnitOfWork):
        self._agents = agent_directory
        self._uow = unit_of_work

    async def execute(self, agent_id: str, changes: dict) -> AgentOverrides:
        clean = validate_override_changes(changes)
        if not clean:
            return await GetAgentOverridesUseCase(self._agents).execute(agent_id)

        overrides = await self._agents.update_overrides(agent_id, clean)
        if overrides is None:
            await self._uow.rollback()
            raise NotFound("Agent not found", {"agent_id": agent_id})

        await self._uow.commit()
        logger.info("Auto-assign overrides for agent %s updated (%s)", agent_id, ", ".join(sorted(clean)))
        return overrides
