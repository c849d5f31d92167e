"""Per-agent auto-assignment override endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from autoassign.application.use_cases.agent_overrides import (
    GetAgentOverridesUseCase,
    UpdateAgentOverridesUseCase,
)
from autoassign.infrastructure.api.dependencies import (
    get_agent_overrides_uc,
    get_update_agent_overrides_uc,
)
from autoassign.infrastructure.api.schemas import (
    AgentOverridesUpdateRequest,
    serialize_overrides,
)

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("/{agent_id}/auto-assign")
async def get_agent_settings(
    agent_id: str,
    uc: GetAgentOverridesUseCase = Depends(get_agent_overrides_uc),
):
    overrides = await uc.execute(agent_id)
    return {"status": "ok", "settings": serialize_overrides(overrides)}


@router.patch("/{agent_id}/auto-assign")
async def update_agent_settings(
    agent_id: str,
    body: AgentOverridesUpdateRequest,
    uc: UpdateAgentOverridesUseCase = Depends(get_update_agent_overrides_uc),
):
    """Update overrides; null clears a field back to the policy default."""
    overrides = await uc.execute(agent_id, body.model_dump(exclude_unset=True))
    return {
        "status": "ok",
        "message": "Agent settings updated",
        "settings": serialize_overrides(overrides),
    }
