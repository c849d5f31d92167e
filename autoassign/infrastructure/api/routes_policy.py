"""Policy endpoints — read and partially update the assignment policy."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from autoassign.application.use_cases.manage_policy import GetPolicyUseCase, UpdatePolicyUseCase
from autoassign.infrastructure.api.dependencies import get_policy_uc, get_update_policy_uc
from autoassign.infrastructure.api.schemas import PolicyUpdateRequest, serialize_policy

router = APIRouter(prefix="/auto-assignment", tags=["auto-assignment"])


@router.get("/config")
async def get_config(uc: GetPolicyUseCase = Depends(get_policy_uc)):
    """Return the current auto-assignment policy."""
    policy = await uc.execute()
    return {"status": "ok", "config": serialize_policy(policy)}


@router.patch("/config")
async def update_config(
    body: PolicyUpdateRequest,
    uc: UpdatePolicyUseCase = Depends(get_update_policy_uc),
):
    """Update only the fields present in the request body."""
    policy = await uc.execute(body.model_dump(exclude_unset=True))
    return {
        "status": "ok",
        "message": "Configuration updated successfully",
        "config": serialize_policy(policy),
    }
