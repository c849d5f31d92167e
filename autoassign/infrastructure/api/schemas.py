"""Request bodies and response serializers for the auto-assignment API.

Strict types: "5" is not an int and "true" is not a bool. Malformed input
is rejected with 422 instead of being coerced.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from autoassign.application.use_cases.run_cycle import CycleResult
from autoassign.domain.entities.agent import AgentOverrides
from autoassign.domain.entities.assignment_record import AssignmentRecord
from autoassign.domain.entities.policy import AssignmentPolicy


class PolicyUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    enabled: bool | None = None
    max_assigned_tickets: int | None = None
    refill_threshold: int | None = None
    priority_order: str | None = None
    channels: list[str] | None = None
    business_hours_only: bool | None = None


class AgentOverridesUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    auto_assign_enabled: bool | None = None
    auto_assign_max: int | None = None
    auto_assign_channels: list[str] | None = None


def serialize_policy(p: AssignmentPolicy) -> dict:
    return {
        "id": p.id,
        "enabled": p.enabled,
        "max_assigned_tickets": p.max_assigned_tickets,
        "refill_threshold": p.refill_threshold,
        "priority_order": p.priority_order.value,
        "channels": sorted(p.channels),
        "business_hours_only": p.business_hours_only,
        "version": p.version,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
    }


def serialize_overrides(o: AgentOverrides) -> dict:
    return {
        "agent_id": o.agent_id,
        "name": o.name,
        "auto_assign_enabled": o.auto_assign_enabled,
        "auto_assign_max": o.auto_assign_max,
        "auto_assign_channels": (
            sorted(o.auto_assign_channels) if o.auto_assign_channels is not None else None
        ),
    }


def serialize_record(r: AssignmentRecord) -> dict:
    return {
        "id": r.id,
        "work_item_id": r.work_item_id,
        "work_item_number": r.work_item_number,
        "assigned_agent_id": r.assigned_agent_id,
        "agent_name": r.agent_name,
        "reason": r.reason.value,
        "agent_load_after_assignment": r.agent_load_after_assignment,
        "timestamp": r.timestamp.isoformat(),
    }


def serialize_cycle(result: CycleResult) -> dict:
    return {
        "status": "ok",
        "cycle_status": result.status,
        "message": f"Auto-assignment completed: {result.assigned} tickets assigned",
        "assigned": result.assigned,
        "skipped": result.skipped,
        "results": [
            {
                "work_item_id": r.work_item_id,
                "work_item_number": r.work_item_number,
                "assigned_agent_id": r.assigned_agent_id,
                "reason": r.reason.value,
            }
            for r in result.results
        ],
    }
