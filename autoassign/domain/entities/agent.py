"""Agent entity — a staff member who can receive auto-assigned work."""

from __future__ import annotations

from dataclasses import dataclass

from autoassign.domain.entities.policy import AssignmentPolicy
from autoassign.domain.value_objects.enums import AvailabilityStatus


@dataclass
class Agent:
    id: str
    name: str
    availability_status: AvailabilityStatus
    auto_assign_enabled: bool = True
    auto_assign_max: int | None = None
    auto_assign_channels: frozenset[str] | None = None
    current_load: int = 0

    def effective_max(self, policy: AssignmentPolicy) -> int:
        """The override can only tighten the policy-wide cap, never raise it."""
        if self.auto_assign_max is not None:
            return min(self.auto_assign_max, policy.max_assigned_tickets)
        return policy.max_assigned_tickets

    def effective_channels(self, policy: AssignmentPolicy) -> frozenset[str]:
        if self.auto_assign_channels is not None:
            return self.auto_assign_channels
        return policy.channels

    def has_capacity(self, policy: AssignmentPolicy) -> bool:
        return self.current_load < self.effective_max(policy)

    def is_online(self) -> bool:
        return self.availability_status == AvailabilityStatus.ONLINE


@dataclass(frozen=True)
class AgentOverrides:
    """Per-agent settings that take precedence over the policy defaults."""

    agent_id: str
    name: str
    auto_assign_enabled: bool
    auto_assign_max: int | None
    auto_assign_channels: frozenset[str] | None
