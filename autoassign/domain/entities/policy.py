"""AssignmentPolicy entity — the tunable configuration of the engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

from autoassign.domain.value_objects.enums import PriorityOrder

DEFAULT_POLICY_ID = "default"


@dataclass(frozen=True)
class AssignmentPolicy:
    """Snapshot of the policy, loaded fresh at the start of every cycle.

    Frozen so one cycle can never leak a modified policy into the next;
    updates produce a new value with ``version`` bumped.
    """

    id: str
    enabled: bool
    max_assigned_tickets: int
    refill_threshold: int
    priority_order: PriorityOrder
    channels: frozenset[str] = field(default_factory=frozenset)
    business_hours_only: bool = False
    version: int = 1
    updated_at: datetime | None = None

    def accepts_channel(self, channel: str) -> bool:
        return channel in self.channels

    def with_changes(self, changes: dict, updated_at: datetime | None = None) -> AssignmentPolicy:
        """Apply only the fields present in *changes*, leaving the rest untouched."""
        if not changes:
            return self
        if "channels" in changes:
            changes = {**changes, "channels": frozenset(changes["channels"])}
        return replace(self, **changes, version=self.version + 1, updated_at=updated_at)
