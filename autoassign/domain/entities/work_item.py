"""WorkItem entity — a customer support ticket waiting for an agent."""

from dataclasses import dataclass
from datetime import datetime

from autoassign.domain.value_objects.enums import Priority, WorkItemStatus


@dataclass
class WorkItem:
    id: str
    human_number: str
    channel: str
    priority: Priority
    created_at: datetime
    status: WorkItemStatus = WorkItemStatus.OPEN
    assigned_agent_id: str | None = None
    updated_at: datetime | None = None

    def is_unassigned(self) -> bool:
        return self.assigned_agent_id is None

    def is_queueable(self) -> bool:
        return self.is_unassigned() and self.status == WorkItemStatus.OPEN

    def assign_to(self, agent_id: str, at: datetime) -> None:
        """Hand the item to an agent. Channel, priority and created_at stay untouched."""
        if self.assigned_agent_id is not None:
            raise ValueError(
                f"Work item {self.human_number} is already assigned to {self.assigned_agent_id}"
            )
        self.assigned_agent_id = agent_id
        self.status = WorkItemStatus.IN_PROGRESS
        self.updated_at = at
