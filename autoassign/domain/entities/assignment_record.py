"""AssignmentRecord entity — immutable audit entry of one assignment decision."""

from dataclasses import dataclass
from datetime import datetime

from autoassign.domain.value_objects.enums import AssignmentReason


@dataclass(frozen=True)
class AssignmentRecord:
    id: int | None
    work_item_id: str
    work_item_number: str
    assigned_agent_id: str
    reason: AssignmentReason
    agent_load_after_assignment: int
    timestamp: datetime
    agent_name: str | None = None  # joined on read, never stored
