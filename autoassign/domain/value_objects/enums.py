"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AvailabilityStatus(str, Enum):
    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"


class Priority(str, Enum):
    CRITICAL = "critical"
    URGENT = "urgent"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, 0 is the most urgent."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[Priority, int] = {
    Priority.CRITICAL: 0,
    Priority.URGENT: 1,
    Priority.HIGH: 2,
    Priority.NORMAL: 3,
    Priority.LOW: 4,
}


class PriorityOrder(str, Enum):
    PRIORITY_FIRST = "priority_first"
    OLDEST_FIRST = "oldest_first"
    NEWEST_FIRST = "newest_first"


class WorkItemStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    PENDING = "pending"
    RESOLVED = "resolved"
    CLOSED = "closed"


# Statuses that count towards an agent's current load
LOAD_BEARING_STATUSES: frozenset[WorkItemStatus] = frozenset(
    {WorkItemStatus.OPEN, WorkItemStatus.IN_PROGRESS}
)


class AssignmentReason(str, Enum):
    INITIAL_ASSIGNMENT = "initial_assignment"
    AUTO_REFILL = "auto_refill"
