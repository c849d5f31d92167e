"""Port interface for work item persistence."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.work_item import WorkItem
from autoassign.domain.value_objects.enums import PriorityOrder


class WorkItemRepository(ABC):
    @abstractmethod
    async def get_unassigned(
        self,
        channels: frozenset[str],
        priority_order: PriorityOrder,
        limit: int,
    ) -> list[WorkItem]:
        """Return open, unassigned items on *channels*, ordered per *priority_order*, at most *limit*."""
        ...

    @abstractmethod
    async def assign(self, item: WorkItem) -> bool:
        """Persist ``assigned_agent_id`` / ``status`` / ``updated_at`` of *item*.

        Must only succeed while the stored row is still unassigned; returns
        False when another actor got there first.
        """
        ...
