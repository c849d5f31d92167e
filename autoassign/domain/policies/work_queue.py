"""WorkQueue — which unassigned items are offered this cycle, and in what order."""

from __future__ import annotations

from autoassign.domain.entities.policy import AssignmentPolicy
from autoassign.domain.entities.work_item import WorkItem
from autoassign.domain.value_objects.enums import PriorityOrder

DEFAULT_PAGE_SIZE = 50


def build_queue(
    policy: AssignmentPolicy,
    items: list[WorkItem],
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[WorkItem]:
    """Select queueable items on policy channels, order them, cap at *page_size*.

    Ordering per ``policy.priority_order``:
      * priority_first: critical > urgent > high > normal > low, then oldest
      * oldest_first:   created_at ascending
      * newest_first:   created_at descending
    Item id is the final tie-break in every mode.

    Items beyond the page are left for later cycles.
    """
    candidates = [
        item for item in items
        if item.is_queueable() and policy.accepts_channel(item.channel)
    ]

    if policy.priority_order == PriorityOrder.PRIORITY_FIRST:
        candidates.sort(key=lambda i: (i.priority.rank, i.created_at, i.id))
    elif policy.priority_order == PriorityOrder.NEWEST_FIRST:
        # Two stable passes: id ascending, then created_at descending
        candidates.sort(key=lambda i: i.id)
        candidates.sort(key=lambda i: i.created_at, reverse=True)
    else:
        candidates.sort(key=lambda i: (i.created_at, i.id))

    return candidates[:max(page_size, 0)]
