"""Tests for domain enums."""

from autoassign.domain.value_objects.enums import (
    LOAD_BEARING_STATUSES,
    AssignmentReason,
    Priority,
    PriorityOrder,
    WorkItemStatus,
)


def test_priority_rank_order():
    ranked = sorted(Priority, key=lambda p: p.rank)
    assert ranked == [
        Priority.CRITICAL, Priority.URGENT, Priority.HIGH, Priority.NORMAL, Priority.LOW,
    ]


def test_priority_order_values():
    assert {o.value for o in PriorityOrder} == {"priority_first", "oldest_first", "newest_first"}


def test_in_progress_status_value():
    assert WorkItemStatus.IN_PROGRESS.value == "in-progress"


def test_load_bearing_statuses():
    assert LOAD_BEARING_STATUSES == {WorkItemStatus.OPEN, WorkItemStatus.IN_PROGRESS}


def test_reason_values():
    assert AssignmentReason.AUTO_REFILL.value == "auto_refill"
    assert AssignmentReason.INITIAL_ASSIGNMENT.value == "initial_assignment"
