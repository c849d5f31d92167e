"""Tests for domain entities."""

from dataclasses import FrozenInstanceError
from datetime import datetime, time, timezone

import pytest

from autoassign.domain.value_objects.business_hours import BusinessHoursWindow
from autoassign.domain.value_objects.enums import (
    AvailabilityStatus,
    Priority,
    PriorityOrder,
    WorkItemStatus,
)
from tests.fakes import make_agent, make_item, make_policy

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def test_policy_with_changes_applies_only_given_fields():
    policy = make_policy(max_assigned_tickets=5, refill_threshold=2)
    updated = policy.with_changes({"refill_threshold": 3}, updated_at=NOW)
    assert updated.refill_threshold == 3
    assert updated.max_assigned_tickets == 5
    assert updated.channels == policy.channels
    assert updated.priority_order == PriorityOrder.PRIORITY_FIRST
    assert updated.version == policy.version + 1
    assert updated.updated_at == NOW


def test_policy_with_no_changes_keeps_version():
    policy = make_policy()
    assert policy.with_changes({}) is policy


def test_policy_channels_become_frozenset():
    updated = make_policy().with_changes({"channels": ["sms", "email"]})
    assert updated.channels == frozenset({"sms", "email"})


def test_policy_is_immutable():
    policy = make_policy()
    with pytest.raises(FrozenInstanceError):
        policy.enabled = False


def test_agent_effective_max_prefers_override():
    policy = make_policy(max_assigned_tickets=5)
    assert make_agent("a").effective_max(policy) == 5
    assert make_agent("a", auto_assign_max=1).effective_max(policy) == 1
    assert make_agent("a", auto_assign_max=9).effective_max(policy) == 5


def test_agent_effective_channels_prefers_override():
    policy = make_policy(channels={"email", "chat"})
    assert make_agent("a").effective_channels(policy) == {"email", "chat"}
    agent = make_agent("a", auto_assign_channels=frozenset({"chat"}))
    assert agent.effective_channels(policy) == {"chat"}


def test_agent_has_capacity():
    policy = make_policy(max_assigned_tickets=2)
    assert make_agent("a", load=1).has_capacity(policy) is True
    assert make_agent("a", load=2).has_capacity(policy) is False


def test_agent_is_online():
    assert make_agent("a").is_online() is True
    assert make_agent("a", availability_status=AvailabilityStatus.AWAY).is_online() is False


def test_work_item_assign_to_touches_only_assignment_fields():
    item = make_item("1", priority=Priority.HIGH, channel="chat", minutes=5)
    before = (item.channel, item.priority, item.created_at, item.human_number)

    item.assign_to("agent-a", NOW)

    assert item.assigned_agent_id == "agent-a"
    assert item.status == WorkItemStatus.IN_PROGRESS
    assert item.updated_at == NOW
    assert (item.channel, item.priority, item.created_at, item.human_number) == before


def test_work_item_cannot_be_assigned_twice():
    item = make_item("1")
    item.assign_to("agent-a", NOW)
    with pytest.raises(ValueError, match="already assigned"):
        item.assign_to("agent-b", NOW)


def test_work_item_is_queueable():
    assert make_item("1").is_queueable() is True
    assert make_item("1", assigned_agent_id="x").is_queueable() is False
    assert make_item("1", status=WorkItemStatus.PENDING).is_queueable() is False


def test_window_contains_is_inclusive():
    window = BusinessHoursWindow(0, True, time(9, 0), time(17, 0))
    assert window.contains(time(9, 0)) is True
    assert window.contains(time(17, 0, 59)) is True
    assert window.contains(time(8, 59)) is False
    assert window.contains(time(17, 1)) is False


def test_closed_window_contains_nothing():
    window = BusinessHoursWindow(6, False, time(9, 0), time(17, 0))
    assert window.contains(time(12, 0)) is False


def test_overnight_window_wraps_midnight():
    window = BusinessHoursWindow(0, True, time(22, 0), time(6, 0))
    assert window.contains(time(23, 30)) is True
    assert window.contains(time(5, 0)) is True
    assert window.contains(time(12, 0)) is False
