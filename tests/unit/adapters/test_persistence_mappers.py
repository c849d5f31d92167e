"""Tests for ORM ↔ domain mapping and store error translation."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from autoassign.adapters.persistence.models import AgentModel, PolicyModel, WorkItemModel
from autoassign.adapters.persistence.repositories import (
    _agent_to_domain,
    _overrides_to_domain,
    _policy_column_value,
    _policy_to_domain,
    _store_errors,
    _work_item_to_domain,
)
from autoassign.domain.errors import StoreError
from autoassign.domain.value_objects.enums import (
    AvailabilityStatus,
    Priority,
    PriorityOrder,
    WorkItemStatus,
)

NOW = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def test_policy_channels_become_frozenset():
    model = PolicyModel(
        id="default", enabled=True, max_assigned_tickets=5, refill_threshold=2,
        priority_order="newest_first", channels=["email", "chat", "email"],
        business_hours_only=False, version=3, updated_at=NOW,
    )
    policy = _policy_to_domain(model)
    assert policy.channels == frozenset({"email", "chat"})
    assert policy.priority_order == PriorityOrder.NEWEST_FIRST
    assert policy.version == 3


def test_policy_column_values_for_targeted_update():
    policy = _policy_to_domain(PolicyModel(
        id="default", enabled=False, max_assigned_tickets=4, refill_threshold=1,
        priority_order="oldest_first", channels=["sms", "email"],
        business_hours_only=True, version=2, updated_at=NOW,
    ))
    assert _policy_column_value(policy, "priority_order") == "oldest_first"
    assert _policy_column_value(policy, "channels") == ["email", "sms"]
    assert _policy_column_value(policy, "enabled") is False
    assert _policy_column_value(policy, "max_assigned_tickets") == 4

def test_agent_null_enabled_means_opted_in():
    model = AgentModel(
        id="a1", name="Alice", role="agent", availability_status="online",
        auto_assign_enabled=None, auto_assign_max=None, auto_assign_channels=None,
    )
    agent = _agent_to_domain(model, load=4)
    assert agent.auto_assign_enabled is True
    assert agent.auto_assign_channels is None
    assert agent.current_load == 4
    assert agent.availability_status == AvailabilityStatus.ONLINE


def test_agent_overrides_mapped():
    model = AgentModel(
        id="a1", name="Alice", role="agent", availability_status="away",
        auto_assign_enabled=False, auto_assign_max=2, auto_assign_channels=["chat"],
    )
    overrides = _overrides_to_domain(model)
    assert overrides.auto_assign_enabled is False
    assert overrides.auto_assign_max == 2
    assert overrides.auto_assign_channels == frozenset({"chat"})


def test_work_item_mapped():
    model = WorkItemModel(
        id="t1", human_number="TKT-1", channel="email", priority="urgent",
        status="in-progress", assigned_agent_id="a1", created_at=NOW, updated_at=None,
    )
    item = _work_item_to_domain(model)
    assert item.priority == Priority.URGENT
    assert item.status == WorkItemStatus.IN_PROGRESS
    assert not item.is_unassigned()


@pytest.mark.asyncio
async def test_sqlalchemy_errors_become_store_errors():
    with pytest.raises(StoreError) as exc:
        async with _store_errors("Loading agents", policy_id="default"):
            raise OperationalError("SELECT 1", {}, Exception("connection reset"))
    assert exc.value.message == "Loading agents failed"
    assert exc.value.details["policy_id"] == "default"
    assert "connection reset" in exc.value.details["cause"]


@pytest.mark.asyncio
async def test_other_errors_pass_through():
    with pytest.raises(KeyError):
        async with _store_errors("Loading agents"):
            raise KeyError("x")
