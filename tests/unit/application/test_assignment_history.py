"""Tests for GetAssignmentHistoryUseCase."""

from datetime import timedelta

import pytest

from autoassign.application.use_cases.assignment_history import GetAssignmentHistoryUseCase
from autoassign.domain.entities.assignment_record import AssignmentRecord
from autoassign.domain.errors import ValidationError
from autoassign.domain.value_objects.enums import AssignmentReason
from tests.fakes import MONDAY_10AM, FakeAuditLog, make_agent


def _seed_records(store, count):
    store.add_agent(make_agent("A"))
    for n in range(count):
        store.records.append(AssignmentRecord(
            id=n + 1,
            work_item_id=str(n),
            work_item_number=f"TKT-{n}",
            assigned_agent_id="A",
            reason=AssignmentReason.AUTO_REFILL,
            agent_load_after_assignment=n + 1,
            timestamp=MONDAY_10AM + timedelta(minutes=n),
        ))


@pytest.mark.asyncio
async def test_newest_first_with_agent_name(store):
    _seed_records(store, 3)
    page = await GetAssignmentHistoryUseCase(FakeAuditLog(store)).execute()
    assert [r.work_item_id for r in page.records] == ["2", "1", "0"]
    assert all(r.agent_name == "A" for r in page.records)


@pytest.mark.asyncio
async def test_limit_and_offset(store):
    _seed_records(store, 10)
    use_case = GetAssignmentHistoryUseCase(FakeAuditLog(store))
    page = await use_case.execute(limit=3, offset=2)
    assert [r.work_item_id for r in page.records] == ["7", "6", "5"]
    assert page.total == 10
    assert (page.limit, page.offset) == (3, 2)


@pytest.mark.asyncio
async def test_default_limit(store):
    _seed_records(store, 10)
    page = await GetAssignmentHistoryUseCase(FakeAuditLog(store), default_limit=4).execute()
    assert len(page.records) == 4
    assert page.total == 10


@pytest.mark.asyncio
@pytest.mark.parametrize("limit,offset", [(0, 0), (501, 0), (10, -1)])
async def test_bad_paging_rejected(store, limit, offset):
    with pytest.raises(ValidationError):
        await GetAssignmentHistoryUseCase(FakeAuditLog(store)).execute(limit=limit, offset=offset)


@pytest.mark.asyncio
async def test_page_past_the_end_still_reports_total(store):
    _seed_records(store, 3)
    page = await GetAssignmentHistoryUseCase(FakeAuditLog(store)).execute(limit=10, offset=5)
    assert page.records == []
    assert page.total == 3
