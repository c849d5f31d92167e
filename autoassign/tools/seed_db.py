"""Seed the database with the default policy and business-hours schedule.

Usage:
    python -m autoassign.tools.seed_db
    python -m autoassign.tools.seed_db --demo   # also add sample agents and tickets
    python -m autoassign.tools.seed_db --drop   # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, time, timedelta, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from autoassign.adapters.persistence.database import async_session_factory
from autoassign.adapters.persistence.models import (
    AgentModel,
    AssignmentRecordModel,
    BusinessHoursModel,
    PolicyModel,
    WorkItemModel,
)
from autoassign.config import settings
from autoassign.domain.value_objects.enums import PriorityOrder

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_CHANNELS = ["email", "chat"]

# Monday–Friday 09:00–17:00, weekend closed
DEFAULT_SCHEDULE: list[tuple[int, bool, time, time]] = [
    (day, day < 5, time(9, 0), time(17, 0)) for day in range(7)
]

DEMO_AGENTS = [
    {"id": "agent-alice", "name": "Alice Martin", "availability_status": "online"},
    {"id": "agent-bob", "name": "Bob Chen", "availability_status": "online", "auto_assign_max": 3},
    {
        "id": "agent-carol", "name": "Carol Diaz", "availability_status": "away",
        "auto_assign_channels": ["email"],
    },
    {"id": "ai-agent-001", "name": "AI Assistant", "availability_status": "online", "role": "ai"},
]

DEMO_PRIORITIES = ["critical", "normal", "high", "low", "urgent", "normal"]


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        AssignmentRecordModel,
        WorkItemModel,
        AgentModel,
        BusinessHoursModel,
        PolicyModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def _seed_policy(session: AsyncSession) -> int:
    if await session.get(PolicyModel, settings.policy_id):
        logger.debug("Policy '%s' already exists, skipping", settings.policy_id)
        return 0
    session.add(PolicyModel(
        id=settings.policy_id,
        enabled=True,
        max_assigned_tickets=5,
        refill_threshold=2,
        priority_order=PriorityOrder.PRIORITY_FIRST.value,
        channels=DEFAULT_CHANNELS,
        business_hours_only=False,
        version=1,
    ))
    return 1


async def _seed_business_hours(session: AsyncSession) -> int:
    count = 0
    for day, is_open, open_time, close_time in DEFAULT_SCHEDULE:
        if await session.get(BusinessHoursModel, day):
            continue
        session.add(BusinessHoursModel(
            day_of_week=day, is_open=is_open, open_time=open_time, close_time=close_time,
        ))
        count += 1
    return count


async def _seed_demo(session: AsyncSession) -> tuple[int, int]:
    agents = 0
    for data in DEMO_AGENTS:
        if await session.get(AgentModel, data["id"]):
            continue
        session.add(AgentModel(**data))
        agents += 1

    items = 0
    now = datetime.now(timezone.utc)
    for i, priority in enumerate(DEMO_PRIORITIES, start=1):
        item_id = f"ticket-{i:04d}"
        if await session.get(WorkItemModel, item_id):
            continue
        session.add(WorkItemModel(
            id=item_id,
            human_number=f"TKT-{1000 + i}",
            channel=DEFAULT_CHANNELS[i % len(DEFAULT_CHANNELS)],
            priority=priority,
            status="open",
            created_at=now - timedelta(minutes=10 * (len(DEMO_PRIORITIES) - i)),
        ))
        items += 1
    return agents, items


async def seed(drop: bool = False, demo: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"policies": 0, "business_hours": 0, "agents": 0, "work_items": 0}

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        counts["policies"] = await _seed_policy(session)
        counts["business_hours"] = await _seed_business_hours(session)
        if demo:
            await session.flush()
            counts["agents"], counts["work_items"] = await _seed_demo(session)
        await session.commit()

    logger.info("Seeded: %s", counts)
    return counts


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        policy = await session.get(PolicyModel, settings.policy_id)
        agents = (await session.execute(select(func.count()).select_from(AgentModel))).scalar_one()
        open_items = (await session.execute(
            select(func.count()).select_from(WorkItemModel).where(
                WorkItemModel.status == "open", WorkItemModel.assigned_agent_id.is_(None)
            )
        )).scalar_one()

        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        if policy:
            print(f"Policy '{policy.id}': enabled={policy.enabled}, max={policy.max_assigned_tickets}, "
                  f"refill={policy.refill_threshold}, order={policy.priority_order}, "
                  f"channels={policy.channels}")
        else:
            print("Policy: MISSING")
        print(f"Agents: {agents}")
        print(f"Unassigned open work items: {open_items}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the auto-assignment database")
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--demo", action="store_true",
        help="Also insert sample agents and open tickets",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(drop=args.drop, demo=args.demo)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
