"""BusinessHoursPolicy — is the support desk open right now?"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from autoassign.domain.value_objects.business_hours import BusinessHoursWindow


def is_within_business_hours(
    window: BusinessHoursWindow | None,
    now: datetime,
    timezone: str = "UTC",
) -> bool:
    """Return True if *now* falls inside today's open window.

    *window* is the schedule row for the weekday of *now* in *timezone*;
    a missing row or a closed day means the desk is closed. Naive
    datetimes are taken to already be in *timezone*.
    """
    if window is None or not window.is_open:
        return False

    local_now = now.astimezone(ZoneInfo(timezone)) if now.tzinfo else now
    if local_now.weekday() != window.day_of_week:
        return False
    return window.contains(local_now.time())


def local_weekday(now: datetime, timezone: str = "UTC") -> int:
    """Weekday (0 = Monday) of *now* as seen in *timezone*."""
    local_now = now.astimezone(ZoneInfo(timezone)) if now.tzinfo else now
    return local_now.weekday()
