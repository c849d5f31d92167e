"""Wall-clock adapter — implements Clock."""

from datetime import datetime, timezone

from autoassign.application.ports.clock import Clock


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
