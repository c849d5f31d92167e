"""BusinessHoursWindow value object — open/closed window for one weekday."""

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class BusinessHoursWindow:
    day_of_week: int  # 0 = Monday … 6 = Sunday, same as datetime.weekday()
    is_open: bool
    open_time: time
    close_time: time

    def contains(self, moment: time) -> bool:
        """Check a local wall-clock time against the window, both ends inclusive.

        Comparison is at minute resolution. A window whose close time is
        earlier than its open time wraps past midnight.
        """
        if not self.is_open:
            return False

        current = moment.replace(second=0, microsecond=0, tzinfo=None)
        if self.open_time <= self.close_time:
            return self.open_time <= current <= self.close_time
        return current >= self.open_time or current <= self.close_time
