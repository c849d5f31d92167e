"""Port interface for the business-hours schedule."""

from abc import ABC, abstractmethod

from autoassign.domain.value_objects.business_hours import BusinessHoursWindow


class BusinessHoursRepository(ABC):
    @abstractmethod
    async def get_window(self, day_of_week: int) -> BusinessHoursWindow | None:
        """Return the schedule row for *day_of_week* (0 = Monday), None if not configured."""
        ...
