"""Port interface for the append-only assignment audit log."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.assignment_record import AssignmentRecord


class AuditLogRepository(ABC):
    @abstractmethod
    async def append(self, record: AssignmentRecord) -> AssignmentRecord:
        ...

    @abstractmethod
    async def count(self) -> int:
        """Total number of records in the log."""
        ...

    @abstractmethod
    async def get_history(self, limit: int, offset: int = 0) -> list[AssignmentRecord]:
        """Newest first."""
        ...
