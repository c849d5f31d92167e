"""GetAssignmentHistoryUseCase — paginated audit trail, newest first."""

from dataclasses import dataclass

from autoassign.application.ports.audit_repo import AuditLogRepository
from autoassign.domain.entities.assignment_record import AssignmentRecord
from autoassign.domain.errors import ValidationError

MAX_HISTORY_PAGE = 500


@dataclass
class HistoryPage:
    records: list[AssignmentRecord]
    total: int
    limit: int
    offset: int


class GetAssignmentHistoryUseCase:
    def __init__(self, audit_repo: AuditLogRepository, default_limit: int = 50):
        self._audit = audit_repo
        self._default_limit = default_limit

    async def execute(self, limit: int | None = None, offset: int = 0) -> HistoryPage:
        if limit is None:
            limit = self._default_limit
        if not 1 <= limit <= MAX_HISTORY_PAGE:
            raise ValidationError(
                f"limit must be between 1 and {MAX_HISTORY_PAGE}", {"limit": limit}
            )
        if offset < 0:
            raise ValidationError("offset must not be negative", {"offset": offset})
        records = await self._audit.get_history(limit, offset)
        return HistoryPage(
            records=records,
            total=await self._audit.count(),
            limit=limit,
            offset=offset,
        )
