"""Error taxonomy for the auto-assignment engine.

Every error carries a human message and a ``details`` dict with enough
context (policy id, work item id, agent id, cycle timestamp) to replay
the failure.
"""


class AutoAssignError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationMissing(AutoAssignError):
    """No assignment policy exists. The cycle treats this as disabled."""


class NotFound(AutoAssignError):
    """Requested record does not exist."""


class ValidationError(AutoAssignError):
    """Malformed or out-of-range input at the API boundary."""


class StoreError(AutoAssignError):
    """Read or write against an external store failed. Aborts the running cycle."""


class InternalError(AutoAssignError):
    """Unexpected failure."""


class Conflict(AutoAssignError):
    """A concurrent writer changed the record first and retries ran out."""
