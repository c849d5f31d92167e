"""Port interface for assignment policy persistence (the ConfigStore)."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.policy import AssignmentPolicy


class PolicyRepository(ABC):
    @abstractmethod
    async def get(self, policy_id: str) -> AssignmentPolicy | None:
        """Return the policy, read fresh from the store. None if it was never created."""
        ...

    @abstractmethod
    async def save(
        self,
        policy: AssignmentPolicy,
        fields: frozenset[str],
        expected_version: int,
    ) -> bool:
        """Write only *fields* of *policy*, plus its version and timestamp.

        The write happens only while the stored version is still
        *expected_version*. Returns False when another writer got there first.
        """
        ...
