"""Policy use cases — read and partially update the assignment policy."""

from __future__ import annotations

import logging

from autoassign.application.ports.clock import Clock
from autoassign.application.ports.policy_repo import PolicyRepository
from autoassign.application.ports.unit_of_work import UnitOfWork
from autoassign.domain.entities.policy import DEFAULT_POLICY_ID, AssignmentPolicy
from autoassign.domain.errors import ConfigurationMissing, Conflict, ValidationError
from autoassign.domain.value_objects.enums import PriorityOrder

logger = logging.getLogger(__name__)

MAX_UPDATE_ATTEMPTS = 3

POLICY_FIELDS = frozenset({
    "enabled",
    "max_assigned_tickets",
    "refill_threshold",
    "priority_order",
    "channels",
    "business_hours_only",
})


def _require_bool(name: str, value) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean", {"field": name, "value": repr(value)})
    return value


def _require_int(name: str, value, minimum: int) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer", {"field": name, "value": repr(value)})
    if value < minimum:
        raise ValidationError(
            f"{name} must be at least {minimum}", {"field": name, "value": value}
        )
    return value


def normalize_channels(name: str, value) -> frozenset[str]:
    """Turn a list/set of channel names into a clean frozenset. Strings are rejected."""
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ValidationError(f"{name} must be a list of channel names", {"field": name})
    channels = set()
    for channel in value:
        if not isinstance(channel, str) or not channel.strip():
            raise ValidationError(
                f"{name} must contain non-empty strings", {"field": name, "value": repr(channel)}
            )
        channels.add(channel.strip())
    if not channels:
        raise ValidationError(f"{name} must not be empty", {"field": name})
    return frozenset(channels)


def validate_policy_changes(changes: dict) -> dict:
    """Type-check a partial policy update. Unknown fields are rejected, never ignored."""
    unknown = set(changes) - POLICY_FIELDS
    if unknown:
        raise ValidationError("Unknown policy fields", {"fields": sorted(unknown)})

    clean: dict = {}
    for name, value in changes.items():
        if name in ("enabled", "business_hours_only"):
            clean[name] = _require_bool(name, value)
        elif name == "max_assigned_tickets":
            clean[name] = _require_int(name, value, minimum=1)
        elif name == "refill_threshold":
            clean[name] = _require_int(name, value, minimum=0)
        elif name == "priority_order":
            try:
                clean[name] = PriorityOrder(value)
            except ValueError:
                raise ValidationError(
                    "priority_order must be one of: "
                    + ", ".join(o.value for o in PriorityOrder),
                    {"field": name, "value": repr(value)},
                ) from None
        elif name == "channels":
            clean[name] = normalize_channels(name, value)
    return clean


class GetPolicyUseCase:
    def __init__(self, policy_repo: PolicyRepository, policy_id: str = DEFAULT_POLICY_ID):
        self._policies = policy_repo
        self._policy_id = policy_id

    async def execute(self) -> AssignmentPolicy:
        policy = await self._policies.get(self._policy_id)
        if policy is None:
            raise ConfigurationMissing(
                "Configuration not found", {"policy_id": self._policy_id}
            )
        return policy


class UpdatePolicyUseCase:
    """Apply a partial update; fields absent from the input are left untouched."""

    def __init__(
        self,
        policy_repo: PolicyRepository,
        clock: Clock,
        unit_of_work: UnitOfWork,
        policy_id: str = DEFAULT_POLICY_ID,
    ):
        self._policies = policy_repo
        self._clock = clock
        self._uow = unit_of_work
        self._policy_id = policy_id

    async def execute(self, changes: dict) -> AssignmentPolicy:
        """Merge *changes* into the stored policy with an optimistic version check.

        When another writer bumps the version between our read and our
        write, the update is re-applied on the fresh row. After
        ``MAX_UPDATE_ATTEMPTS`` lost races a Conflict is raised.
        """
        clean = validate_policy_changes(changes)
        fields = frozenset(clean)

        for attempt in range(1, MAX_UPDATE_ATTEMPTS + 1):
            current = await self._policies.get(self._policy_id)
            if current is None:
                raise ConfigurationMissing(
                    "Configuration not found", {"policy_id": self._policy_id}
                )
            if not clean:
                return current

            updated = current.with_changes(clean, updated_at=self._clock.now())
            if updated.refill_threshold > updated.max_assigned_tickets:
                raise ValidationError(
                    "refill_threshold cannot exceed max_assigned_tickets",
                    {
                        "refill_threshold": updated.refill_threshold,
                        "max_assigned_tickets": updated.max_assigned_tickets,
                    },
                )

            if await self._policies.save(updated, fields, expected_version=current.version):
                await self._uow.commit()
                logger.info(
                    "Policy %s updated to version %d (%s)",
                    updated.id, updated.version, ", ".join(sorted(clean)),
                )
                return updated

            await self._uow.rollback()
            logger.warning(
                "Policy %s changed concurrently (attempt %d of %d, read version %d)",
                self._policy_id, attempt, MAX_UPDATE_ATTEMPTS, current.version,
            )

        raise Conflict(
            "Configuration was modified concurrently, try again",
            {"policy_id": self._policy_id, "fields": sorted(fields)},
        )
