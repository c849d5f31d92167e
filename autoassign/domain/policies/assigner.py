"""Assigner — threshold-based load balancing of work items onto agents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from autoassign.domain.entities.agent import Agent
from autoassign.domain.entities.policy import AssignmentPolicy
from autoassign.domain.entities.work_item import WorkItem
from autoassign.domain.policies.eligibility import load_order_key
from autoassign.domain.value_objects.enums import AssignmentReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignmentDecision:
    """One matched (item, agent) pair."""

    work_item: WorkItem
    agent_id: str
    reason: AssignmentReason
    agent_load_after: int


@dataclass
class AssignmentPlan:
    decisions: list[AssignmentDecision] = field(default_factory=list)
    skipped: list[WorkItem] = field(default_factory=list)


def pick_agent(
    policy: AssignmentPolicy,
    agents: list[Agent],
    channel: str,
) -> tuple[Agent, AssignmentReason] | None:
    """Choose the agent for one item on *channel*.

    1. Keep agents whose effective channel set contains *channel* and
       who are still under their effective cap.
    2. Prefer the least-loaded of those below ``policy.refill_threshold``
       (reason: auto_refill).
    3. Otherwise the least-loaded of the rest (reason: initial_assignment).
    4. Otherwise nobody.

    *agents* must already be sorted by (load, id).
    """
    with_capacity = [
        a for a in agents
        if channel in a.effective_channels(policy) and a.has_capacity(policy)
    ]

    # An agent override cap may sit below the refill threshold; the cap wins.
    below_threshold = [a for a in with_capacity if a.current_load < policy.refill_threshold]
    if below_threshold:
        return below_threshold[0], AssignmentReason.AUTO_REFILL

    if with_capacity:
        return with_capacity[0], AssignmentReason.INITIAL_ASSIGNMENT

    return None


def reason_for_load(policy: AssignmentPolicy, load_before: int) -> AssignmentReason:
    """Reason an agent carrying *load_before* items would be matched under."""
    if load_before < policy.refill_threshold:
        return AssignmentReason.AUTO_REFILL
    return AssignmentReason.INITIAL_ASSIGNMENT


def plan_assignments(
    policy: AssignmentPolicy,
    agents: list[Agent],
    queue: list[WorkItem],
) -> AssignmentPlan:
    """Match queued items to agents, sequentially and deterministically.

    Works on private copies of the agents: each match bumps the copy's
    load, so later items in the same cycle see the updated count without
    re-querying the store. The caller's snapshot is left untouched, which
    makes the plan a pure function of (policy, agents, queue).
    """
    working = sorted((replace(a) for a in agents), key=load_order_key)
    plan = AssignmentPlan()

    for item in queue:
        match = pick_agent(policy, working, item.channel)
        if match is None:
            logger.info(
                "Work item %s (%s) skipped: no eligible agent",
                item.human_number, item.channel,
            )
            plan.skipped.append(item)
            continue

        agent, reason = match
        agent.current_load += 1
        plan.decisions.append(
            AssignmentDecision(
                work_item=item,
                agent_id=agent.id,
                reason=reason,
                agent_load_after=agent.current_load,
            )
        )
        # Re-sort so the next item sees the lowest working load first
        working.sort(key=load_order_key)

    return plan
