"""EligibilityFilter — which agents may receive work this cycle."""

from __future__ import annotations

from autoassign.domain.entities.agent import Agent
from autoassign.domain.entities.policy import AssignmentPolicy


def load_order_key(agent: Agent) -> tuple[int, str]:
    """Lowest load first, agent id as the deterministic tie-break."""
    return agent.current_load, agent.id


def is_eligible(agent: Agent, policy: AssignmentPolicy) -> bool:
    return (
        agent.is_online()
        and agent.auto_assign_enabled
        and agent.has_capacity(policy)
    )


def select_eligible_agents(policy: AssignmentPolicy, agents: list[Agent]) -> list[Agent]:
    """Filter to online, opted-in agents under their cap, sorted by (load, id).

    The effective cap is ``min(auto_assign_max, max_assigned_tickets)`` when
    the agent has an override, otherwise the policy-wide ``max_assigned_tickets``.
    """
    eligible = [a for a in agents if is_eligible(a, policy)]
    return sorted(eligible, key=load_order_key)
