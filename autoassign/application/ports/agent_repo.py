"""Port interface for the agent directory."""

from abc import ABC, abstractmethod

from autoassign.domain.entities.agent import Agent, AgentOverrides


class AgentDirectory(ABC):
    @abstractmethod
    async def get_candidates(self) -> list[Agent]:
        """Return all assignable agents with ``current_load`` freshly counted.

        Load is the live number of open / in-progress work items assigned
        to the agent, never a stored counter.
        """
        ...

    @abstractmethod
    async def get_overrides(self, agent_id: str) -> AgentOverrides | None:
        ...

    @abstractmethod
    async def update_overrides(self, agent_id: str, changes: dict) -> AgentOverrides | None:
        """Apply only the override fields present in *changes*. None if the agent is unknown."""
        ...
