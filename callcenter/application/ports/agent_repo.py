"""Port interface for agent persistence."""

from abc import ABC, abstractmethod

from callcenter.domain.entities.agent import Agent


class AgentRepository(ABC):
    @abstractmethod
    async def save(self, agent: Agent) -> Agent:
        ...

    @abstractmethod
    async def get_by_id(self, agent_id: int) -> Agent | None:
        ...

    @abstractmethod
    async def get_by_auth_id(self, auth_user_id: int) -> Agent | None:
        ...
