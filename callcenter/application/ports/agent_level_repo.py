"""Port interface for the append-only agent level history."""

from abc import ABC, abstractmethod
from datetime import datetime

from callcenter.domain.entities.agent_level import AgentLevelRecord
from callcenter.domain.value_objects.enums import AgentLevel


class AgentLevelRepository(ABC):
    @abstractmethod
    async def get_active(self, agent_id: int, scope_id: int) -> AgentLevelRecord | None:
        ...

    @abstractmethod
    async def get_active_levels(
        self, agent_ids: list[int], scope_id: int
    ) -> dict[int, AgentLevel]:
        """agent_id -> active level; agents without one are absent."""
        ...

    @abstractmethod
    async def save(self, record: AgentLevelRecord) -> AgentLevelRecord:
        ...

    @abstractmethod
    async def deactivate(self, record_id: int, updated_by: int, updated_at: datetime) -> None:
        ...

    @abstractmethod
    async def get_history(self, agent_id: int, scope_id: int) -> list[AgentLevelRecord]:
        """All records, newest first."""
        ...
