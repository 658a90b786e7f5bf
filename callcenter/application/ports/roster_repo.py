"""Port interface for duty roster persistence."""

from abc import ABC, abstractmethod
from datetime import date

from callcenter.domain.entities.agent import Agent
from callcenter.domain.entities.duty import DutyAssignment


class RosterRepository(ABC):
    @abstractmethod
    async def get_on_duty_agents(self, work_date: date, scope_id: int | None = None) -> list[Agent]:
        """Active agents with a working entry on the date, in roster entry order.

        ``scope_id=None`` means any scope; an agent rostered in several
        scopes is returned once.
        """
        ...

    @abstractmethod
    async def get_entry(self, agent_id: int, work_date: date, scope_id: int) -> DutyAssignment | None:
        ...

    @abstractmethod
    async def save(self, entry: DutyAssignment) -> DutyAssignment:
        ...

    @abstractmethod
    async def update(self, entry: DutyAssignment) -> DutyAssignment:
        ...

    @abstractmethod
    async def delete(self, entry_id: int) -> None:
        ...

    @abstractmethod
    async def lock(self, work_date: date, scope_id: int) -> int:
        """Freeze every entry for the date and scope; returns rows touched."""
        ...
