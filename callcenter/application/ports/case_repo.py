"""Port interface for collection case persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from callcenter.domain.entities.case import CollectionCase


class CaseRepository(ABC):
    @abstractmethod
    async def save(self, case: CollectionCase) -> CollectionCase:
        ...

    @abstractmethod
    async def get_by_id(self, case_id: int) -> CollectionCase | None:
        ...

    @abstractmethod
    async def get_unassigned_for_scope(self, scope_id: int) -> list[CollectionCase]:
        """Unassigned cases of the scope ordered by (dpd ASC, id ASC)."""
        ...

    @abstractmethod
    async def get_oldest_unassigned(
        self, limit: int, exclude_scope_id: int | None = None
    ) -> list[CollectionCase]:
        """Unassigned, not completed cases ordered by (created_at ASC, id ASC).

        Cases of *exclude_scope_id* are left out.
        """
        ...

    @abstractmethod
    async def count_unassigned(self, scope_id: int) -> int:
        ...

    @abstractmethod
    async def claim(
        self,
        case_id: int,
        agent_auth_id: int,
        assigned_by: int,
        assigned_at: datetime,
    ) -> bool:
        """Assign the case only if it is still unassigned.

        Must be a single conditional update; returns False when another run
        got there first.
        """
        ...
