"""Port interface for level config persistence."""

from abc import ABC, abstractmethod
from datetime import date

from callcenter.domain.entities.level_config import LevelConfig
from callcenter.domain.value_objects.enums import ConfigType


class LevelConfigRepository(ABC):
    @abstractmethod
    async def get_by_id(self, config_id: int) -> LevelConfig | None:
        ...

    @abstractmethod
    async def get_active(
        self, scope_id: int, target_date: date, config_type: ConfigType
    ) -> LevelConfig | None:
        ...

    @abstractmethod
    async def get_latest_approved_before(self, scope_id: int, target_date: date) -> LevelConfig | None:
        """Most recent active approved config with an earlier target date."""
        ...

    @abstractmethod
    async def deactivate(
        self,
        scope_id: int,
        target_date: date,
        config_type: ConfigType,
        exclude_id: int | None = None,
    ) -> int:
        """Mark active configs of the type inactive; returns rows touched."""
        ...

    @abstractmethod
    async def save(self, config: LevelConfig) -> LevelConfig:
        ...

    @abstractmethod
    async def update(self, config: LevelConfig) -> LevelConfig:
        ...

    @abstractmethod
    async def list_for_scope(
        self,
        scope_id: int,
        config_type: ConfigType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[LevelConfig]:
        """Configs ordered by (target_date DESC, id DESC)."""
        ...
