"""LevelConfigUseCase — suggested → approved lifecycle of level percentages."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime, timezone

from callcenter.application.ports.agent_level_repo import AgentLevelRepository
from callcenter.application.ports.case_repo import CaseRepository
from callcenter.application.ports.level_config_repo import LevelConfigRepository
from callcenter.application.ports.roster_repo import RosterRepository
from callcenter.application.services.case_inventory import CaseInventory
from callcenter.application.services.roster_provider import RosterProvider
from callcenter.domain.entities.level_config import LevelConfig
from callcenter.domain.exceptions import (
    ConfigNotFoundError,
    ConfigStateError,
    SuggestionUnavailableError,
)
from callcenter.domain.policies.percentages import suggest_percentages, validate_percentages
from callcenter.domain.value_objects.enums import AgentLevel, ConfigType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LevelConfigUseCase:
    """Generate, approve and save the percentage split for a scope/date.

    At most one active config per (scope, date, type). Every switch is
    deactivate-then-write inside the caller's transaction.
    """

    def __init__(
        self,
        config_repo: LevelConfigRepository,
        case_repo: CaseRepository,
        roster_repo: RosterRepository,
        level_repo: AgentLevelRepository,
        tolerance: float = 0.01,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._configs = config_repo
        self._roster = RosterProvider(roster_repo, level_repo)
        self._inventory = CaseInventory(case_repo)
        self._tolerance = tolerance
        self._clock = clock

    async def get_or_generate(self, scope_id: int, target_date: date, created_by: int) -> LevelConfig:
        """Approved config for the date, else the suggestion, else a new one."""
        approved = await self._configs.get_active(scope_id, target_date, ConfigType.APPROVED)
        if approved:
            return approved

        suggested = await self._configs.get_active(scope_id, target_date, ConfigType.SUGGESTED)
        if suggested:
            logger.info("Using existing suggested config %s", suggested.id)
            return suggested

        config = await self.generate_suggested(scope_id, target_date, created_by)
        if config is None:
            raise SuggestionUnavailableError(
                f"Cannot generate a config for scope {scope_id} on {target_date}: "
                "no duty roster or no unassigned cases"
            )
        return config

    async def generate_suggested(
        self, scope_id: int, target_date: date, created_by: int
    ) -> LevelConfig | None:
        """Suggest percentages from the roster's level mix.

        Returns None (and writes nothing) when nobody leveled is on duty or
        no case is waiting. Calling it again for the same scope and date
        returns the active suggestion instead of creating another.
        """
        roster = await self._roster.by_level(target_date, scope_id)
        if roster.is_empty():
            logger.warning("No leveled duty roster for scope %s on %s", scope_id, target_date)
            return None

        unassigned = await self._inventory.count_unassigned(scope_id)
        if unassigned == 0:
            logger.warning("No unassigned cases for scope %s on %s", scope_id, target_date)
            return None

        existing = await self._configs.get_active(scope_id, target_date, ConfigType.SUGGESTED)
        if existing:
            logger.info(
                "Suggested config already exists, returning existing: id=%s date=%s",
                existing.id, target_date,
            )
            return existing

        counts = roster.counts()
        percentages = suggest_percentages(counts)
        previous = await self._configs.get_latest_approved_before(scope_id, target_date)

        await self._configs.deactivate(scope_id, target_date, ConfigType.SUGGESTED)
        config = await self._configs.save(
            LevelConfig(
                id=None,
                scope_id=scope_id,
                target_date=target_date,
                percentages=percentages,
                agent_counts=counts,
                total_cases=unassigned,
                config_type=ConfigType.SUGGESTED,
                based_on_config_id=previous.id if previous else None,
                created_by=created_by,
            )
        )
        logger.info(
            "Suggested config created: id=%s date=%s cases=%d percentages=%s",
            config.id, target_date, unassigned,
            {level.value: pct for level, pct in percentages.items()},
        )
        return config

    async def approve(self, config_id: int, approved_by: int) -> LevelConfig:
        """Promote a suggestion to the active approved config of its date."""
        config = await self._configs.get_by_id(config_id)
        if config is None:
            raise ConfigNotFoundError(f"Config with ID {config_id} not found")
        if not config.is_suggested():
            raise ConfigStateError("Only suggested configs can be approved")
        if not config.is_active:
            raise ConfigStateError(
                f"Config {config_id} was superseded by a newer suggestion and cannot be approved"
            )

        await self._configs.deactivate(
            config.scope_id, config.target_date, ConfigType.APPROVED, exclude_id=config.id
        )
        config.config_type = ConfigType.APPROVED
        config.approved_by = approved_by
        config.approved_at = self._clock()
        await self._configs.update(config)

        logger.info("Config %s approved by %s for %s", config.id, approved_by, config.target_date)
        return config

    async def save(
        self,
        percentages: Mapping[AgentLevel, float],
        scope_id: int,
        target_date: date,
        approved_by: int,
        remarks: str | None = None,
    ) -> LevelConfig:
        """Store a hand-edited split as the approved config for the date.

        Counts are copied from the active suggestion, which must exist; the
        new config points back at it.
        """
        split = validate_percentages(percentages, self._tolerance)

        suggestion = await self._configs.get_active(scope_id, target_date, ConfigType.SUGGESTED)
        if suggestion is None:
            raise ConfigNotFoundError(
                f"No suggested config for scope {scope_id} on {target_date}; generate one first"
            )

        now = self._clock()
        await self._configs.deactivate(scope_id, target_date, ConfigType.APPROVED)
        config = await self._configs.save(
            LevelConfig(
                id=None,
                scope_id=scope_id,
                target_date=target_date,
                percentages=split,
                agent_counts=dict(suggestion.agent_counts),
                total_cases=suggestion.total_cases,
                config_type=ConfigType.APPROVED,
                based_on_config_id=suggestion.id,
                remarks=remarks,
                created_by=approved_by,
                approved_by=approved_by,
                approved_at=now,
            )
        )
        logger.info(
            "Approved config %s saved for %s (based on suggestion %s)",
            config.id, target_date, suggestion.id,
        )
        return config

    async def get_approved(self, scope_id: int, target_date: date) -> LevelConfig | None:
        """Approved config for the date, falling back to the latest earlier one."""
        config = await self._configs.get_active(scope_id, target_date, ConfigType.APPROVED)
        if config:
            return config
        return await self._configs.get_latest_approved_before(scope_id, target_date)

    async def history(
        self,
        scope_id: int,
        config_type: ConfigType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[LevelConfig]:
        return await self._configs.list_for_scope(scope_id, config_type, date_from, date_to)
