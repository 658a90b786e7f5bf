"""DutyRosterUseCase — schedule and unschedule agents for duty."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone

from callcenter.application.ports.agent_level_repo import AgentLevelRepository
from callcenter.application.ports.agent_repo import AgentRepository
from callcenter.application.ports.level_config_repo import LevelConfigRepository
from callcenter.application.ports.roster_repo import RosterRepository
from callcenter.application.services.roster_provider import LeveledRoster, RosterProvider
from callcenter.domain.entities.duty import DutyAssignment
from callcenter.domain.exceptions import (
    AgentNotFoundError,
    InvalidDateRangeError,
    RosterLockedError,
)
from callcenter.domain.value_objects.enums import ConfigType

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DutyRosterUseCase:
    def __init__(
        self,
        roster_repo: RosterRepository,
        agent_repo: AgentRepository,
        level_repo: AgentLevelRepository,
        config_repo: LevelConfigRepository,
        cutoff_hour: int = 7,
        leveled_scope_id: int = 1,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._roster = roster_repo
        self._agents = agent_repo
        self._configs = config_repo
        self._provider = RosterProvider(roster_repo, level_repo)
        self._cutoff_hour = cutoff_hour
        self._leveled_scope_id = leveled_scope_id
        self._clock = clock

    async def schedule(
        self,
        agent_ids: list[int],
        start_date: date,
        end_date: date,
        scope_id: int,
        created_by: int,
    ) -> dict[str, int]:
        """Put every agent on duty for every date in [start_date, end_date].

        Existing entries are switched back to working; locked ones are left
        alone and counted as skipped.
        """
        if end_date < start_date:
            raise InvalidDateRangeError(f"end_date {end_date} is before start_date {start_date}")

        for agent_id in agent_ids:
            if await self._agents.get_by_id(agent_id) is None:
                raise AgentNotFoundError(f"Agent with ID {agent_id} not found")

        created = updated = skipped = 0
        day = start_date
        while day <= end_date:
            for agent_id in agent_ids:
                entry = await self._roster.get_entry(agent_id, day, scope_id)
                if entry is None:
                    await self._roster.save(
                        DutyAssignment(
                            id=None, agent_id=agent_id, work_date=day,
                            scope_id=scope_id, created_by=created_by,
                        )
                    )
                    created += 1
                elif entry.is_locked:
                    skipped += 1
                elif not entry.is_working:
                    entry.is_working = True
                    await self._roster.update(entry)
                    updated += 1
            day += timedelta(days=1)

        logger.info(
            "Duty roster scheduled: scope=%s %s..%s created=%d updated=%d skipped=%d",
            scope_id, start_date, end_date, created, updated, skipped,
        )
        return {"created": created, "updated": updated, "skipped": skipped}

    async def remove(self, agent_id: int, work_date: date, scope_id: int) -> None:
        """Take an agent off duty while the entry is still editable."""
        entry = await self._roster.get_entry(agent_id, work_date, scope_id)
        if entry is None:
            raise AgentNotFoundError(
                f"Agent {agent_id} is not on the duty roster for {work_date}"
            )

        if not entry.can_be_removed(self._clock(), self._cutoff_hour):
            raise RosterLockedError(
                f"Duty roster for {work_date} can no longer be changed "
                f"(locked or past {self._cutoff_hour:02d}:00 on the day)"
            )

        if scope_id == self._leveled_scope_id:
            approved = await self._configs.get_active(scope_id, work_date, ConfigType.APPROVED)
            if approved is not None:
                raise RosterLockedError(
                    f"Duty roster for {work_date} is locked by approved config {approved.id}"
                )

        await self._roster.delete(entry.id)
        logger.info("Agent %s removed from duty roster: scope=%s date=%s", agent_id, scope_id, work_date)

    async def on_duty(self, work_date: date, scope_id: int) -> LeveledRoster:
        return await self._provider.by_level(work_date, scope_id)
