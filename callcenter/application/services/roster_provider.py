"""RosterProvider — who is on duty for a date, grouped by level."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from callcenter.application.ports.agent_level_repo import AgentLevelRepository
from callcenter.application.ports.roster_repo import RosterRepository
from callcenter.domain.entities.agent import Agent
from callcenter.domain.value_objects.enums import AgentLevel

logger = logging.getLogger(__name__)


@dataclass
class LeveledRoster:
    """On-duty agents of one scope split by their active level."""

    by_level: dict[AgentLevel, list[Agent]]
    unleveled: list[Agent] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(self.by_level.values())

    def counts(self) -> dict[AgentLevel, int]:
        return {level: len(agents) for level, agents in self.by_level.items()}


class RosterProvider:
    def __init__(self, roster_repo: RosterRepository, level_repo: AgentLevelRepository):
        self._roster = roster_repo
        self._levels = level_repo

    async def on_duty(self, work_date: date, scope_id: int | None = None) -> list[Agent]:
        return await self._roster.get_on_duty_agents(work_date, scope_id)

    async def by_level(self, work_date: date, scope_id: int) -> LeveledRoster:
        """Resolve each on-duty agent's active level for the scope.

        Agents without an active level are left out of the level pools and
        reported in ``unleveled``.
        """
        agents = await self._roster.get_on_duty_agents(work_date, scope_id)
        levels = await self._levels.get_active_levels([a.id for a in agents], scope_id)

        roster = LeveledRoster(by_level={level: [] for level in AgentLevel.ordered()})
        for agent in agents:
            level = levels.get(agent.id)
            if level is None:
                roster.unleveled.append(agent)
                continue
            agent.level = level
            roster.by_level[level].append(agent)

        if roster.unleveled:
            logger.warning(
                "Scope %s on %s: %d on-duty agent(s) without a level excluded: %s",
                scope_id, work_date, len(roster.unleveled),
                ", ".join(a.name for a in roster.unleveled),
            )
        return roster
