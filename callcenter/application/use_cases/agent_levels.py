"""AgentLevelUseCase — per-scope seniority with append-only history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from callcenter.application.ports.agent_level_repo import AgentLevelRepository
from callcenter.application.ports.agent_repo import AgentRepository
from callcenter.domain.entities.agent_level import AgentLevelRecord
from callcenter.domain.exceptions import AgentNotFoundError, LevelUnchangedError
from callcenter.domain.value_objects.enums import AgentLevel

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AgentLevelUseCase:
    def __init__(
        self,
        agent_repo: AgentRepository,
        level_repo: AgentLevelRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._agents = agent_repo
        self._levels = level_repo
        self._clock = clock

    async def set_level(
        self, agent_id: int, scope_id: int, level: AgentLevel, action_by: int
    ) -> AgentLevelRecord:
        """Give the agent a new level; the previous record is deactivated, not overwritten."""
        agent = await self._agents.get_by_id(agent_id)
        if agent is None:
            raise AgentNotFoundError(f"Agent with ID {agent_id} not found")

        now = self._clock()
        current = await self._levels.get_active(agent_id, scope_id)
        if current is not None:
            if current.level == level:
                raise LevelUnchangedError(
                    f"Agent {agent_id} already has level '{level.value}' for scope {scope_id}"
                )
            logger.info(
                "Updating agent level: agent=%s scope=%s %s -> %s",
                agent_id, scope_id, current.level.value, level.value,
            )
            await self._levels.deactivate(current.id, action_by, now)
        else:
            logger.info("Creating agent level: agent=%s scope=%s level=%s", agent_id, scope_id, level.value)

        return await self._levels.save(
            AgentLevelRecord(
                id=None,
                agent_id=agent_id,
                scope_id=scope_id,
                level=level,
                created_by=action_by,
                created_at=now,
            )
        )

    async def history(self, agent_id: int, scope_id: int) -> list[AgentLevelRecord]:
        return await self._levels.get_history(agent_id, scope_id)
