"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from callcenter.adapters.persistence.database import get_session
from callcenter.adapters.persistence.repositories import (
    SqlAgentLevelRepository,
    SqlAgentRepository,
    SqlCaseRepository,
    SqlLevelConfigRepository,
    SqlRosterRepository,
)
from callcenter.application.use_cases.agent_levels import AgentLevelUseCase
from callcenter.application.use_cases.assign_by_level import AssignByLevelUseCase
from callcenter.application.use_cases.assign_round_robin import AssignRoundRobinUseCase
from callcenter.application.use_cases.duty_roster import DutyRosterUseCase
from callcenter.application.use_cases.level_config import LevelConfigUseCase
from callcenter.config import local_now, settings

# Re-export session dependency
get_db_session = get_session


def get_assign_by_level_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignByLevelUseCase:
    return AssignByLevelUseCase(
        config_repo=SqlLevelConfigRepository(session),
        case_repo=SqlCaseRepository(session),
        roster_repo=SqlRosterRepository(session),
        level_repo=SqlAgentLevelRepository(session),
        clock=local_now,
    )


def get_assign_round_robin_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignRoundRobinUseCase:
    return AssignRoundRobinUseCase(
        roster_repo=SqlRosterRepository(session),
        case_repo=SqlCaseRepository(session),
        batch_limit=settings.simple_assign_batch_limit,
        leveled_scope_id=settings.default_scope_id,
        clock=local_now,
    )


def get_level_config_uc(
    session: AsyncSession = Depends(get_session),
) -> LevelConfigUseCase:
    return LevelConfigUseCase(
        config_repo=SqlLevelConfigRepository(session),
        case_repo=SqlCaseRepository(session),
        roster_repo=SqlRosterRepository(session),
        level_repo=SqlAgentLevelRepository(session),
        tolerance=settings.percentage_tolerance,
        clock=local_now,
    )


def get_agent_level_uc(
    session: AsyncSession = Depends(get_session),
) -> AgentLevelUseCase:
    return AgentLevelUseCase(
        agent_repo=SqlAgentRepository(session),
        level_repo=SqlAgentLevelRepository(session),
        clock=local_now,
    )


def get_duty_roster_uc(
    session: AsyncSession = Depends(get_session),
) -> DutyRosterUseCase:
    return DutyRosterUseCase(
        roster_repo=SqlRosterRepository(session),
        agent_repo=SqlAgentRepository(session),
        level_repo=SqlAgentLevelRepository(session),
        config_repo=SqlLevelConfigRepository(session),
        cutoff_hour=settings.roster_cutoff_hour,
        leveled_scope_id=settings.default_scope_id,
        clock=local_now,
    )
