"""Duty roster and agent level endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from callcenter.adapters.persistence.database import get_session
from callcenter.application.use_cases.agent_levels import AgentLevelUseCase
from callcenter.application.use_cases.duty_roster import DutyRosterUseCase
from callcenter.config import settings
from callcenter.domain.entities.agent import Agent
from callcenter.domain.value_objects.enums import AgentLevel
from callcenter.infrastructure.api.dependencies import get_agent_level_uc, get_duty_roster_uc

router = APIRouter(tags=["roster"])


class ScheduleRequest(BaseModel):
    agent_ids: list[int] = Field(min_length=1)
    start_date: date
    end_date: date
    created_by: int
    scope_id: int = Field(default_factory=lambda: settings.default_scope_id)


class SetLevelRequest(BaseModel):
    level: AgentLevel
    action_by: int
    scope_id: int = Field(default_factory=lambda: settings.default_scope_id)


@router.get("/roster/{work_date}")
async def roster_for_date(
    work_date: date,
    scope_id: int | None = None,
    uc: DutyRosterUseCase = Depends(get_duty_roster_uc),
):
    """On-duty agents grouped by level; agents without a level listed apart."""
    roster = await uc.on_duty(work_date, scope_id if scope_id is not None else settings.default_scope_id)
    return {
        "date": work_date.isoformat(),
        "agents_by_level": {
            level.value: [_agent_to_dict(a) for a in agents]
            for level, agents in roster.by_level.items()
        },
        "unleveled": [_agent_to_dict(a) for a in roster.unleveled],
        "agent_count": sum(roster.counts().values()) + len(roster.unleveled),
    }


@router.post("/roster")
async def schedule_duty(
    body: ScheduleRequest,
    uc: DutyRosterUseCase = Depends(get_duty_roster_uc),
    session: AsyncSession = Depends(get_session),
):
    counts = await uc.schedule(
        body.agent_ids, body.start_date, body.end_date, body.scope_id, body.created_by
    )
    await session.commit()
    return {"status": "ok", "message": "Duty roster updated", **counts}


@router.delete("/roster/{scope_id}/{work_date}/{agent_id}")
async def remove_duty(
    scope_id: int,
    work_date: date,
    agent_id: int,
    uc: DutyRosterUseCase = Depends(get_duty_roster_uc),
    session: AsyncSession = Depends(get_session),
):
    await uc.remove(agent_id, work_date, scope_id)
    await session.commit()
    return {"status": "ok", "message": "Agent removed from duty roster"}


@router.put("/agents/{agent_id}/level")
async def set_agent_level(
    agent_id: int,
    body: SetLevelRequest,
    uc: AgentLevelUseCase = Depends(get_agent_level_uc),
    session: AsyncSession = Depends(get_session),
):
    record = await uc.set_level(agent_id, body.scope_id, body.level, body.action_by)
    await session.commit()
    return {
        "status": "ok",
        "level": {
            "id": record.id,
            "agent_id": record.agent_id,
            "scope_id": record.scope_id,
            "level": record.level.value,
            "is_active": record.is_active,
        },
    }


@router.get("/agents/{agent_id}/levels")
async def agent_level_history(
    agent_id: int,
    scope_id: int | None = None,
    uc: AgentLevelUseCase = Depends(get_agent_level_uc),
):
    records = await uc.history(agent_id, scope_id if scope_id is not None else settings.default_scope_id)
    return {
        "agent_id": agent_id,
        "history": [
            {
                "id": r.id,
                "level": r.level.value,
                "is_active": r.is_active,
                "created_by": r.created_by,
                "created_at": r.created_at.isoformat() if r.created_at else None,
                "updated_by": r.updated_by,
                "updated_at": r.updated_at.isoformat() if r.updated_at else None,
            }
            for r in records
        ],
    }


def _agent_to_dict(a: Agent) -> dict:
    return {"agent_id": a.id, "auth_user_id": a.auth_user_id, "name": a.name, "level": a.level_label}
