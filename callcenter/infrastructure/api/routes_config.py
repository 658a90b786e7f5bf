"""Level config endpoints — suggest, approve, save, look up."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from callcenter.adapters.persistence.database import get_session
from callcenter.application.use_cases.level_config import LevelConfigUseCase
from callcenter.config import settings
from callcenter.domain.entities.level_config import LevelConfig
from callcenter.domain.value_objects.enums import AgentLevel, ConfigType
from callcenter.infrastructure.api.dependencies import get_level_config_uc

router = APIRouter(prefix="/configs", tags=["level-config"])

# ── Request schemas ─────────────────────────────────────────────────


class ApproveRequest(BaseModel):
    approved_by: int


class SaveConfigRequest(BaseModel):
    target_date: date
    percentages: dict[AgentLevel, float]
    approved_by: int
    remarks: str | None = None
    scope_id: int = Field(default_factory=lambda: settings.default_scope_id)


# ── Endpoints ───────────────────────────────────────────────────────


@router.get("")
async def config_history(
    scope_id: int | None = None,
    config_type: ConfigType | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    uc: LevelConfigUseCase = Depends(get_level_config_uc),
):
    """Configs of a scope, newest target date first."""
    configs = await uc.history(
        scope_id if scope_id is not None else settings.default_scope_id,
        config_type, date_from, date_to,
    )
    return {"total": len(configs), "configs": [_config_to_dict(c) for c in configs]}


@router.get("/approved/{target_date}")
async def approved_config(
    target_date: date,
    scope_id: int | None = None,
    uc: LevelConfigUseCase = Depends(get_level_config_uc),
):
    """Approved config for the date, or the latest earlier one."""
    config = await uc.get_approved(
        scope_id if scope_id is not None else settings.default_scope_id, target_date
    )
    if config is None:
        raise HTTPException(status_code=404, detail=f"No approved config on or before {target_date}")
    return {"status": "ok", "config": _config_to_dict(config)}


@router.get("/{target_date}")
async def get_or_generate_config(
    target_date: date,
    created_by: int,
    scope_id: int | None = None,
    uc: LevelConfigUseCase = Depends(get_level_config_uc),
    session: AsyncSession = Depends(get_session),
):
    """Approved config if any, else the suggestion, generating one if needed."""
    config = await uc.get_or_generate(
        scope_id if scope_id is not None else settings.default_scope_id, target_date, created_by
    )
    await session.commit()
    return {"status": "ok", "config": _config_to_dict(config)}


@router.post("/{config_id}/approve")
async def approve_config(
    config_id: int,
    body: ApproveRequest,
    uc: LevelConfigUseCase = Depends(get_level_config_uc),
    session: AsyncSession = Depends(get_session),
):
    config = await uc.approve(config_id, body.approved_by)
    await session.commit()
    return {"status": "ok", "message": "Config approved successfully", "config": _config_to_dict(config)}


@router.post("")
async def save_config(
    body: SaveConfigRequest,
    uc: LevelConfigUseCase = Depends(get_level_config_uc),
    session: AsyncSession = Depends(get_session),
):
    """Save hand-edited percentages as the approved config for the date."""
    config = await uc.save(
        body.percentages, body.scope_id, body.target_date, body.approved_by, body.remarks
    )
    await session.commit()
    return {"status": "ok", "message": "Config saved successfully", "config": _config_to_dict(config)}


def _config_to_dict(c: LevelConfig) -> dict:
    return {
        "config_id": c.id,
        "scope_id": c.scope_id,
        "target_date": c.target_date.isoformat(),
        "config_type": c.config_type.value,
        "is_active": c.is_active,
        "is_assigned": c.is_assigned,
        "percentages": {level.value: c.percentage_for(level) for level in AgentLevel.ordered()},
        "agent_counts": {
            level.value: c.agent_counts.get(level, 0) for level in AgentLevel.ordered()
        },
        "total_agents": c.total_agents,
        "total_cases": c.total_cases,
        "based_on_config_id": c.based_on_config_id,
        "remarks": c.remarks,
        "created_by": c.created_by,
        "approved_by": c.approved_by,
        "approved_at": c.approved_at.isoformat() if c.approved_at else None,
        "assigned_by": c.assigned_by,
        "assigned_at": c.assigned_at.isoformat() if c.assigned_at else None,
        "assignments_by_agent": c.assignments_by_agent,
    }
