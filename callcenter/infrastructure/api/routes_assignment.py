"""Assignment endpoints — stratified run, preview, simple round robin."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from callcenter.adapters.persistence.database import get_session
from callcenter.application.use_cases.assign_by_level import AssignByLevelUseCase, LevelRunResult
from callcenter.application.use_cases.assign_round_robin import AssignRoundRobinUseCase
from callcenter.config import settings
from callcenter.infrastructure.api.dependencies import (
    get_assign_by_level_uc,
    get_assign_round_robin_uc,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])

# ── Request schemas ─────────────────────────────────────────────────


class LevelAssignRequest(BaseModel):
    target_date: date
    config_id: int
    assigned_by: int
    scope_id: int = Field(default_factory=lambda: settings.default_scope_id)


class LevelPreviewRequest(BaseModel):
    target_date: date
    config_id: int
    scope_id: int = Field(default_factory=lambda: settings.default_scope_id)


class RoundRobinRequest(BaseModel):
    assigned_by: int
    assignment_date: date | None = None


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/level")
async def assign_by_level(
    body: LevelAssignRequest,
    uc: AssignByLevelUseCase = Depends(get_assign_by_level_uc),
    session: AsyncSession = Depends(get_session),
):
    """Run the stratified assignment with an approved config."""
    result = await uc.execute(body.scope_id, body.target_date, body.config_id, body.assigned_by)
    await session.commit()
    return {"status": "ok", "message": "Cases assigned by level", **_level_result_to_dict(result)}


@router.post("/level/preview")
async def preview_by_level(
    body: LevelPreviewRequest,
    uc: AssignByLevelUseCase = Depends(get_assign_by_level_uc),
):
    """Show what a stratified run would do; nothing is written."""
    result = await uc.preview(body.scope_id, body.target_date, body.config_id)
    return {"status": "ok", "message": "Assignment preview generated", **_level_result_to_dict(result)}


@router.post("/round-robin")
async def assign_round_robin(
    body: RoundRobinRequest,
    uc: AssignRoundRobinUseCase = Depends(get_assign_round_robin_uc),
    session: AsyncSession = Depends(get_session),
):
    """Round-robin the oldest unassigned cases over everyone on duty."""
    result = await uc.execute(body.assigned_by, body.assignment_date)
    await session.commit()
    return {
        "status": "ok",
        "message": "Case assignment completed successfully",
        "assignment_date": result.assignment_date.isoformat(),
        "total_cases": result.total_cases,
        "total_agents": result.total_agents,
        "conflicts": result.conflicts,
        "assignments": result.assignments,
        "summary": result.summary,
    }


def _level_result_to_dict(r: LevelRunResult) -> dict:
    data = asdict(r)
    data["target_date"] = r.target_date.isoformat()
    return data
