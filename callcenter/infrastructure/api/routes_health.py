"""Health check: database reachability plus the clock the engine runs on."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from callcenter.adapters.persistence.database import get_session
from callcenter.config import local_now, settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """503 when the database cannot be reached, so schedulers can hold off a run."""
    now = local_now()
    body = {
        "service": "Collections call assignment engine",
        "timezone": settings.timezone,
        "local_time": now.isoformat(),
        "roster_editable_today": now.hour < settings.roster_cutoff_hour,
    }
    try:
        await session.scalar(select(1))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "degraded", "database": f"error: {e}", **body},
        )
    return {"status": "ok", "database": "connected", **body}
