"""Collections call assignment engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from callcenter.adapters.persistence.database import engine
from callcenter.domain.exceptions import (
    AgentNotFoundError,
    AssignmentEngineError,
    ConfigNotFoundError,
    ConfigStateError,
    InvalidDateRangeError,
    InvalidPercentagesError,
    LevelUnchangedError,
    NothingToDoError,
    RosterLockedError,
)
from callcenter.infrastructure.api.routes_assignment import router as assignment_router
from callcenter.infrastructure.api.routes_config import router as config_router
from callcenter.infrastructure.api.routes_health import router as health_router
from callcenter.infrastructure.api.routes_roster import router as roster_router

logger = logging.getLogger(__name__)

# Most specific first; the first matching class wins
_ERROR_STATUS: list[tuple[type[AssignmentEngineError], int]] = [
    (NothingToDoError, 200),
    (ConfigNotFoundError, 404),
    (AgentNotFoundError, 404),
    (ConfigStateError, 409),
    (LevelUnchangedError, 409),
    (RosterLockedError, 409),
    (InvalidPercentagesError, 422),
    (InvalidDateRangeError, 422),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


async def engine_error_handler(request: Request, exc: AssignmentEngineError) -> JSONResponse:
    status_code = next((code for cls, code in _ERROR_STATUS if isinstance(exc, cls)), 400)
    if isinstance(exc, NothingToDoError):
        logger.info("Nothing to do on %s: %s", request.url.path, exc.detail)
        status = "nothing_to_do"
    else:
        logger.warning("Request refused on %s: %s", request.url.path, exc.detail)
        status = "error"
    return JSONResponse(
        status_code=status_code,
        content={"status": status, "type": exc.kind, "detail": exc.detail},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # The request's session is closed without commit, so the run is rolled back
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "type": "internal_error", "detail": str(exc)},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Collections call assignment engine",
        description="Duty rosters, level quotas and case assignment for phone collections",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AssignmentEngineError, engine_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(assignment_router, prefix="/api")
    app.include_router(config_router, prefix="/api")
    app.include_router(roster_router, prefix="/api")

    return app


app = create_app()
