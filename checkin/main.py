"""FastAPI application entry point.

Configures CORS, logging, lifespan events (including the APScheduler roster
audit), engine error handling and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from checkin.core.config import settings
from checkin.core.errors import CheckInError, StoreUnavailableError
from checkin.core.logging import setup_logging
from checkin.routers import candidates, check_ins, health, stats
from checkin.scheduler.jobs import shutdown_scheduler, start_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks."""
    setup_logging()
    logger.info("Application starting up", extra={"store": settings.STORE_BACKEND})
    start_scheduler()
    yield
    shutdown_scheduler()
    logger.info("Application shutting down")


app = FastAPI(
    title="Exam Check-In API",
    description="Self check-in for exam candidates against an imported roster",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# ---------------------------------------------------------------------------
# Engine errors -> {"message": ...}
# ---------------------------------------------------------------------------
@app.exception_handler(CheckInError)
async def check_in_error_handler(request: Request, exc: CheckInError) -> JSONResponse:
    if isinstance(exc, StoreUnavailableError):
        logger.error(
            "request_failed_store_unavailable",
            extra={"path": request.url.path, "error": exc.message},
            exc_info=exc,
        )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(check_ins.router, prefix="/api/check-ins", tags=["Check-ins"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["Candidates"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
