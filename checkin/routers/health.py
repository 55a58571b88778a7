"""Health check endpoint.

Returns service status including roster store connectivity, scheduler state
and the admission gate.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from checkin.core.config import settings
from checkin.core.gate import get_gate
from checkin.db.supabase import get_supabase
from checkin.scheduler.jobs import is_scheduler_running

logger = logging.getLogger(__name__)

router = APIRouter()


def _store_status() -> str:
    if settings.STORE_BACKEND == "memory":
        return "connected"
    try:
        result = (
            get_supabase()
            .table(settings.ROSTER_TABLE)
            .select("id")
            .limit(1)
            .execute()
        )
    except Exception:
        logger.warning("Health check: roster store connection failed", exc_info=True)
        return "disconnected"
    return "connected" if result is not None else "disconnected"


@router.get("/health")
def health_check() -> Any:
    """Return 200 when the roster store is reachable, 503 otherwise."""
    db_status = _store_status()

    payload: dict[str, Any] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "scheduler": "running" if is_scheduler_running() else "stopped",
        "admission_open": get_gate(),
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
