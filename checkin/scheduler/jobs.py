"""APScheduler job definitions and scheduler management.

Runs the roster integrity audit on an ``IntervalTrigger`` and provides
start/shutdown/status helpers for the FastAPI lifespan.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from checkin.core.config import settings
from checkin.core.errors import StoreUnavailableError
from checkin.services.audit import audit_roster_integrity

logger = logging.getLogger(__name__)

# Module-level scheduler instance (singleton)
scheduler = BackgroundScheduler()


def _audit_job() -> None:
    """Wrapper that APScheduler calls on each interval tick."""
    try:
        audit_roster_integrity()
    except StoreUnavailableError:
        logger.warning("roster_audit_skipped", exc_info=True)


def start_scheduler() -> None:
    """Register the roster audit job and start the background scheduler."""
    scheduler.add_job(
        _audit_job,
        IntervalTrigger(minutes=settings.ROSTER_AUDIT_INTERVAL_MINUTES),
        id="roster_audit",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "scheduler_started",
        extra={"interval_minutes": settings.ROSTER_AUDIT_INTERVAL_MINUTES},
    )


def shutdown_scheduler() -> None:
    """Shutdown the scheduler without waiting for a running audit."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


def is_scheduler_running() -> bool:
    return scheduler.running
