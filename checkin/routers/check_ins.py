"""Check-in endpoints used by the kiosk and the stats screen.

POST records a paper check-in, DELETE retracts one, GET lists the roster,
and ``/status`` reads or flips the admission gate.  ``/scans`` takes a burst
of raw decoder reads and checks in each distinct barcode once.

Handlers are plain ``def`` so the blocking store calls run in FastAPI's
threadpool.  Engine errors propagate to the handlers registered in
``checkin.main``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

from checkin.core.config import settings
from checkin.core.gate import get_gate, set_gate
from checkin.models.candidate import CandidateView
from checkin.models.check_in import (
    CheckInRemoval,
    CheckInRequest,
    CheckInResponse,
    GateStatus,
    ScanBatch,
    ScanOutcome,
)
from checkin.services.ledger import record_check_in, remove_check_in
from checkin.services.papers import paper_title
from checkin.services.reporting import list_recent, list_roster
from checkin.services.scan_feed import check_in_scans

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[CandidateView])
def list_check_ins() -> list[CandidateView]:
    """Every candidate, most recent check-in first."""
    return list_roster()


@router.get("/recent", response_model=list[CandidateView])
def recent_check_ins(
    limit: int = Query(
        default=settings.RECENT_LIMIT_DEFAULT,
        ge=1,
        le=settings.RECENT_LIMIT_MAX,
        description="Number of most recent check-ins to return",
    ),
) -> list[CandidateView]:
    return list_recent(limit)


@router.post("", response_model=CheckInResponse)
def create_check_in(payload: CheckInRequest) -> CheckInResponse:
    """Record a paper check-in for the scanned barcode.

    The paper title falls back to the catalogue title when the kiosk does
    not send one.
    """
    attendee = record_check_in(
        payload.barcode,
        payload.paper_id,
        payload.paper_title or paper_title(payload.paper_id.strip()),
        request_token=payload.request_token,
    )
    return CheckInResponse(attendee=attendee)


@router.post("/scans", response_model=list[ScanOutcome])
def create_check_ins_from_scans(payload: ScanBatch) -> list[ScanOutcome]:
    """Check in every distinct barcode of a decoder burst for one paper."""
    title = payload.paper_title or paper_title(payload.paper_id.strip())
    return list(check_in_scans(payload.scans, payload.paper_id, title))


@router.delete("", response_model=CheckInResponse)
def delete_check_in(payload: CheckInRemoval) -> CheckInResponse:
    """Retract a paper check-in.  Unknown papers are a successful no-op."""
    attendee = remove_check_in(payload.barcode, payload.paper_id)
    return CheckInResponse(attendee=attendee)


@router.get("/status", response_model=GateStatus)
def gate_status() -> GateStatus:
    return GateStatus(enabled=get_gate())


@router.put("/status", response_model=GateStatus)
@router.post("/status", response_model=GateStatus)
def update_gate_status(payload: GateStatus) -> GateStatus:
    return GateStatus(enabled=set_gate(payload.enabled))
