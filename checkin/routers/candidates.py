"""Candidate lookup endpoint (kiosk login step)."""

from __future__ import annotations

from fastapi import APIRouter

from checkin.models.candidate import CandidateDetail
from checkin.services.matcher import resolve_candidate
from checkin.services.papers import parse_timeslot

router = APIRouter()


@router.get("/{identifier}", response_model=CandidateDetail)
def get_candidate(identifier: str) -> CandidateDetail:
    """Resolve a phone number or barcode to the candidate and their papers.

    Responds 404 when no roster record matches.
    """
    candidate = resolve_candidate(identifier)
    return CandidateDetail(
        candidate=candidate,
        papers=parse_timeslot(candidate.timeslot),
    )
