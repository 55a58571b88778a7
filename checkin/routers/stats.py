"""Stats screen endpoints.

All views are computed from a full roster scan by
``checkin.services.reporting``.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from checkin.models.stats import DateGroupsResponse, RosterSummary, SearchResponse
from checkin.services.reporting import group_by_date_and_paper, search, summarize_roster

router = APIRouter()


@router.get("/summary", response_model=RosterSummary)
def stats_summary() -> RosterSummary:
    """Total candidates and how many have checked in at least once."""
    return summarize_roster()


@router.get("/groups", response_model=DateGroupsResponse)
def stats_groups() -> DateGroupsResponse:
    """Candidates and per-paper check-ins grouped by exam date."""
    return DateGroupsResponse(groups=group_by_date_and_paper())


@router.get("/search", response_model=SearchResponse)
def stats_search(
    q: str = Query(default="", description="Phone number, name or barcode fragment"),
) -> SearchResponse:
    return SearchResponse(query=q, candidate=search(q))
