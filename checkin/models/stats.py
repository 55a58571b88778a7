"""Response models for the reporting endpoints.

These are API-layer response schemas derived from a full roster scan, not
table mappings.
"""

from pydantic import BaseModel

from checkin.models.candidate import CandidateView


class RosterSummary(BaseModel):
    """Headline counts for the stats screen."""
    total: int = 0
    checked_in: int = 0


class DateGroup(BaseModel):
    """Candidates sitting on one exam date and their per-paper check-ins."""
    date: str
    total: int = 0
    per_paper_counts: dict[str, int] = {}


class DateGroupsResponse(BaseModel):
    """Full response for GET /api/stats/groups, ordered by date."""
    groups: list[DateGroup] = []


class SearchResponse(BaseModel):
    """Full response for GET /api/stats/search."""
    query: str
    candidate: CandidateView | None = None
