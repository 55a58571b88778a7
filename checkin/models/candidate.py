"""Pydantic models for roster records and their canonical views.

``StoredRecord`` is the raw row exactly as the store holds it (aliased
spreadsheet columns plus the ledger fields).  Everything the API returns is
built from the alias-resolved view in ``checkin.services.aliases``.

Response models serialize with camelCase keys (``checkInCount``,
``lastCheckIn``, ``checkedPapers``) as the kiosk and stats screens read them;
they are still built by field name in Python.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StoredRecord(BaseModel):
    """A roster row with its optimistic-concurrency version."""
    id: str
    version: int = 0
    data: dict[str, Any] = Field(default_factory=dict)


class CanonicalFields(BaseModel):
    """Single-valued view over the aliased roster columns."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    barcode: str = ""
    phone_number: str = ""
    candidate_name: str = ""
    school: str = ""
    timeslot: str = ""


class CheckInEvent(BaseModel):
    """One candidate's attendance for one paper."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    paper_id: str
    title: str = ""
    at: datetime | None = None


class CandidateView(CanonicalFields):
    """Canonical candidate with ledger state, as returned to callers."""
    canonical_id: str
    last_check_in: datetime | None = None
    check_in_count: int = 0
    check_ins: list[CheckInEvent] = []
    checked_papers: dict[str, datetime] = {}


class PaperSlot(BaseModel):
    """A paper on the candidate's schedule."""
    id: str
    title: str
    time: str


class CandidateDetail(BaseModel):
    """Full response for GET /api/candidates/{identifier}."""
    candidate: CandidateView
    papers: list[PaperSlot] = []
