"""Request and response schemas for the check-in endpoints.

Request bodies accept both snake_case and the camelCase keys sent by the
kiosk web client (``paperId``, ``paperTitle``).
"""

from pydantic import BaseModel, ConfigDict, Field

from checkin.models.candidate import CandidateView


class CheckInRequest(BaseModel):
    """Payload for POST /api/check-ins.

    ``request_token`` is chosen by the kiosk per physical scan; resending the
    same token after a lost response does not count the scan twice.
    """
    model_config = ConfigDict(populate_by_name=True)

    barcode: str = ""
    paper_id: str = Field(default="", alias="paperId")
    paper_title: str = Field(default="", alias="paperTitle")
    request_token: str | None = Field(default=None, alias="requestToken")


class CheckInRemoval(BaseModel):
    """Payload for DELETE /api/check-ins."""
    model_config = ConfigDict(populate_by_name=True)

    barcode: str = ""
    paper_id: str = Field(default="", alias="paperId")


class CheckInResponse(BaseModel):
    """Updated candidate after a ledger operation."""
    attendee: CandidateView


class ScanBatch(BaseModel):
    """Payload for POST /api/check-ins/scans: raw decoder reads for one paper."""
    model_config = ConfigDict(populate_by_name=True)

    paper_id: str = Field(default="", alias="paperId")
    paper_title: str = Field(default="", alias="paperTitle")
    scans: list[str | None] = Field(default_factory=list)


class ScanOutcome(BaseModel):
    """Result of one accepted scan: the updated attendee or the refusal."""
    barcode: str
    attendee: CandidateView | None = None
    message: str | None = None


class GateStatus(BaseModel):
    """Admission gate state (GET, and POST or PUT, on /api/check-ins/status)."""
    enabled: bool
