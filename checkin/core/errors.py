"""Error taxonomy for the check-in engine.

Each error carries the HTTP status the transport layer answers with and the
message shown on the kiosk.  The engine raises these and never retries; the
caller decides on backoff and wording.
"""

from __future__ import annotations


class CheckInError(Exception):
    """Base class for all engine errors."""

    status_code: int = 500
    default_message: str = "Unexpected check-in error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CheckInError):
    """Empty or malformed input; raised before the store is touched."""

    status_code = 400
    default_message = "Barcode is required."


class NotFoundError(CheckInError):
    """No roster record matches the presented identifier."""

    status_code = 404
    default_message = "Candidate not found for this barcode."


class GateClosedError(CheckInError):
    """Admission gate is disabled, new check-ins are refused."""

    status_code = 423
    default_message = "Check-in is currently closed."


class StoreUnavailableError(CheckInError):
    """Transport or store failure.  Safe for the caller to retry."""

    status_code = 503
    default_message = "Failed to check in. Please retry."


class ConcurrentUpdateError(StoreUnavailableError):
    """Optimistic version check kept losing to concurrent writers."""
