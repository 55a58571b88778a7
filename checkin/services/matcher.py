"""Identity matching: presented identifier -> one roster record.

A candidate matches when the identifier equals its resolved barcode or its
resolved phone number, which covers rows where the import only filled one of
the two aliased columns.  Duplicate identifiers are a roster data-integrity
fault: the lowest canonical id wins and the ambiguity is logged.
"""

from __future__ import annotations

import logging
from typing import Any

from checkin.core.errors import NotFoundError, ValidationError
from checkin.db.store import CandidateStore, get_store
from checkin.models.candidate import CandidateView, StoredRecord
from checkin.services.aliases import resolve_field
from checkin.services.records import to_candidate_view

logger = logging.getLogger(__name__)


def normalize_identifier(raw: str | None) -> str:
    """Trim a presented identifier; reject empty input before any lookup."""
    identifier = (raw or "").strip()
    if not identifier:
        raise ValidationError("Barcode is required.")
    return identifier


def identifier_matches(data: dict[str, Any], identifier: str) -> bool:
    """True when *identifier* equals the row's resolved barcode or phone number."""
    return identifier in (
        resolve_field(data, "barcode"),
        resolve_field(data, "phoneNumber"),
    )


def match_candidate(
    identifier: str,
    store: CandidateStore | None = None,
) -> StoredRecord:
    """Return the single roster record for *identifier*.

    Raises ``ValidationError`` for blank input and ``NotFoundError`` when no
    record matches.
    """
    identifier = normalize_identifier(identifier)
    store = store or get_store()

    matches = store.find_records(lambda data: identifier_matches(data, identifier))
    if not matches:
        logger.info("candidate_not_found", extra={"identifier": identifier})
        raise NotFoundError()

    matches.sort(key=lambda r: r.id)
    if len(matches) > 1:
        logger.warning(
            "candidate_identifier_ambiguous",
            extra={
                "identifier": identifier,
                "record_ids": [r.id for r in matches],
                "chosen": matches[0].id,
            },
        )
    return matches[0]


def resolve_candidate(
    identifier: str,
    store: CandidateStore | None = None,
) -> CandidateView:
    """Resolve *identifier* to its canonical candidate view."""
    return to_candidate_view(match_candidate(identifier, store))
