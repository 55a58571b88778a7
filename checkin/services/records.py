"""Conversions between stored roster rows and candidate views."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from checkin.core.constants import (
    CHECK_IN_COUNT_KEY,
    CHECK_INS_KEY,
    LAST_CHECK_IN_KEY,
)
from checkin.models.candidate import CandidateView, CheckInEvent, StoredRecord
from checkin.services.aliases import resolve_fields

logger = logging.getLogger(__name__)


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse a stored timestamp into an aware UTC ``datetime``.

    Accepts ISO-8601 strings (with ``Z`` or an offset) and ``datetime``
    objects; naive values are taken as UTC.  Unparseable values yield None.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        try:
            value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            logger.warning("unparseable_timestamp", extra={"value": raw})
            return None
    else:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def read_events(data: dict[str, Any]) -> list[CheckInEvent]:
    """Return the check-in events of a roster row, skipping malformed entries."""
    events: list[CheckInEvent] = []
    for entry in data.get(CHECK_INS_KEY) or []:
        if not isinstance(entry, dict) or not entry.get("paperId"):
            continue
        events.append(
            CheckInEvent(
                paper_id=str(entry["paperId"]),
                title=str(entry.get("title") or ""),
                at=parse_timestamp(entry.get("at")),
            )
        )
    return events


def write_events(events: list[CheckInEvent]) -> list[dict[str, Any]]:
    return [
        {
            "paperId": e.paper_id,
            "title": e.title,
            "at": format_timestamp(e.at) if e.at else None,
        }
        for e in events
    ]


def latest_event_time(events: list[CheckInEvent]) -> datetime | None:
    """Maximum ``at`` over *events*, or None when no event has a time."""
    times = [e.at for e in events if e.at is not None]
    return max(times) if times else None


def read_count(data: dict[str, Any]) -> int:
    try:
        return max(int(data.get(CHECK_IN_COUNT_KEY) or 0), 0)
    except (TypeError, ValueError):
        return 0


def to_candidate_view(record: StoredRecord) -> CandidateView:
    """Alias-resolved, ledger-aware view of a stored roster row."""
    fields = resolve_fields(record.data)
    events = read_events(record.data)
    return CandidateView(
        canonical_id=record.id,
        **fields.model_dump(),
        last_check_in=parse_timestamp(record.data.get(LAST_CHECK_IN_KEY)),
        check_in_count=read_count(record.data),
        check_ins=events,
        checked_papers={e.paper_id: e.at for e in events if e.at is not None},
    )
