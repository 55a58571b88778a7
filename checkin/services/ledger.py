"""Check-in ledger: record and retract per-paper attendance.

Each candidate keeps at most one event per paper.  Aggregates follow the
counting policy the dashboards were built on:

* every accepted ``record_check_in`` call adds one to ``checkInCount``, even
  when the paper was already checked in (its ``at`` is moved forward instead
  of appending a second event);
* an effective ``remove_check_in`` subtracts one, floored at zero;
* ``lastCheckIn`` is always the latest ``at`` over the remaining events.

Both operations are optimistic read-modify-writes: the mutation is applied
to a copy of the row and written with the store's compare-and-swap.  When a
concurrent writer bumped the version first, the row is re-read and the
mutation applied again to the fresh state.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from checkin.core.config import settings
from checkin.core.constants import (
    CHECK_IN_COUNT_KEY,
    CHECK_IN_TOKENS_KEY,
    CHECK_INS_KEY,
    LAST_CHECK_IN_KEY,
)
from checkin.core.errors import (
    ConcurrentUpdateError,
    GateClosedError,
    NotFoundError,
    ValidationError,
)
from checkin.core.gate import get_gate
from checkin.db.store import CandidateStore, get_store
from checkin.models.candidate import CandidateView, CheckInEvent, StoredRecord
from checkin.services.aliases import backfill_canonical
from checkin.services.matcher import match_candidate, normalize_identifier
from checkin.services.records import (
    format_timestamp,
    latest_event_time,
    read_count,
    read_events,
    to_candidate_view,
    write_events,
)

logger = logging.getLogger(__name__)

# Applies a change to row data in place; returns False when nothing changed.
Mutation = Callable[[dict[str, Any]], bool]


def _apply_atomically(
    record: StoredRecord,
    store: CandidateStore,
    mutate: Mutation,
    operation: str,
) -> StoredRecord:
    """Run *mutate* against *record* and persist it with compare-and-swap."""
    for attempt in range(1, settings.LEDGER_MAX_CAS_ATTEMPTS + 1):
        data = copy.deepcopy(record.data)
        if not mutate(data):
            return record
        if store.compare_and_swap(record.id, record.version, data):
            return StoredRecord(id=record.id, version=record.version + 1, data=data)

        logger.info(
            "ledger_version_conflict",
            extra={
                "operation": operation,
                "record_id": record.id,
                "version": record.version,
                "attempt": attempt,
            },
        )
        fresh = store.get_record(record.id)
        if fresh is None:
            raise NotFoundError()
        record = fresh

    logger.error(
        "ledger_write_abandoned",
        extra={"operation": operation, "record_id": record.id},
    )
    raise ConcurrentUpdateError()


def _set_last_check_in(data: dict[str, Any], events: list[CheckInEvent]) -> None:
    latest = latest_event_time(events)
    data[LAST_CHECK_IN_KEY] = format_timestamp(latest) if latest else None


# ---------------------------------------------------------------------------
# RecordCheckIn
# ---------------------------------------------------------------------------

def record_check_in(
    identifier: str,
    paper_id: str,
    title: str = "",
    *,
    at: datetime | None = None,
    request_token: str | None = None,
    store: CandidateStore | None = None,
) -> CandidateView:
    """Record a check-in of *paper_id* for the candidate behind *identifier*.

    Raises ``ValidationError`` for a blank identifier or paper,
    ``GateClosedError`` while admission is disabled and ``NotFoundError``
    when no candidate matches.  A *request_token* that was already applied
    to this candidate returns the current state without counting again.
    """
    identifier = normalize_identifier(identifier)
    paper_id = (paper_id or "").strip()
    if not paper_id:
        raise ValidationError("Paper ID is required.")
    title = (title or "").strip()

    if not get_gate():
        logger.info(
            "check_in_rejected_gate_closed",
            extra={"identifier": identifier, "paper_id": paper_id},
        )
        raise GateClosedError()

    store = store or get_store()
    record = match_candidate(identifier, store)
    timestamp = at or datetime.now(timezone.utc)
    replayed = False

    def mutate(data: dict[str, Any]) -> bool:
        nonlocal replayed
        tokens = list(data.get(CHECK_IN_TOKENS_KEY) or [])
        if request_token and request_token in tokens:
            replayed = True
            return False
        replayed = False

        events = read_events(data)
        existing = next((e for e in events if e.paper_id == paper_id), None)
        if existing is not None:
            existing.at = timestamp
            existing.title = existing.title or title
        else:
            events.append(CheckInEvent(paper_id=paper_id, title=title, at=timestamp))

        data[CHECK_INS_KEY] = write_events(events)
        data[CHECK_IN_COUNT_KEY] = read_count(data) + 1
        _set_last_check_in(data, events)

        if request_token:
            tokens.append(request_token)
            data[CHECK_IN_TOKENS_KEY] = tokens[-settings.CHECKIN_TOKEN_HISTORY:]
        if settings.BACKFILL_CANONICAL_FIELDS:
            data.update(backfill_canonical(data))
        return True

    updated = _apply_atomically(record, store, mutate, "record_check_in")

    if replayed:
        logger.info(
            "check_in_replayed",
            extra={"record_id": record.id, "paper_id": paper_id, "request_token": request_token},
        )
    else:
        logger.info(
            "check_in_recorded",
            extra={
                "record_id": updated.id,
                "paper_id": paper_id,
                "at": format_timestamp(timestamp),
                "check_in_count": read_count(updated.data),
            },
        )
    return to_candidate_view(updated)


# ---------------------------------------------------------------------------
# RemoveCheckIn
# ---------------------------------------------------------------------------

def remove_check_in(
    identifier: str,
    paper_id: str,
    *,
    store: CandidateStore | None = None,
) -> CandidateView:
    """Retract the *paper_id* check-in of the candidate behind *identifier*.

    Deleting a paper that was never checked in succeeds and leaves the
    candidate untouched.  Not gated by admission.
    """
    identifier = normalize_identifier(identifier)
    paper_id = (paper_id or "").strip()
    if not paper_id:
        raise ValidationError("Paper ID is required.")

    store = store or get_store()
    record = match_candidate(identifier, store)
    removed = False

    def mutate(data: dict[str, Any]) -> bool:
        nonlocal removed
        events = read_events(data)
        remaining = [e for e in events if e.paper_id != paper_id]
        removed = len(remaining) != len(events)
        if not removed:
            return False
        data[CHECK_INS_KEY] = write_events(remaining)
        data[CHECK_IN_COUNT_KEY] = max(read_count(data) - 1, 0)
        _set_last_check_in(data, remaining)
        return True

    updated = _apply_atomically(record, store, mutate, "remove_check_in")
    if not removed:
        logger.info(
            "check_in_remove_noop",
            extra={"record_id": record.id, "paper_id": paper_id},
        )
    else:
        logger.info(
            "check_in_removed",
            extra={
                "record_id": updated.id,
                "paper_id": paper_id,
                "check_in_count": read_count(updated.data),
            },
        )
    return to_candidate_view(updated)
