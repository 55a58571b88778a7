"""Read-side reporting over the full roster.

Every function here scans the roster once and derives its view in Python;
nothing is written back.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, timezone

from checkin.core.config import settings
from checkin.core.constants import DEFAULT_PAPERS
from checkin.db.store import CandidateStore, get_store
from checkin.models.candidate import CandidateView
from checkin.models.stats import DateGroup, RosterSummary
from checkin.services.papers import format_date_label, parse_timeslot_date
from checkin.services.records import to_candidate_view

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def load_roster(store: CandidateStore | None = None) -> list[CandidateView]:
    """Canonical views of every roster record, in store order."""
    store = store or get_store()
    return [to_candidate_view(record) for record in store.list_records()]


def list_roster(store: CandidateStore | None = None) -> list[CandidateView]:
    """All candidates, most recent check-in first, never-checked-in last."""
    roster = load_roster(store)
    return sorted(
        roster,
        key=lambda c: (c.last_check_in is not None, c.last_check_in or _OLDEST),
        reverse=True,
    )


def list_recent(
    limit: int | None = None,
    store: CandidateStore | None = None,
) -> list[CandidateView]:
    """Candidates with a check-in, newest first, at most *limit* of them."""
    if limit is None:
        limit = settings.RECENT_LIMIT_DEFAULT
    limit = max(1, min(limit, settings.RECENT_LIMIT_MAX))

    checked = [c for c in load_roster(store) if c.last_check_in is not None]
    checked.sort(key=lambda c: c.last_check_in, reverse=True)
    return checked[:limit]


def summarize_roster(store: CandidateStore | None = None) -> RosterSummary:
    roster = load_roster(store)
    return RosterSummary(
        total=len(roster),
        checked_in=sum(1 for c in roster if c.check_in_count > 0),
    )


def group_by_date_and_paper(
    cutoff: date | None = None,
    store: CandidateStore | None = None,
) -> list[DateGroup]:
    """Group candidates by the exam date embedded in their timeslot.

    Candidates without a parseable date are left out, as are dates after
    *cutoff* (defaults to ``settings.REPORT_CUTOFF_DATE``; far-future
    placeholder slots sit beyond it).  Groups come back in date order, and every
catalogue paper has a count, zero when nobody checked into it.
    """
    if cutoff is None:
        cutoff = settings.REPORT_CUTOFF_DATE

    totals: Counter[date] = Counter()
    per_paper: dict[date, Counter[str]] = {}
    skipped = 0

    for candidate in load_roster(store):
        slot_date = parse_timeslot_date(candidate.timeslot)
        if slot_date is None:
            skipped += 1
            continue
        if slot_date > cutoff:
            continue
        totals[slot_date] += 1
        papers = per_paper.setdefault(
            slot_date, Counter({paper_id: 0 for paper_id, _ in DEFAULT_PAPERS})
        )
        for event in candidate.check_ins:
            papers[event.paper_id] += 1

    logger.debug(
        "roster_grouped",
        extra={"groups": len(totals), "undated": skipped, "cutoff": cutoff.isoformat()},
    )
    return [
        DateGroup(
            date=format_date_label(slot_date),
            total=totals[slot_date],
            per_paper_counts=dict(sorted(per_paper[slot_date].items())),
        )
        for slot_date in sorted(totals)
    ]


def search(query: str | None, store: CandidateStore | None = None) -> CandidateView | None:
    """First candidate whose phone number, name or barcode contains *query*."""
    needle = (query or "").strip().lower()
    if not needle:
        return None
    for candidate in load_roster(store):
        haystacks = (candidate.phone_number, candidate.candidate_name, candidate.barcode)
        if any(needle in value.lower() for value in haystacks if value):
            return candidate
    return None
