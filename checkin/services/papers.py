"""Exam paper catalogue and timeslot parsing.

Roster timeslots are free text such as ``"15/02/2026 08:30am-11:00am"``
(day first).  The date drives the stats grouping; the times label each
paper on the candidate's schedule.
"""

from __future__ import annotations

from datetime import date

from checkin.core.constants import (
    DATE_TBD,
    DEFAULT_PAPER_TIMES,
    DEFAULT_PAPERS,
    TIMESLOT_DATE_RE,
    TIMESLOT_TIME_RE,
)
from checkin.models.candidate import PaperSlot


def parse_timeslot_date(raw: str | None) -> date | None:
    """Return the first ``dd/mm/yyyy`` date embedded in *raw*, if valid."""
    if not raw:
        return None
    match = TIMESLOT_DATE_RE.search(raw)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_date_label(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def parse_timeslot(raw: str | None) -> list[PaperSlot]:
    """Per-paper schedule for a candidate's timeslot.

    Missing pieces fall back to the default session times and "Date TBD".
    """
    slot_date = parse_timeslot_date(raw)
    date_display = slot_date.strftime("%d %b %Y") if slot_date else DATE_TBD
    times = TIMESLOT_TIME_RE.findall(raw or "")

    papers: list[PaperSlot] = []
    for index, (paper_id, title) in enumerate(DEFAULT_PAPERS):
        time = times[index] if index < len(times) else DEFAULT_PAPER_TIMES[index]
        papers.append(PaperSlot(id=paper_id, title=title, time=f"{date_display} · {time}"))
    return papers


def paper_title(paper_id: str) -> str:
    """Catalogue title for *paper_id*, or ``""`` for unknown papers."""
    return dict(DEFAULT_PAPERS).get(paper_id, "")
