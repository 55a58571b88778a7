"""Duplicate suppression for the barcode scanner feed.

The camera decoder fires the same barcode many times while it stays in
frame.  ``debounce_scans`` sits between the decoder and the check-in call
and lets a value through again only once the window has passed.  The ledger
itself accepts duplicates; this is purely a caller-side filter.

``check_in_scans`` is that caller: it feeds the debounced values into the
ledger and reports one outcome per accepted scan.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable, Iterable, Iterator

from checkin.core.config import settings
from checkin.core.errors import GateClosedError, NotFoundError, ValidationError
from checkin.db.store import CandidateStore
from checkin.models.check_in import ScanOutcome
from checkin.services.ledger import record_check_in

logger = logging.getLogger(__name__)


class ScanDebouncer:
    """Remembers the identifiers accepted within the last ``window_seconds``.

    Entries are kept in acceptance order and dropped from the front once they
    age out, so the history never holds more than one window's worth of scans.
    """

    def __init__(
        self,
        window_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_seconds is None:
            window_seconds = settings.SCAN_DEBOUNCE_SECONDS
        self.window_seconds = window_seconds
        self._clock = clock
        self._recent: OrderedDict[str, float] = OrderedDict()

    def __len__(self) -> int:
        return len(self._recent)

    def _evict(self, now: float) -> None:
        while self._recent:
            seen_at = next(iter(self._recent.values()))
            if now - seen_at < self.window_seconds:
                break
            self._recent.popitem(last=False)

    def accept(self, raw: str | None) -> str | None:
        """Trimmed identifier if it should go through, else None."""
        value = (raw or "").strip()
        if not value:
            return None
        now = self._clock()
        self._evict(now)
        if value in self._recent:
            return None
        self._recent[value] = now
        return value


def debounce_scans(
    scans: Iterable[str | None],
    window_seconds: float | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Iterator[str]:
    """Yield trimmed identifiers, dropping blanks and repeats inside the window.

    Each call keeps its own history, so restarting the scanner means calling
    this again on the new feed.
    """
    debouncer = ScanDebouncer(window_seconds, clock)
    for raw in scans:
        value = debouncer.accept(raw)
        if value is not None:
            yield value


def check_in_scans(
    scans: Iterable[str | None],
    paper_id: str,
    title: str = "",
    *,
    window_seconds: float | None = None,
    clock: Callable[[], float] = time.monotonic,
    store: CandidateStore | None = None,
) -> Iterator[ScanOutcome]:
    """Record a check-in for every debounced scan in *scans*.

    A rejected scan (unknown barcode, closed gate, missing paper) is reported
    in its outcome and the feed carries on.  Store failures propagate.
    """
    for barcode in debounce_scans(scans, window_seconds, clock):
        try:
            attendee = record_check_in(barcode, paper_id, title, store=store)
        except (ValidationError, NotFoundError, GateClosedError) as exc:
            logger.info(
                "scan_rejected",
                extra={"barcode": barcode, "paper_id": paper_id, "reason": exc.message},
            )
            yield ScanOutcome(barcode=barcode, message=exc.message)
            continue
        yield ScanOutcome(barcode=barcode, attendee=attendee)
