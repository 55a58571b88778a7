"""Roster store adapters.

The engine needs four things from a store: list every roster record, find
records matching a predicate, fetch one record, and atomically replace one
record's data provided its version has not moved (compare-and-swap).  Two
adapters implement that contract:

* ``SupabaseCandidateStore`` -- a table with ``id``, ``version`` and a
  ``data`` jsonb column holding the imported spreadsheet row.
* ``InMemoryCandidateStore`` -- process-local, used for local runs and tests.

``get_store()`` returns the process-wide adapter selected by
``settings.STORE_BACKEND``.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from checkin.core.config import settings
from checkin.core.errors import StoreUnavailableError
from checkin.db.supabase import get_supabase
from checkin.models.candidate import StoredRecord

logger = logging.getLogger(__name__)

RecordPredicate = Callable[[dict[str, Any]], bool]


class CandidateStore(Protocol):
    def list_records(self) -> list[StoredRecord]: ...

    def find_records(self, predicate: RecordPredicate) -> list[StoredRecord]: ...

    def get_record(self, record_id: str) -> StoredRecord | None: ...

    def compare_and_swap(
        self, record_id: str, expected_version: int, data: dict[str, Any]
    ) -> bool: ...


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------

def _row_to_record(row: dict[str, Any]) -> StoredRecord:
    return StoredRecord(
        id=str(row["id"]),
        version=int(row.get("version") or 0),
        data=row.get("data") or {},
    )


class SupabaseCandidateStore:
    """Roster table accessed through supabase-py / PostgREST."""

    def __init__(self, table: str | None = None) -> None:
        self.table = table or settings.ROSTER_TABLE

    def list_records(self) -> list[StoredRecord]:
        try:
            result = (
                get_supabase()
                .table(self.table)
                .select("id, version, data")
                .order("id")
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            logger.error(
                "roster_store_unavailable",
                extra={"operation": "list", "error": str(exc)},
            )
            raise StoreUnavailableError() from exc
        return [_row_to_record(row) for row in result.data or []]

    def find_records(self, predicate: RecordPredicate) -> list[StoredRecord]:
        # The alias columns live inside jsonb under arbitrary (bilingual)
        # keys, so matching happens client-side over the full roster.
        return [r for r in self.list_records() if predicate(r.data)]

    def get_record(self, record_id: str) -> StoredRecord | None:
        try:
            result = (
                get_supabase()
                .table(self.table)
                .select("id, version, data")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            logger.error(
                "roster_store_unavailable",
                extra={"operation": "get", "record_id": record_id, "error": str(exc)},
            )
            raise StoreUnavailableError() from exc
        if not result.data:
            return None
        return _row_to_record(result.data[0])

    def compare_and_swap(
        self, record_id: str, expected_version: int, data: dict[str, Any]
    ) -> bool:
        """Write *data* only if the row is still at *expected_version*.

        The ``eq("version", ...)`` filter makes the update a no-op when a
        concurrent writer got there first; PostgREST then returns no rows.
        """
        try:
            result = (
                get_supabase()
                .table(self.table)
                .update({"data": data, "version": expected_version + 1})
                .eq("id", record_id)
                .eq("version", expected_version)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            logger.error(
                "roster_store_unavailable",
                extra={"operation": "update", "record_id": record_id, "error": str(exc)},
            )
            raise StoreUnavailableError() from exc
        return bool(result.data)


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------

class InMemoryCandidateStore:
    """Thread-safe dict-backed store.  Records are copied in and out."""

    def __init__(self, rows: Iterable[dict[str, Any]] = ()) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, StoredRecord] = {}
        self._next_id = 1
        for row in rows:
            self.add(row)

    def add(self, data: dict[str, Any], record_id: str | None = None) -> StoredRecord:
        """Insert a roster row (import-time only; the engine never creates rows)."""
        with self._lock:
            if record_id is None:
                record_id = f"{self._next_id:06d}"
                self._next_id += 1
            record = StoredRecord(id=record_id, version=0, data=copy.deepcopy(data))
            self._records[record_id] = record
            return record.model_copy(deep=True)

    def list_records(self) -> list[StoredRecord]:
        with self._lock:
            return [
                self._records[key].model_copy(deep=True)
                for key in sorted(self._records)
            ]

    def find_records(self, predicate: RecordPredicate) -> list[StoredRecord]:
        return [r for r in self.list_records() if predicate(r.data)]

    def get_record(self, record_id: str) -> StoredRecord | None:
        with self._lock:
            record = self._records.get(record_id)
            return record.model_copy(deep=True) if record else None

    def compare_and_swap(
        self, record_id: str, expected_version: int, data: dict[str, Any]
    ) -> bool:
        with self._lock:
            current = self._records.get(record_id)
            if current is None or current.version != expected_version:
                return False
            self._records[record_id] = StoredRecord(
                id=record_id,
                version=expected_version + 1,
                data=copy.deepcopy(data),
            )
            return True


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_store: CandidateStore | None = None


def get_store() -> CandidateStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        if settings.STORE_BACKEND == "memory":
            _store = InMemoryCandidateStore()
        else:
            _store = SupabaseCandidateStore()
        logger.info("roster_store_ready", extra={"backend": settings.STORE_BACKEND})
    return _store
