"""Unit tests for the roster audit and its scheduler wiring."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from checkin.core.errors import StoreUnavailableError
from checkin.db.store import InMemoryCandidateStore
from checkin.services.audit import audit_roster_integrity, find_duplicate_identifiers
from conftest import make_row


class TestRosterAudit:
    def test_reports_identifiers_shared_across_alias_columns(self) -> None:
        store = InMemoryCandidateStore(
            [
                make_row(barcode="91234567"),
                make_row(**{"電話號碼 Phone Number": "91234567"}),
                make_row(barcode="90000000"),
            ]
        )
        assert find_duplicate_identifiers(store) == {"91234567": ["000001", "000002"]}

    def test_same_record_barcode_and_phone_is_not_duplicate(self) -> None:
        store = InMemoryCandidateStore([make_row(barcode="1", phoneNumber="1")])
        assert find_duplicate_identifiers(store) == {}

    def test_logs_each_duplicate(self, caplog: pytest.LogCaptureFixture) -> None:
        store = InMemoryCandidateStore([make_row(barcode="1"), make_row(Barcode="1")])
        with caplog.at_level(logging.WARNING, logger="checkin.services.audit"):
            duplicates = audit_roster_integrity(store)
        assert duplicates == {"1": ["000001", "000002"]}
        assert [r.message for r in caplog.records] == ["roster_duplicate_identifier"]


class TestSchedulerInit:
    @patch("checkin.scheduler.jobs.scheduler")
    def test_start_scheduler_adds_job(self, mock_scheduler: MagicMock) -> None:
        from checkin.scheduler.jobs import start_scheduler

        start_scheduler()

        mock_scheduler.add_job.assert_called_once()
        call_kwargs = mock_scheduler.add_job.call_args
        assert call_kwargs.kwargs.get("id") == "roster_audit"
        assert call_kwargs.kwargs.get("replace_existing") is True
        mock_scheduler.start.assert_called_once()

    @patch("checkin.scheduler.jobs.scheduler")
    def test_shutdown_not_running_noop(self, mock_scheduler: MagicMock) -> None:
        from checkin.scheduler.jobs import shutdown_scheduler

        mock_scheduler.running = False
        shutdown_scheduler()

        mock_scheduler.shutdown.assert_not_called()

    @patch("checkin.scheduler.jobs.audit_roster_integrity")
    def test_audit_job_tolerates_store_outage(self, mock_audit: MagicMock) -> None:
        from checkin.scheduler.jobs import _audit_job

        mock_audit.side_effect = StoreUnavailableError()
        _audit_job()
        mock_audit.assert_called_once_with()
