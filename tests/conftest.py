"""Shared test fixtures.

Provides an in-memory roster store installed as the process-wide store, a
chainable Supabase table mock, and a ``test_client`` for FastAPI.
"""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

os.environ.setdefault("STORE_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from checkin.core import gate as gate_mod
from checkin.db import store as store_mod
from checkin.db.store import InMemoryCandidateStore


def make_row(**fields: Any) -> dict[str, Any]:
    """A roster row shaped like the spreadsheet import (no ledger fields)."""
    row: dict[str, Any] = {"checkInCount": 0, "checkIns": []}
    row.update(fields)
    return row


def chainable_table_mock() -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in ("select", "update", "eq", "limit", "order"):
        getattr(m, method).return_value = m
    return m


@pytest.fixture(autouse=True)
def _reset_gate() -> Generator[None, None, None]:
    """Every test starts and ends with the admission gate open."""
    gate_mod.set_gate(True)
    yield
    gate_mod.set_gate(True)


@pytest.fixture()
def memory_store() -> Generator[InMemoryCandidateStore, None, None]:
    """Install an empty ``InMemoryCandidateStore`` as the process store."""
    store = InMemoryCandidateStore()
    previous = store_mod._store
    store_mod._store = store
    yield store
    store_mod._store = previous


@pytest.fixture()
def mock_supabase() -> Generator[MagicMock, None, None]:
    """Patch ``get_supabase`` in the store module with a chainable client."""
    mock_client = MagicMock()
    table = chainable_table_mock()
    mock_client.table.return_value = table
    with patch("checkin.db.store.get_supabase", return_value=mock_client):
        yield mock_client


@pytest.fixture()
def test_client(memory_store: InMemoryCandidateStore) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient backed by the memory store."""
    from checkin.main import app

    with TestClient(app) as client:
        yield client
