"""Endpoint tests for the check-in API (memory store behind TestClient)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from checkin.core.errors import StoreUnavailableError
from checkin.db.store import InMemoryCandidateStore
from conftest import make_row

PHONE = "91234567"


def _seed(store: InMemoryCandidateStore) -> None:
    store.add(
        make_row(
            **{
                "電話號碼 Phone Number": PHONE,
                "Name on barcode": "Chan Tai Man",
                "考試日期 Timeslot": "15/02/2026 08:30am–11:00am",
            }
        )
    )
    store.add(make_row(barcode="90000000", candidateName="Wong", timeslot="16/03/2026"))


class TestCheckInEndpoints:
    def test_record_check_in(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        response = test_client.post(
            "/api/check-ins", json={"barcode": f" {PHONE} ", "paper_id": "paper1"}
        )

        assert response.status_code == 200
        attendee = response.json()["attendee"]
        assert attendee["checkInCount"] == 1
        assert attendee["checkIns"][0]["paperId"] == "paper1"
        assert attendee["checkIns"][0]["title"] == "Chemistry Paper 1"
        assert attendee["lastCheckIn"] == attendee["checkIns"][0]["at"]
        assert "paper1" in attendee["checkedPapers"]

    def test_camel_case_payload(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        response = test_client.post(
            "/api/check-ins",
            json={"barcode": PHONE, "paperId": "paper2", "paperTitle": "Chem P2"},
        )
        assert response.status_code == 200
        event = response.json()["attendee"]["checkIns"][0]
        assert (event["paperId"], event["title"]) == ("paper2", "Chem P2")

    def test_missing_barcode(self, test_client: TestClient) -> None:
        response = test_client.post("/api/check-ins", json={"paper_id": "paper1"})
        assert response.status_code == 400
        assert response.json() == {"message": "Barcode is required."}

    def test_unknown_candidate(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        response = test_client.post(
            "/api/check-ins", json={"barcode": "11111111", "paper_id": "paper1"}
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Candidate not found for this barcode."

    def test_gate_closed(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        assert test_client.put("/api/check-ins/status", json={"enabled": False}).json() == {
            "enabled": False
        }
        assert test_client.get("/api/check-ins/status").json() == {"enabled": False}

        response = test_client.post(
            "/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"}
        )
        assert response.status_code == 423

        # Reads stay available while admission is closed.
        assert test_client.get(f"/api/candidates/{PHONE}").status_code == 200
        assert test_client.get("/api/stats/summary").status_code == 200

    def test_gate_toggled_with_post(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        """The stats screen flips the gate with POST, as well as PUT."""
        _seed(memory_store)
        response = test_client.post("/api/check-ins/status", json={"enabled": False})
        assert response.status_code == 200
        assert response.json() == {"enabled": False}

        blocked = test_client.post(
            "/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"}
        )
        assert blocked.status_code == 423

        assert test_client.post("/api/check-ins/status", json={"enabled": True}).json() == {
            "enabled": True
        }
        assert test_client.get("/api/check-ins/status").json() == {"enabled": True}

    def test_request_token_replay(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        payload = {"barcode": PHONE, "paper_id": "paper1", "request_token": "scan-42"}
        test_client.post("/api/check-ins", json=payload)
        response = test_client.post("/api/check-ins", json=payload)
        assert response.json()["attendee"]["checkInCount"] == 1

    def test_delete_check_in(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        test_client.post("/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"})

        response = test_client.request(
            "DELETE", "/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"}
        )
        assert response.status_code == 200
        attendee = response.json()["attendee"]
        assert attendee["checkInCount"] == 0
        assert attendee["checkIns"] == []
        assert attendee["lastCheckIn"] is None

        again = test_client.request(
            "DELETE", "/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"}
        )
        assert again.status_code == 200

    def test_delete_requires_paper(self, test_client: TestClient) -> None:
        response = test_client.request("DELETE", "/api/check-ins", json={"barcode": PHONE})
        assert response.status_code == 400
        assert response.json() == {"message": "Paper ID is required."}

    def test_listing_and_recent(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        test_client.post("/api/check-ins", json={"barcode": "90000000", "paper_id": "paper2"})

        listing = test_client.get("/api/check-ins").json()
        assert [c["barcode"] for c in listing] == ["90000000", PHONE]

        recent = test_client.get("/api/check-ins/recent", params={"limit": 5}).json()
        assert [c["candidateName"] for c in recent] == ["Wong"]

        assert test_client.get("/api/check-ins/recent", params={"limit": 0}).status_code == 422

    def test_listing_uses_camel_case_keys(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        """Roster rows carry the camelCase keys the kiosk and stats screens read."""
        _seed(memory_store)
        test_client.post("/api/check-ins", json={"barcode": PHONE, "paperId": "paper1"})

        row = test_client.get("/api/check-ins").json()[0]
        assert set(row) == {
            "canonicalId",
            "barcode",
            "phoneNumber",
            "candidateName",
            "school",
            "timeslot",
            "lastCheckIn",
            "checkInCount",
            "checkIns",
            "checkedPapers",
        }
        assert row["phoneNumber"] == PHONE
        assert row["checkInCount"] == 1
        assert set(row["checkIns"][0]) == {"paperId", "title", "at"}
        assert row["lastCheckIn"] == row["checkedPapers"]["paper1"]

    def test_scan_burst(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        """Repeated decoder reads of one barcode count as a single check-in."""
        _seed(memory_store)
        response = test_client.post(
            "/api/check-ins/scans",
            json={"paperId": "paper1", "scans": [PHONE, PHONE, "", "11111111", f"{PHONE} "]},
        )

        assert response.status_code == 200
        outcomes = response.json()
        assert [o["barcode"] for o in outcomes] == [PHONE, "11111111"]
        assert outcomes[0]["attendee"]["checkInCount"] == 1
        assert outcomes[0]["attendee"]["checkIns"][0]["title"] == "Chemistry Paper 1"
        assert outcomes[1] == {
            "barcode": "11111111",
            "attendee": None,
            "message": "Candidate not found for this barcode.",
        }

    @patch("checkin.routers.check_ins.record_check_in")
    def test_store_outage_is_503(self, mock_record: MagicMock, test_client: TestClient) -> None:
        mock_record.side_effect = StoreUnavailableError()
        response = test_client.post(
            "/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"}
        )
        assert response.status_code == 503
        assert response.json() == {"message": "Failed to check in. Please retry."}


class TestCandidateEndpoint:
    def test_lookup_returns_schedule(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        response = test_client.get(f"/api/candidates/{PHONE}")

        assert response.status_code == 200
        body = response.json()
        assert body["candidate"]["candidateName"] == "Chan Tai Man"
        assert body["candidate"]["barcode"] == PHONE
        assert [p["time"] for p in body["papers"]] == [
            "15 Feb 2026 · 08:30am",
            "15 Feb 2026 · 11:00am",
        ]

    def test_lookup_not_found(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        assert test_client.get("/api/candidates/123").status_code == 404


class TestStatsEndpoints:
    def test_summary_groups_and_search(
        self, test_client: TestClient, memory_store: InMemoryCandidateStore
    ) -> None:
        _seed(memory_store)
        test_client.post("/api/check-ins", json={"barcode": PHONE, "paper_id": "paper1"})

        assert test_client.get("/api/stats/summary").json() == {"total": 2, "checked_in": 1}

        groups = test_client.get("/api/stats/groups").json()["groups"]
        assert groups == [
            {
                "date": "15/02/2026",
                "total": 1,
                "per_paper_counts": {"paper1": 1, "paper2": 0},
            }
        ]

        found = test_client.get("/api/stats/search", params={"q": "chan"}).json()
        assert found["candidate"]["barcode"] == PHONE
        missing = test_client.get("/api/stats/search", params={"q": "zzz"}).json()
        assert missing == {"query": "zzz", "candidate": None}
