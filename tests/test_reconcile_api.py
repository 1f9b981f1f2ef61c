"""
Tests for the reconciliation HTTP endpoints.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.api.deps import get_orchestrator, get_store
from src.api.main import app
from src.services.project_matching import ProjectMatcher
from src.services.reconciliation import ReconciliationOrchestrator
from src.services.storage import InMemoryBankAccountStore

client = TestClient(app)


@pytest.fixture(autouse=True)
def in_memory_store():
    store = InMemoryBankAccountStore()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_orchestrator] = lambda: ReconciliationOrchestrator(store, matcher=ProjectMatcher())
    yield store
    app.dependency_overrides.clear()


PROJECTS = [
    {"id": "prj-1", "name": "Corporate Gala 150625", "client_company_name": "Globex Corporation"},
    {"id": "prj-2", "name": "Bali Retreat 05-071225", "client_company_name": "Bali Paradise Resort",
     "venue": "Ubud, Bali", "start_date": "2025-12-05", "due_date": "2025-12-07"},
]

BENEFICIARIES = [{"id": "c-100", "name": "Bali Paradise Resort", "type": "company"}]


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_reconcile_fills_empty_draft(in_memory_store):
    payload = {
        "extracted": {
            "amount": 4500000,
            "date": "2025-12-06",
            "beneficiary": "Bali Paradise Resort",
            "remarks": "Deposit",
            "bank_details": {"account_number": "1234567890", "bank_name": "BCA"},
        },
        "beneficiaries": BENEFICIARIES,
        "projects": PROJECTS,
    }

    r = client.post("/invoices/reconcile", json=payload)
    assert r.status_code == 200

    data = r.json()
    assert data["draft"]["project_id"] == "prj-2"
    assert Decimal(data["draft"]["amount"]) == Decimal("4500000")
    assert data["draft"]["beneficiary_ref"]["id"] == "c-100"
    assert data["bank_account"]["action"] == "created"
    assert data["draft"]["bank_account_id"] == in_memory_store.list_all()[0].id

    # Bank account is visible through the listing endpoints
    r = client.get("/bank-accounts/c-100")
    assert r.status_code == 200
    assert [a["account_number"] for a in r.json()] == ["1234567890"]


def test_reconcile_keeps_user_project():
    payload = {
        "extracted": {"beneficiary": "Bali Paradise Resort", "date": "2025-12-06"},
        "draft": {"project_id": "prj-1"},
        "projects": PROJECTS,
    }
    data = client.post("/invoices/reconcile", json=payload).json()

    assert data["draft"]["project_id"] == "prj-1"
    assert data["matched_project"] is None


def test_reconcile_tolerates_malformed_payload():
    payload = {"extracted": {"amount": "n/a", "date": "soon", "items": "many", "bank_details": "BCA"}}

    r = client.post("/invoices/reconcile", json=payload)
    assert r.status_code == 200

    data = r.json()
    assert data["draft"]["amount"] is None
    assert data["draft"]["payment_terms"] == []
    assert data["notices"] == []


def test_reconcile_rejects_invalid_draft():
    r = client.post("/invoices/reconcile", json={"draft": {"amount": "lots"}})
    assert r.status_code == 422


def test_match_project_returns_scores():
    payload = {"extracted": {"beneficiary": "Globex"}, "projects": PROJECTS}

    data = client.post("/invoices/match-project", json=payload).json()

    assert data["project"]["id"] == "prj-1"
    assert data["score"] == 10
    assert [s["score"] for s in data["scores"]] == [10, 0]


def test_match_project_with_extreme_dates():
    payload = {
        "extracted": {"date": "9999-12-31", "beneficiary": "Globex"},
        "projects": [{"id": "prj-9", "name": "Far future", "client_company_name": "Globex",
                      "start_date": "9999-12-31"}],
    }

    r = client.post("/invoices/match-project", json=payload)

    assert r.status_code == 200
    assert r.json()["score"] == 10
    assert r.json()["scores"][0]["rules"]["explicit_date"] is False


def test_date_label():
    data = client.get("/invoices/date-label", params={"label": "Bali Retreat 05-071225"}).json()
    assert data["interval"] == {"start": "2025-12-05", "end": "2025-12-07"}

    data = client.get("/invoices/date-label", params={"label": "no code"}).json()
    assert data["interval"] is None
