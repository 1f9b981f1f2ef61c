"""
Shared pytest fixtures for the reconciliation engine tests.
"""

import os
import tempfile

import pytest

from src.models.directory import Beneficiary, ProjectCandidate
from src.services.storage import InMemoryBankAccountStore, SQLiteBankAccountStore


@pytest.fixture
def db_path():
    """Create a temporary database file for testing"""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    # Cleanup
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def sqlite_store(db_path):
    """Fresh SQLite bank account store for each test"""
    return SQLiteBankAccountStore(db_path)


@pytest.fixture
def memory_store():
    return InMemoryBankAccountStore()


@pytest.fixture
def beneficiaries():
    return [
        Beneficiary(id="c-100", name="Bali Paradise Resort", type="company"),
        Beneficiary(id="p-200", name="Made Wirawan", type="person"),
        Beneficiary(id="c-300", name="ACME", type="company"),
    ]


@pytest.fixture
def projects():
    return [
        ProjectCandidate(
            id="prj-1",
            name="Corporate Gala 150625",
            client_name="Sarah Lim",
            client_company_name="Globex Corporation",
            venue="Raffles Hotel Singapore",
            start_date="2025-06-15",
        ),
        ProjectCandidate(
            id="prj-2",
            name="Bali Retreat 05-071225",
            client_name="Made Wirawan",
            client_company_name="Bali Paradise Resort",
            venue="Ubud, Bali",
            start_date="2025-12-05",
            due_date="2025-12-07",
        ),
        ProjectCandidate(
            id="prj-3",
            name="0625 Roadshow",
            client_name="Tom Baker",
            venue="Jakarta Convention Center",
        ),
    ]
