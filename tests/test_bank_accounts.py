"""
Unit tests for bank-account reuse, creation and temporary staging.
"""

import pytest

from src.models.directory import Beneficiary, is_temporary_account_id
from src.models.invoice import BankDetails
from src.services.bank_accounts import BankAccountReconciler
from src.services.storage import BankAccountStorageError, InMemoryBankAccountStore


class SpyStore(InMemoryBankAccountStore):
    """In-memory store that records every call"""

    def __init__(self):
        super().__init__()
        self.lookups = []
        self.inserts = []

    def lookup_bank_account(self, owner_id, account_number):
        self.lookups.append((owner_id, account_number))
        return super().lookup_bank_account(owner_id, account_number)

    def insert_bank_account(self, account):
        self.inserts.append(account)
        return super().insert_bank_account(account)


class FailingStore(InMemoryBankAccountStore):
    def lookup_bank_account(self, owner_id, account_number):
        raise BankAccountStorageError("database is locked")


@pytest.fixture
def spy():
    return SpyStore()


@pytest.fixture
def company():
    return Beneficiary(id="c-100", name="Bali Paradise Resort", type="company")


def test_creates_record_for_persisted_beneficiary(spy, company):
    details = BankDetails(account_number="1234567890", bank_name="BCA", account_name="PT Bali Paradise")

    outcome = BankAccountReconciler(spy).reconcile(company, details)

    assert outcome.action == "created"
    assert outcome.record.owner_id == "c-100"
    assert outcome.record.owner_type == "company"
    assert outcome.record.bank_name == "BCA"
    assert outcome.record.account_name == "PT Bali Paradise"
    assert not is_temporary_account_id(outcome.record.id)
    assert spy.lookups == [("c-100", "1234567890")]


def test_second_reconcile_reuses_without_insert(spy, company):
    details = BankDetails(account_number="1234567890")
    reconciler = BankAccountReconciler(spy)

    first = reconciler.reconcile(company, details)
    second = reconciler.reconcile(company, details)

    assert first.action == "created"
    assert second.action == "reused"
    assert second.record.id == first.record.id
    assert len(spy.inserts) == 1
    assert len(spy.list_for_owner("c-100")) == 1


def test_defaults_for_missing_bank_and_account_name(spy, company):
    outcome = BankAccountReconciler(spy).reconcile(company, BankDetails(account_number="555"))

    assert outcome.record.bank_name == "Unknown Bank"
    assert outcome.record.account_name == "Bali Paradise Resort"


def test_same_number_for_different_owners_is_allowed(spy, company):
    other = Beneficiary(id="p-200", name="Made Wirawan", type="person")
    details = BankDetails(account_number="777")
    reconciler = BankAccountReconciler(spy)

    assert reconciler.reconcile(company, details).action == "created"
    assert reconciler.reconcile(other, details).action == "created"
    assert len(spy.inserts) == 2


@pytest.mark.parametrize("beneficiary", [
    Beneficiary(id="new", name="Ketut Sound", type="person"),
    Beneficiary(id="unknown", name="Legacy Vendor"),
    None,
])
def test_unpersisted_beneficiary_is_staged_without_touching_store(spy, beneficiary):
    details = BankDetails(account_number="9988776655", bank_name="Mandiri")

    outcome = BankAccountReconciler(spy).reconcile(beneficiary, details)

    assert outcome.action == "staged"
    assert outcome.record.id.startswith("temp-")
    assert outcome.record.is_temporary
    assert outcome.record.owner_id == "temp"
    assert spy.lookups == []
    assert spy.inserts == []


def test_staged_ids_are_unique(spy):
    new = Beneficiary(id="new", name="Ketut Sound")
    details = BankDetails(account_number="1")
    reconciler = BankAccountReconciler(spy)

    assert reconciler.reconcile(new, details).record.id != reconciler.reconcile(new, details).record.id


def test_staged_account_name_falls_back_to_beneficiary(spy):
    outcome = BankAccountReconciler(spy).reconcile(Beneficiary(id="new", name="Ketut Sound"), BankDetails(account_number="1"))
    assert outcome.record.account_name == "Ketut Sound"
    assert outcome.record.bank_name == "Unknown Bank"


def test_missing_account_number_is_skipped(spy, company):
    outcome = BankAccountReconciler(spy).reconcile(company, BankDetails(bank_name="BCA"))
    assert outcome.action == "skipped"
    assert outcome.record is None
    assert spy.lookups == []


def test_storage_failure_is_reported_not_raised(company):
    outcome = BankAccountReconciler(FailingStore()).reconcile(company, BankDetails(account_number="1"))

    assert outcome.action == "failed"
    assert outcome.record is None
    assert "database is locked" in outcome.error
