"""
Bank-account reconciliation for extracted transfer details.

Decides whether the bank details printed on an invoice map to an existing
record, need a new record, or can only be staged in memory because the
beneficiary does not exist yet.
"""

import uuid
from typing import Literal, Optional

from loguru import logger
from pydantic import BaseModel

from ..models.directory import (
    TEMP_ACCOUNT_PREFIX,
    TEMP_OWNER_ID,
    BankAccountRecord,
    Beneficiary,
    NewBankAccount,
)
from ..models.invoice import BankDetails
from .storage import BankAccountStorageError, BankAccountStoreBase

UNKNOWN_BANK_NAME = "Unknown Bank"

BankAccountAction = Literal["reused", "created", "staged", "failed", "skipped"]


class BankAccountOutcome(BaseModel):
    """What the reconciler did and the record the draft should point at"""
    action: BankAccountAction
    record: Optional[BankAccountRecord] = None
    error: Optional[str] = None


def new_temporary_account_id() -> str:
    return f"{TEMP_ACCOUNT_PREFIX}{uuid.uuid4().hex}"


class BankAccountReconciler:
    """
    Reuses, creates or stages a bank-account record for a beneficiary.

    - Persisted beneficiary: look up (owner, account number) first and reuse
      the hit; insert only on a miss. Never two records for the same pair.
    - "new", "unknown" or missing beneficiary: the store is not touched. A
      temporary record with a ``temp-`` id is returned for display; the caller
      must not use it as a foreign key.

    Storage failures are caught here and returned as a ``failed`` outcome.
    """

    def __init__(self, store: BankAccountStoreBase):
        self.store = store

    def reconcile(self, beneficiary: Optional[Beneficiary], bank_details: BankDetails) -> BankAccountOutcome:
        account_number = (bank_details.account_number or "").strip()
        if not account_number:
            return BankAccountOutcome(action="skipped")

        if beneficiary is None or not beneficiary.is_persisted:
            return BankAccountOutcome(action="staged", record=self._stage(beneficiary, bank_details, account_number))

        try:
            existing = self.store.lookup_bank_account(beneficiary.id, account_number)
            if existing is not None:
                logger.info(
                    "Reusing existing bank account",
                    bank_account_id=existing.id,
                    owner_id=beneficiary.id
                )
                return BankAccountOutcome(action="reused", record=existing)

            created = self.store.insert_bank_account(
                NewBankAccount(
                    owner_id=beneficiary.id,
                    owner_type=beneficiary.type,
                    bank_name=bank_details.bank_name or UNKNOWN_BANK_NAME,
                    account_number=account_number,
                    account_name=bank_details.account_name or beneficiary.name,
                    swift_code=bank_details.swift_code,
                )
            )
        except BankAccountStorageError as e:
            logger.warning("Bank account reconciliation failed", owner_id=beneficiary.id, error=str(e))
            return BankAccountOutcome(action="failed", error=str(e))

        logger.info("Created bank account", bank_account_id=created.id, owner_id=beneficiary.id)
        return BankAccountOutcome(action="created", record=created)

    @staticmethod
    def _stage(
        beneficiary: Optional[Beneficiary], bank_details: BankDetails, account_number: str
    ) -> BankAccountRecord:
        owner_name = beneficiary.name if beneficiary is not None else ""
        record = BankAccountRecord(
            id=new_temporary_account_id(),
            owner_id=TEMP_OWNER_ID,
            owner_type=beneficiary.type if beneficiary is not None else None,
            bank_name=bank_details.bank_name or UNKNOWN_BANK_NAME,
            account_number=account_number,
            account_name=bank_details.account_name or owner_name,
            swift_code=bank_details.swift_code,
        )
        logger.info("Staged temporary bank account until beneficiary is saved", bank_account_id=record.id)
        return record
