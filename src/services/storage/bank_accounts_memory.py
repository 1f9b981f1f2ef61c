"""
In-memory bank-account storage (for tests and demos).
In production, use the SQLite store or the application's database.
"""
import uuid
from typing import Dict, Optional

from ...models.directory import BankAccountRecord, NewBankAccount
from .bank_account_store_base import BankAccountStorageError, BankAccountStoreBase


class InMemoryBankAccountStore(BankAccountStoreBase):
    def __init__(self):
        self._accounts: Dict[str, BankAccountRecord] = {}

    def lookup_bank_account(self, owner_id: str, account_number: str) -> Optional[BankAccountRecord]:
        """Find a record by owner and account number"""
        account_number = account_number.strip()
        for record in self._accounts.values():
            if record.owner_id == owner_id and record.account_number == account_number:
                return record
        return None

    def insert_bank_account(self, account: NewBankAccount) -> BankAccountRecord:
        """Insert a record, enforcing one record per owner and account number"""
        account = account.model_copy(update={"account_number": account.account_number.strip()})
        if self.lookup_bank_account(account.owner_id, account.account_number) is not None:
            raise BankAccountStorageError(
                f"Bank account {account.account_number} already exists for owner {account.owner_id}"
            )

        record = account.with_id(str(uuid.uuid4()))
        self._accounts[record.id] = record
        return record

    def list_for_owner(self, owner_id: str) -> list[BankAccountRecord]:
        return [r for r in self._accounts.values() if r.owner_id == owner_id]

    def list_all(self) -> list[BankAccountRecord]:
        """List all records (for debugging)"""
        return list(self._accounts.values())

    def clear(self) -> None:
        self._accounts.clear()
