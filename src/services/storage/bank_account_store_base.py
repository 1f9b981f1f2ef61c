"""
Abstract base class for bank-account storage implementations.

Defines the interface the reconciler depends on, enabling dependency
injection and easy swapping of storage backends.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ...models.directory import BankAccountRecord, NewBankAccount


class BankAccountStorageError(Exception):
    """Lookup or insert failed (connectivity failure or constraint violation)"""


class BankAccountStoreBase(ABC):
    """
    Abstract base class for bank-account storage.

    Implementations must hold at most one record per (owner_id,
    account_number) pair. Callers still look up before inserting; the
    constraint is the backstop.

    Implementations can use:
    - In-memory storage (for testing/demo)
    - SQLite (for single-instance deployments)
    - The application's hosted database (for production)
    """

    @abstractmethod
    def lookup_bank_account(self, owner_id: str, account_number: str) -> Optional[BankAccountRecord]:
        """
        Find the record owned by ``owner_id`` with this account number.

        Args:
            owner_id: Beneficiary identifier
            account_number: Account number (compared after trimming whitespace)

        Returns:
            The stored record, or None if not found

        Raises:
            BankAccountStorageError: if the store cannot be queried
        """
        pass

    @abstractmethod
    def insert_bank_account(self, account: NewBankAccount) -> BankAccountRecord:
        """
        Insert a new record and return it with its assigned id.

        Raises:
            BankAccountStorageError: on constraint violation or connectivity failure
        """
        pass

    @abstractmethod
    def list_for_owner(self, owner_id: str) -> list[BankAccountRecord]:
        """List all records owned by one beneficiary"""
        pass

    @abstractmethod
    def list_all(self) -> list[BankAccountRecord]:
        """List all records"""
        pass
