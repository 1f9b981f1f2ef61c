from typing import Optional

from .bank_account_store_base import BankAccountStorageError, BankAccountStoreBase
from .bank_accounts_memory import InMemoryBankAccountStore
from .bank_accounts_sqlite import SQLiteBankAccountStore

_store: Optional[BankAccountStoreBase] = None


def get_bank_account_store() -> BankAccountStoreBase:
    """
    Get the configured bank-account store (created on first use).

    BANK_ACCOUNTS_BACKEND selects "sqlite" (default) or "memory".
    """
    global _store
    if _store is None:
        from ...core.config import settings

        if settings.bank_accounts_backend == "memory":
            _store = InMemoryBankAccountStore()
        else:
            _store = SQLiteBankAccountStore(settings.bank_accounts_db_path)
    return _store


def set_bank_account_store(store: Optional[BankAccountStoreBase]) -> None:
    """Replace the configured store (tests, alternative backends)"""
    global _store
    _store = store


__all__ = [
    "BankAccountStorageError",
    "BankAccountStoreBase",
    "InMemoryBankAccountStore",
    "SQLiteBankAccountStore",
    "get_bank_account_store",
    "set_bank_account_store",
]
