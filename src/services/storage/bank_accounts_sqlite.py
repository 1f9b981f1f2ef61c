"""
SQLite-based bank-account storage.

Provides persistent storage of beneficiary bank accounts with a uniqueness
constraint on (owner_id, account_number).
"""

import sqlite3
import uuid
from typing import Optional

from loguru import logger

from ...models.directory import BankAccountRecord, NewBankAccount
from .bank_account_store_base import BankAccountStorageError, BankAccountStoreBase

_COLUMNS = "id, owner_id, owner_type, bank_name, account_number, account_name, swift_code, country, city"


class SQLiteBankAccountStore(BankAccountStoreBase):
    """
    SQLite-backed bank-account store with persistent storage.

    Features:
    - Persistent storage across application restarts
    - UNIQUE(owner_id, account_number) so duplicates cannot be stored
    - sqlite3 errors surface as BankAccountStorageError
    """

    def __init__(self, db_path: str = "bank_accounts.db"):
        """
        Initialize store with database path.

        Args:
            db_path: Path to SQLite database file (default: bank_accounts.db)
        """
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        """Create bank_accounts table if it doesn't exist"""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise BankAccountStorageError(f"Cannot open bank account database: {e}") from e

        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS bank_accounts (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    owner_type TEXT,
                    bank_name TEXT NOT NULL,
                    account_number TEXT NOT NULL,
                    account_name TEXT NOT NULL,
                    swift_code TEXT,
                    country TEXT,
                    city TEXT,
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (owner_id, account_number),
                    CHECK (owner_type IS NULL OR owner_type IN ('person', 'company'))
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_bank_accounts_owner
                ON bank_accounts(owner_id)
            """)

            conn.commit()
        except sqlite3.Error as e:
            raise BankAccountStorageError(f"Cannot initialize bank account database: {e}") from e
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> BankAccountRecord:
        return BankAccountRecord(**{key: row[key] for key in row.keys()})

    def _fetch(self, query: str, params: tuple) -> list[BankAccountRecord]:
        try:
            conn = self._get_connection()
            try:
                rows = conn.execute(query, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Bank account query failed: {e}")
            raise BankAccountStorageError(f"Bank account query failed: {e}") from e

        return [self._row_to_record(row) for row in rows]

    def lookup_bank_account(self, owner_id: str, account_number: str) -> Optional[BankAccountRecord]:
        """
        Find the record owned by ``owner_id`` with this account number.

        Args:
            owner_id: Beneficiary identifier
            account_number: Account number

        Returns:
            Stored record or None if not found
        """
        records = self._fetch(
            f"SELECT {_COLUMNS} FROM bank_accounts WHERE owner_id = ? AND account_number = ?",
            (owner_id, account_number.strip()),
        )
        return records[0] if records else None

    def insert_bank_account(self, account: NewBankAccount) -> BankAccountRecord:
        """
        Insert a new bank account.

        Args:
            account: Record to insert (without id)

        Returns:
            Stored record with its new UUID

        Raises:
            BankAccountStorageError: if the (owner, account number) pair exists
                or the database is unavailable
        """
        record = account.with_id(str(uuid.uuid4()))
        record.account_number = record.account_number.strip()

        try:
            conn = self._get_connection()
            try:
                conn.execute(
                    f"INSERT INTO bank_accounts ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (
                        record.id,
                        record.owner_id,
                        record.owner_type,
                        record.bank_name,
                        record.account_number,
                        record.account_name,
                        record.swift_code,
                        record.country,
                        record.city,
                    ),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.IntegrityError as e:
            raise BankAccountStorageError(
                f"Bank account {record.account_number} already exists for owner {record.owner_id}"
            ) from e
        except sqlite3.Error as e:
            logger.error(f"Bank account insert failed: {e}")
            raise BankAccountStorageError(f"Bank account insert failed: {e}") from e

        return record

    def list_for_owner(self, owner_id: str) -> list[BankAccountRecord]:
        """List records for one owner (ordered by creation time, newest first)"""
        return self._fetch(
            f"SELECT {_COLUMNS} FROM bank_accounts WHERE owner_id = ? ORDER BY created_at DESC, rowid DESC",
            (owner_id,),
        )

    def list_all(self) -> list[BankAccountRecord]:
        """List all records (ordered by creation time, newest first)"""
        return self._fetch(
            f"SELECT {_COLUMNS} FROM bank_accounts ORDER BY created_at DESC, rowid DESC",
            (),
        )
