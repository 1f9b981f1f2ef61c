"""
Read-only directory records the engine matches against (projects,
beneficiaries) and the bank-account records it reuses or creates.
"""

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .invoice import coerce_date

NEW_BENEFICIARY_ID = "new"
UNKNOWN_BENEFICIARY_ID = "unknown"
TEMP_ACCOUNT_PREFIX = "temp-"
TEMP_OWNER_ID = "temp"

BeneficiaryType = Literal["person", "company"]


def is_temporary_account_id(account_id: str | None) -> bool:
    """True for bank-account ids staged in memory that must never be used as a foreign key"""
    return bool(account_id) and account_id.startswith(TEMP_ACCOUNT_PREFIX)


class DateInterval(BaseModel):
    """Inclusive calendar interval"""
    model_config = ConfigDict(frozen=True)

    start: dt.date
    end: dt.date

    @model_validator(mode="after")
    def start_not_after_end(self):
        if self.start > self.end:
            raise ValueError(f"interval start {self.start} is after end {self.end}")
        return self


class ProjectCandidate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = ""
    client_name: str | None = None
    client_company_name: str | None = None
    venue: str | None = None
    start_date: dt.date | None = None
    due_date: dt.date | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("name", mode="before")
    @classmethod
    def name_or_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("start_date", "due_date", mode="before")
    @classmethod
    def calendar_dates(cls, value: Any) -> dt.date | None:
        return coerce_date(value)


class Beneficiary(BaseModel):
    """
    A person or company that receives a payment.

    ``id`` is a real directory identifier, ``"new"`` for a name typed or
    extracted but not yet persisted, or ``"unknown"`` for legacy free-text
    beneficiaries with no resolvable record.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    type: BeneficiaryType = "company"

    @property
    def is_persisted(self) -> bool:
        return bool(self.id) and self.id not in (NEW_BENEFICIARY_ID, UNKNOWN_BENEFICIARY_ID)


class BankAccountRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    owner_id: str
    owner_type: BeneficiaryType | None = None
    bank_name: str
    account_number: str
    account_name: str
    swift_code: str | None = None
    country: str | None = None
    city: str | None = None

    @property
    def is_temporary(self) -> bool:
        return is_temporary_account_id(self.id)


class NewBankAccount(BaseModel):
    """Insert payload for a bank account; the store assigns the id"""
    owner_id: str
    owner_type: BeneficiaryType | None = None
    bank_name: str
    account_number: str
    account_name: str
    swift_code: str | None = None
    country: str | None = None
    city: str | None = None

    def with_id(self, account_id: str) -> BankAccountRecord:
        return BankAccountRecord(id=account_id, **self.model_dump())
