"""
Extracted invoice payload as returned by the document-analysis service.

The analysis service is an LLM, so every field is optional and any field may
come back with the wrong type. Validators here coerce what they can and turn
everything else into None instead of rejecting the whole payload.
"""

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CURRENCY_CODES = ["USD", "AUD", "EUR", "GBP", "CAD", "JPY", "CNY", "IDR", "SGD"]
RUPIAH_PREFIX = re.compile(r"\bRp\.?", re.IGNORECASE)
DOT_GROUPED_AMOUNT = re.compile(r"^-?\d{1,3}(\.\d{3})+(,\d+)?$")


def coerce_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def coerce_date(value: Any) -> dt.date | None:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return dt.date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def coerce_amount(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        amount = Decimal(str(value))
        return amount if amount.is_finite() else None
    if not isinstance(value, str):
        return None

    # Handle currency symbols, currency codes, and thousands separators
    # Examples: "$123.45", "USD 123.45", "1,234.56", "Rp 1.500.000"
    amount_str = RUPIAH_PREFIX.sub("", value.replace("$", ""))
    for code in CURRENCY_CODES:
        amount_str = amount_str.replace(code, "")
    amount_str = amount_str.strip()
    if DOT_GROUPED_AMOUNT.match(amount_str):
        # Rupiah style: dots group thousands, a comma marks decimals
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")
    if not amount_str:
        return None
    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    description: str | None = None
    name: str | None = None

    @field_validator("description", "name", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> str | None:
        return coerce_text(value)

    @property
    def label(self) -> str | None:
        return self.description or self.name


class BankDetails(BaseModel):
    """Transfer destination printed on the document"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    account_number: str | None = None
    bank_name: str | None = None
    account_name: str | None = None
    swift_code: str | None = None

    @field_validator("account_number", mode="before")
    @classmethod
    def account_number_text(cls, value: Any) -> str | None:
        # Models often return account numbers as JSON numbers
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        return coerce_text(value)

    @field_validator("bank_name", "account_name", "swift_code", mode="before")
    @classmethod
    def text_fields(cls, value: Any) -> str | None:
        return coerce_text(value)


class ExtractedInvoiceData(BaseModel):
    """
    Structured fields extracted from one uploaded invoice or receipt.

    Produced once per analysis call and consumed once by the reconciliation
    orchestrator; instances are immutable.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    amount: Decimal | None = None
    date: dt.date | None = None
    due_date: dt.date | None = None

    beneficiary: str | None = None
    beneficiary_type: Literal["person", "company"] | None = None

    venue: str | None = None
    address: str | None = None

    description: str | None = None
    purpose: str | None = None
    summary: str | None = None
    items: list[LineItem] = Field(default_factory=list)

    remarks: str | None = None
    bank_details: BankDetails | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_number(cls, value: Any) -> Decimal | None:
        return coerce_amount(value)

    @field_validator("date", "due_date", mode="before")
    @classmethod
    def calendar_dates(cls, value: Any) -> dt.date | None:
        return coerce_date(value)

    @field_validator(
        "beneficiary", "venue", "address", "description", "purpose", "summary", "remarks",
        mode="before",
    )
    @classmethod
    def text_fields(cls, value: Any) -> str | None:
        return coerce_text(value)

    @field_validator("beneficiary_type", mode="before")
    @classmethod
    def known_beneficiary_type(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        value = value.strip().lower()
        return value if value in ("person", "company") else None

    @field_validator("items", mode="before")
    @classmethod
    def line_items(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        items = []
        for item in value:
            if isinstance(item, str):
                items.append({"description": item})
            elif isinstance(item, (dict, LineItem)):
                items.append(item)
        return items

    @field_validator("bank_details", mode="before")
    @classmethod
    def bank_details_object(cls, value: Any):
        if isinstance(value, (dict, BankDetails)):
            return value
        return None

    @classmethod
    def from_payload(cls, payload: Any) -> "ExtractedInvoiceData":
        """Build from the raw analysis JSON; anything but an object yields an empty payload"""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)
