import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from .directory import Beneficiary, BankAccountRecord, is_temporary_account_id


class PaymentTerm(BaseModel):
    amount: Decimal = Decimal("0")
    request_date: dt.date | None = None
    release_date: dt.date | None = None
    status: str = "Pending"


class DraftFinancialRecord(BaseModel):
    """
    The expense/invoice form as the user currently sees it.

    Owned by the caller: created when the form opens, filled in by
    reconciliation passes, then saved or discarded by the caller.
    """
    project_id: str | None = None
    beneficiary_text: str = ""
    beneficiary_ref: Beneficiary | None = None
    amount: Decimal | None = None
    payment_terms: list[PaymentTerm] = Field(default_factory=list)
    bank_account_id: str | None = None
    staged_bank_account: BankAccountRecord | None = None
    purpose: str = ""
    remarks: str = ""

    @property
    def has_beneficiary(self) -> bool:
        return bool(self.beneficiary_text.strip()) or self.beneficiary_ref is not None

    @property
    def has_amount(self) -> bool:
        return self.amount is not None and self.amount > 0

    @property
    def persistable_bank_account_id(self) -> str | None:
        """Bank account id safe to store as a foreign key (temporary ids excluded)"""
        if is_temporary_account_id(self.bank_account_id):
            return None
        return self.bank_account_id
