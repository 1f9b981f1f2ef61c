"""
Reconciliation of extracted invoice data into a draft financial record.

One pass takes one extraction and the user's current draft and fills in what
the user has not set yet: amount and payment terms, purpose, beneficiary,
project, bank account, and appended remarks.

Every step is isolated. A failing step leaves its field unset, adds a
notice for the caller and lets the remaining steps run; nothing is rolled
back and nothing aborts the pass.
"""

from datetime import date
from typing import Callable, Literal, Optional, Sequence

from loguru import logger
from pydantic import BaseModel

from ..models.directory import UNKNOWN_BENEFICIARY_ID, Beneficiary, ProjectCandidate
from ..models.draft import DraftFinancialRecord, PaymentTerm
from ..models.invoice import ExtractedInvoiceData
from .bank_accounts import BankAccountOutcome, BankAccountReconciler
from .beneficiaries import BeneficiaryResolver
from .project_matching import ProjectMatcher, create_project_matcher
from .storage import BankAccountStoreBase

REMARKS_HEADING = "--- Remarks from document ---"


class ReconciliationNotice(BaseModel):
    """Caller-visible message produced during a pass"""
    level: Literal["info", "warning", "error"]
    step: str
    message: str


class ReconciliationResult(BaseModel):
    draft: DraftFinancialRecord
    notices: list[ReconciliationNotice] = []
    matched_project: Optional[ProjectCandidate] = None
    resolved_beneficiary: Optional[Beneficiary] = None
    bank_account: Optional[BankAccountOutcome] = None


def extract_purpose(extracted: ExtractedInvoiceData) -> Optional[str]:
    """First non-empty of: joined line items, description, purpose, summary"""
    labels = [item.label for item in extracted.items if item.label]
    if labels:
        return ", ".join(labels)
    return extracted.description or extracted.purpose or extracted.summary


def append_remarks(existing: str, remarks: str) -> str:
    block = f"{REMARKS_HEADING}\n{remarks}"
    if not existing.strip():
        return block
    return f"{existing.rstrip()}\n\n{block}"


class _Pass:
    """State of a single reconciliation pass"""

    def __init__(self, draft: DraftFinancialRecord):
        self.draft = draft
        self.notices: list[ReconciliationNotice] = []
        self.matched_project: Optional[ProjectCandidate] = None
        self.resolved_beneficiary: Optional[Beneficiary] = None
        self.bank_account: Optional[BankAccountOutcome] = None

    def notify(self, level: str, step: str, message: str) -> None:
        self.notices.append(ReconciliationNotice(level=level, step=step, message=message))

    def result(self) -> ReconciliationResult:
        return ReconciliationResult(
            draft=self.draft,
            notices=self.notices,
            matched_project=self.matched_project,
            resolved_beneficiary=self.resolved_beneficiary,
            bank_account=self.bank_account,
        )


class ReconciliationOrchestrator:
    """
    Merges one extraction into a draft without clobbering user input.

    Steps, in order (each only fills fields the user left unset):
    1. amount and payment terms
    2. purpose
    3. beneficiary (resolved against the directory)
    4. project (best-scoring candidate)
    5. bank account (reused, created or staged)
    6. remarks (always appended under a heading, never overwritten)

    The bank-account store is the only side-effecting dependency. The caller
    serializes passes for the same draft.
    """

    def __init__(
        self,
        store: BankAccountStoreBase,
        matcher: ProjectMatcher = None,
        resolver: BeneficiaryResolver = None,
        today: Callable[[], date] = date.today,
    ):
        self.matcher = matcher or create_project_matcher()
        self.resolver = resolver or BeneficiaryResolver()
        self.bank_accounts = BankAccountReconciler(store)
        self.today = today

    def apply(
        self,
        extracted: ExtractedInvoiceData,
        draft: DraftFinancialRecord,
        known_beneficiaries: Sequence[Beneficiary] = (),
        known_projects: Sequence[ProjectCandidate] = (),
    ) -> ReconciliationResult:
        """
        Run one reconciliation pass.

        Args:
            extracted: Fields read off the uploaded document
            draft: Current draft; not modified (a copy is updated and returned)
            known_beneficiaries: Directory of people and companies
            known_projects: In-flight projects to match against

        Returns:
            ReconciliationResult with the updated draft and any notices
        """
        state = _Pass(draft.model_copy(deep=True))

        steps = [
            ("amount", lambda: self._apply_amount(state, extracted)),
            ("purpose", lambda: self._apply_purpose(state, extracted)),
            ("beneficiary", lambda: self._apply_beneficiary(state, extracted, known_beneficiaries)),
            ("project", lambda: self._apply_project(state, extracted, known_projects)),
            ("bank_account", lambda: self._apply_bank_account(state, extracted, known_beneficiaries)),
            ("remarks", lambda: self._apply_remarks(state, extracted)),
        ]
        for name, step in steps:
            try:
                step()
            except Exception as e:
                logger.exception("Reconciliation step failed", step=name)
                state.notify("error", name, f"Could not apply {name.replace('_', ' ')}: {e}")

        logger.info(
            "Reconciliation pass complete",
            project_id=state.draft.project_id,
            bank_account_id=state.draft.bank_account_id,
            notices=len(state.notices)
        )
        return state.result()

    def _apply_amount(self, state: _Pass, extracted: ExtractedInvoiceData) -> None:
        amount = extracted.amount
        if amount is None or amount <= 0 or state.draft.has_amount:
            return

        draft = state.draft
        draft.amount = amount

        if len(draft.payment_terms) == 1:
            term = draft.payment_terms[0]
            term.amount = amount
            if extracted.date is not None:
                term.request_date = extracted.date
            release = extracted.due_date or extracted.date
            if release is not None:
                term.release_date = release
        else:
            request_date = extracted.date or self.today()
            draft.payment_terms = [
                PaymentTerm(
                    amount=amount,
                    request_date=request_date,
                    release_date=extracted.due_date or request_date,
                    status="Pending",
                )
            ]

    def _apply_purpose(self, state: _Pass, extracted: ExtractedInvoiceData) -> None:
        purpose = extract_purpose(extracted)
        if purpose and not state.draft.purpose.strip():
            state.draft.purpose = purpose

    def _apply_beneficiary(
        self, state: _Pass, extracted: ExtractedInvoiceData, known: Sequence[Beneficiary]
    ) -> None:
        if not extracted.beneficiary or state.draft.has_beneficiary:
            return

        resolved = self.resolver.resolve(extracted.beneficiary, known, extracted.beneficiary_type)
        state.resolved_beneficiary = resolved
        state.draft.beneficiary_text = resolved.name
        state.draft.beneficiary_ref = resolved

        if not resolved.is_persisted:
            state.notify("info", "beneficiary", f"Detected new beneficiary: {resolved.name} ({resolved.type})")

    def _apply_project(
        self, state: _Pass, extracted: ExtractedInvoiceData, projects: Sequence[ProjectCandidate]
    ) -> None:
        if state.draft.project_id:
            return

        match = self.matcher.best_match(extracted, projects)
        if match is not None:
            state.matched_project = match
            state.draft.project_id = match.id

    def _current_beneficiary(self, state: _Pass, known: Sequence[Beneficiary]) -> Optional[Beneficiary]:
        if state.resolved_beneficiary is not None:
            return state.resolved_beneficiary
        if state.draft.beneficiary_ref is not None:
            return state.draft.beneficiary_ref

        text = state.draft.beneficiary_text.strip()
        if not text:
            return None
        # Free text typed by the user may still name a directory record
        found = self.resolver.find(text, known)
        if found is not None:
            return found
        return Beneficiary(id=UNKNOWN_BENEFICIARY_ID, name=text)

    def _apply_bank_account(
        self, state: _Pass, extracted: ExtractedInvoiceData, known: Sequence[Beneficiary]
    ) -> None:
        details = extracted.bank_details
        if details is None or not details.account_number or state.draft.bank_account_id:
            return

        outcome = self.bank_accounts.reconcile(self._current_beneficiary(state, known), details)
        state.bank_account = outcome

        if outcome.action == "failed":
            state.notify("warning", "bank_account", f"Bank details were not saved: {outcome.error}")
            return
        if outcome.record is not None:
            state.draft.bank_account_id = outcome.record.id
            state.draft.staged_bank_account = outcome.record
        if outcome.action == "created":
            state.notify("info", "bank_account", f"Added bank account {outcome.record.account_number}")

    def _apply_remarks(self, state: _Pass, extracted: ExtractedInvoiceData) -> None:
        if extracted.remarks:
            state.draft.remarks = append_remarks(state.draft.remarks, extracted.remarks)


def create_orchestrator(store: BankAccountStoreBase = None, **matcher_overrides) -> ReconciliationOrchestrator:
    """Build an orchestrator wired to the configured store and scoring settings"""
    if store is None:
        from .storage import get_bank_account_store
        store = get_bank_account_store()
    return ReconciliationOrchestrator(store=store, matcher=create_project_matcher(**matcher_overrides))
