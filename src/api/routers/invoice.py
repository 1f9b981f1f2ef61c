from typing import Any

from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel, Field

from ...models.directory import Beneficiary, DateInterval, ProjectCandidate
from ...models.draft import DraftFinancialRecord
from ...models.invoice import ExtractedInvoiceData
from ...services.date_labels import parse_date_label
from ...services.project_matching import ProjectMatch, create_project_matcher
from ...services.reconciliation import ReconciliationOrchestrator, ReconciliationResult
from ..deps import get_orchestrator

router = APIRouter(prefix="/invoices", tags=["invoices"])


class ReconcileRequest(BaseModel):
    """Request body for /invoices/reconcile endpoint"""
    # Raw analysis output; wrongly typed fields are dropped, not rejected
    extracted: dict[str, Any] = Field(default_factory=dict)
    draft: DraftFinancialRecord = Field(default_factory=DraftFinancialRecord)
    beneficiaries: list[Beneficiary] = Field(default_factory=list)
    projects: list[ProjectCandidate] = Field(default_factory=list)


class MatchProjectRequest(BaseModel):
    """Request body for /invoices/match-project endpoint"""
    extracted: dict[str, Any] = Field(default_factory=dict)
    projects: list[ProjectCandidate] = Field(default_factory=list)


class DateLabelResponse(BaseModel):
    label: str
    interval: DateInterval | None = None


@router.post("/reconcile", response_model=ReconciliationResult)
async def reconcile(req: ReconcileRequest, orchestrator: ReconciliationOrchestrator = Depends(get_orchestrator)):
    """
    Merge extracted document fields into the caller's draft.

    Used by both the create and the edit expense forms. Fields the user has
    already set are left alone; failures in individual steps come back as
    notices and never fail the request.

    Example request:
    {
        "extracted": {"amount": 450, "beneficiary": "ACME Corp", "date": "2025-12-06",
                      "bank_details": {"account_number": "1234567890", "bank_name": "BCA"}},
        "draft": {"remarks": "Deposit for venue"},
        "beneficiaries": [{"id": "c-1", "name": "ACME Corp", "type": "company"}],
        "projects": [{"id": "p-1", "name": "Bali Retreat 05-071225"}]
    }
    """
    extracted = ExtractedInvoiceData.from_payload(req.extracted)
    logger.info(
        "Reconcile request received",
        has_amount=extracted.amount is not None,
        beneficiary=extracted.beneficiary,
        projects=len(req.projects),
        beneficiaries=len(req.beneficiaries)
    )

    return orchestrator.apply(
        extracted,
        req.draft,
        known_beneficiaries=req.beneficiaries,
        known_projects=req.projects,
    )


@router.post("/match-project", response_model=ProjectMatch)
async def match_project(req: MatchProjectRequest):
    """Score every project against the extraction and return the best match"""
    extracted = ExtractedInvoiceData.from_payload(req.extracted)
    return create_project_matcher().match(extracted, req.projects)


@router.get("/date-label", response_model=DateLabelResponse)
async def date_label(label: str):
    """Parse the date code embedded in a label such as a project name"""
    return DateLabelResponse(label=label, interval=parse_date_label(label))
