from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from src.application.authorization import Actor
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.infrastructure.reports.pdf_generator import PDFGenerator
from src.infrastructure.reports.report_service import ReportService
from src.interfaces.http.deps import get_actor, get_uow
from src.interfaces.http.schemas.reports import (
    CattleReportRequest,
    ReportResponse,
    VerificationReportRequest,
)

router = APIRouter(prefix="/reports", tags=["reports"])

pdf_generator = PDFGenerator()
report_service = ReportService(pdf_generator)


@router.get("/cattle", response_model=ReportResponse)
async def generate_cattle_report(
    status: LifecycleStatus | None = Query(None),
    verification_status: VerificationStatus | None = Query(None),
    breed: str | None = Query(None),
    format: str = Query("pdf", pattern="^(pdf|json)$"),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> ReportResponse:
    """Cattle register as PDF (base64) or JSON, scoped to the caller's region"""
    payload = CattleReportRequest(
        status=status, verification_status=verification_status, breed=breed, format=format
    )
    return await report_service.generate_cattle_report(actor, payload, uow)


@router.get("/verification", response_model=ReportResponse)
async def generate_verification_report(
    verification_status: VerificationStatus | None = Query(None),
    date_from: datetime | None = Query(None, alias="from"),
    date_to: datetime | None = Query(None, alias="to"),
    format: str = Query("pdf", pattern="^(pdf|json)$"),
    actor: Actor = Depends(get_actor),
    uow=Depends(get_uow),
) -> ReportResponse:
    """Verification turnaround per registration, filtered on submission date"""
    payload = VerificationReportRequest(
        verification_status=verification_status,
        date_from=date_from,
        date_to=date_to,
        format=format,
    )
    return await report_service.generate_verification_report(actor, payload, uow)
