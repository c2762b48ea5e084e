from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus


class CattleReportRequest(BaseModel):
    status: LifecycleStatus | None = None
    verification_status: VerificationStatus | None = None
    breed: str | None = None
    format: Literal["pdf", "json"] = "pdf"


class VerificationReportRequest(BaseModel):
    verification_status: VerificationStatus | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    format: Literal["pdf", "json"] = "pdf"


class ReportResponse(BaseModel):
    report_id: str
    title: str
    generated_at: str
    format: str
    content: str | None = None  # base64 for PDF
    data: dict[str, Any] | None = None  # structured data when format=json
    file_name: str | None = None
