from __future__ import annotations

import uuid
from datetime import datetime, timezone

from reportlab.lib.pagesizes import A4, landscape

from src.application.authorization import Actor, ensure_role
from src.application.errors import ValidationError
from src.application.interfaces.repositories.cattle import CattleFilter
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle import cattle_statistics
from src.application.use_cases.cattle.list_cattle import build_filter
from src.domain.models.cattle import Cattle
from src.domain.value_objects.cattle_status import VerificationStatus
from src.domain.value_objects.role import Role
from src.infrastructure.reports.pdf_generator import PDFGenerator
from src.interfaces.http.schemas.reports import (
    CattleReportRequest,
    ReportResponse,
    VerificationReportRequest,
)
from src.utils.datetime_tz import ensure_utc

REPORT_ROLES = {Role.REGIONAL_ADMIN, Role.M_ADMIN, Role.SUPER_ADMIN}
PAGE_SIZE = 100

CATTLE_COLUMNS = [
    ("Cattle ID", "cattle_id"),
    ("Owner", "owner_name"),
    ("Breed", "breed"),
    ("Tag No", "tag_no"),
    ("Age", "age"),
    ("District", "district"),
    ("State", "state"),
    ("Status", "status"),
    ("Verification", "verification_status"),
    ("Registered", "submitted_at"),
    ("Verified", "verified_at"),
]

VERIFICATION_COLUMNS = [
    ("Cattle ID", "cattle_id"),
    ("Owner", "owner_name"),
    ("Breed", "breed"),
    ("District", "district"),
    ("Status", "verification_status"),
    ("Submitted", "submitted_at"),
    ("Verified", "verified_at"),
    ("Turnaround (h)", "turnaround_hours"),
    ("Overdue", "is_overdue"),
]


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def turnaround_hours(cattle: Cattle) -> float | None:
    if cattle.verified_at is None:
        return None
    return round((cattle.verified_at - cattle.submitted_at).total_seconds() / 3600, 1)


def verification_overdue(cattle: Cattle, now: datetime) -> bool:
    """Decided registrations are late when decided past the deadline; open ones per the clock."""
    if cattle.verified_at is not None and cattle.turnaround_deadline is not None:
        return cattle.verified_at > cattle.turnaround_deadline
    return cattle.is_overdue(now)


class ReportService:
    def __init__(self, pdf_generator: PDFGenerator):
        self.pdf_generator = pdf_generator

    async def _load_cattle(self, filters: CattleFilter, uow: UnitOfWork) -> list[Cattle]:
        cattle: list[Cattle] = []
        offset = 0
        while True:
            page = await uow.cattle.list(
                filters, limit=PAGE_SIZE, offset=offset, order_by="submitted_at", descending=False
            )
            cattle.extend(page)
            if len(page) < PAGE_SIZE:
                return cattle
            offset += PAGE_SIZE

    async def _owner_names(self, cattle: list[Cattle], uow: UnitOfWork) -> dict:
        names = {}
        for owner_id in {c.owner_id for c in cattle}:
            account = await uow.accounts.get(owner_id)
            names[owner_id] = account.full_name if account else "N/A"
        return names

    @staticmethod
    def _row(cattle: Cattle, owner_name: str) -> dict:
        return {
            "cattle_id": cattle.cattle_id,
            "owner_name": owner_name,
            "breed": cattle.breed,
            "tag_no": cattle.tag_no or "N/A",
            "age": cattle.age,
            "district": cattle.location.district,
            "state": cattle.location.state,
            "status": cattle.status.value,
            "verification_status": cattle.verification_status.value,
            "submitted_at": cattle.submitted_at,
            "verified_at": cattle.verified_at,
        }

    @staticmethod
    def _verification_row(cattle: Cattle, owner_name: str, now: datetime) -> dict:
        return {
            "cattle_id": cattle.cattle_id,
            "owner_name": owner_name,
            "breed": cattle.breed,
            "district": cattle.location.district,
            "verification_status": cattle.verification_status.value,
            "submitted_at": cattle.submitted_at,
            "verified_at": cattle.verified_at,
            "turnaround_hours": turnaround_hours(cattle),
            "is_overdue": verification_overdue(cattle, now),
        }

    def _region_label(self, actor: Actor) -> str:
        return actor.region if actor.role.is_region_scoped else "All"

    async def generate_cattle_report(
        self, actor: Actor, request: CattleReportRequest, uow: UnitOfWork
    ) -> ReportResponse:
        """Cattle register for the admin's region (all regions for a super admin)."""
        ensure_role(actor, REPORT_ROLES, "Role not allowed to generate reports")
        report_id = str(uuid.uuid4())
        region_label = self._region_label(actor)

        filters = build_filter(
            actor,
            status=request.status,
            verification_status=request.verification_status,
            breed=request.breed,
        )
        cattle = await self._load_cattle(filters, uow)
        owner_names = await self._owner_names(cattle, uow)
        rows = [self._row(c, owner_names[c.owner_id]) for c in cattle]
        stats = await cattle_statistics.execute(uow, actor)

        summary = {
            "region": region_label,
            "total_cattle": stats.total,
            "in_report": len(rows),
            "overdue_reviews": stats.overdue,
        }
        data = {
            "summary": summary,
            "by_status": stats.by_status,
            "by_verification_status": stats.by_verification_status,
            "by_district": {
                district: {
                    "total": counts.total,
                    "active": counts.active,
                    "pending_verification": counts.pending_verification,
                }
                for district, counts in stats.by_district.items()
            },
            "cattle": [
                {
                    **row,
                    "submitted_at": row["submitted_at"].isoformat(),
                    "verified_at": _isoformat(row["verified_at"]),
                }
                for row in rows
            ],
        }
        file_stem = f"cattle_report_{region_label}_{datetime.now(timezone.utc):%Y%m%d%H%M%S}"
        generated_at = datetime.now(timezone.utc).isoformat()

        if request.format == "json":
            return ReportResponse(
                report_id=report_id,
                title="Cattle Report",
                generated_at=generated_at,
                format="json",
                data=data,
                file_name=f"{file_stem}.json",
            )

        elements = []
        elements.extend(
            self.pdf_generator.create_header("Cattle Report", f"Region: {region_label}")
        )
        elements.extend(self.pdf_generator.create_kpi_section("Summary", summary))
        elements.extend(
            self.pdf_generator.create_bar_chart_section(
                "Verification Status", stats.by_verification_status
            )
        )
        elements.extend(self.pdf_generator.create_kpi_section("Lifecycle Status", stats.by_status))
        table_width = landscape(A4)[0] - 72
        elements.extend(
            self.pdf_generator.create_table_section("Cattle", rows, CATTLE_COLUMNS, table_width)
        )
        return ReportResponse(
            report_id=report_id,
            title="Cattle Report",
            generated_at=generated_at,
            format="pdf",
            content=self.pdf_generator.generate_pdf(elements, wide=True),
            file_name=f"{file_stem}.pdf",
        )

    async def generate_verification_report(
        self, actor: Actor, request: VerificationReportRequest, uow: UnitOfWork
    ) -> ReportResponse:
        """Registration turnaround per cattle, filtered on the submission date."""
        ensure_role(actor, REPORT_ROLES, "Role not allowed to generate reports")
        date_from = ensure_utc(request.date_from)
        date_to = ensure_utc(request.date_to)
        if date_from and date_to and date_from > date_to:
            raise ValidationError(
                "Invalid date range", details={"from": "must not be after 'to'"}
            )
        report_id = str(uuid.uuid4())
        region_label = self._region_label(actor)
        now = datetime.now(timezone.utc)

        filters = build_filter(actor, verification_status=request.verification_status)
        filters.submitted_from = date_from
        filters.submitted_to = date_to
        cattle = await self._load_cattle(filters, uow)
        owner_names = await self._owner_names(cattle, uow)
        rows = [self._verification_row(c, owner_names[c.owner_id], now) for c in cattle]

        turnarounds = [
            row["turnaround_hours"] for row in rows if row["turnaround_hours"] is not None
        ]
        summary = {
            "region": region_label,
            "registrations": len(rows),
            "verified": len(turnarounds),
            "overdue": sum(1 for row in rows if row["is_overdue"]),
            "average_turnaround_hours": (
                round(sum(turnarounds) / len(turnarounds), 1) if turnarounds else None
            ),
        }
        by_verification_status = {status.value: 0 for status in VerificationStatus}
        for row in rows:
            by_verification_status[row["verification_status"]] += 1

        file_stem = (
            f"verification_report_{region_label}_{datetime.now(timezone.utc):%Y%m%d%H%M%S}"
        )
        generated_at = now.isoformat()

        if request.format == "json":
            data = {
                "summary": summary,
                "filters": {
                    "from": _isoformat(date_from),
                    "to": _isoformat(date_to),
                    "verification_status": (
                        request.verification_status.value if request.verification_status else None
                    ),
                },
                "by_verification_status": by_verification_status,
                "cattle": [
                    {
                        **row,
                        "submitted_at": row["submitted_at"].isoformat(),
                        "verified_at": _isoformat(row["verified_at"]),
                    }
                    for row in rows
                ],
            }
            return ReportResponse(
                report_id=report_id,
                title="Verification Report",
                generated_at=generated_at,
                format="json",
                data=data,
                file_name=f"{file_stem}.json",
            )

        table_rows = [
            {
                **row,
                "turnaround_hours": (
                    row["turnaround_hours"] if row["turnaround_hours"] is not None else "N/A"
                ),
                "is_overdue": "Yes" if row["is_overdue"] else "No",
            }
            for row in rows
        ]
        elements = []
        elements.extend(
            self.pdf_generator.create_header("Verification Report", f"Region: {region_label}")
        )
        elements.extend(
            self.pdf_generator.create_kpi_section(
                "Summary",
                {
                    **summary,
                    "average_turnaround_hours": summary["average_turnaround_hours"] or "N/A",
                },
            )
        )
        elements.extend(
            self.pdf_generator.create_bar_chart_section(
                "Verification Status", by_verification_status
            )
        )
        table_width = landscape(A4)[0] - 72
        elements.extend(
            self.pdf_generator.create_table_section(
                "Registrations", table_rows, VERIFICATION_COLUMNS, table_width
            )
        )
        return ReportResponse(
            report_id=report_id,
            title="Verification Report",
            generated_at=generated_at,
            format="pdf",
            content=self.pdf_generator.generate_pdf(elements, wide=True),
            file_name=f"{file_stem}.pdf",
        )
