from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError, ValidationError
from src.application.interfaces.repositories.cattle import CattleFilter, CattleRepository
from src.domain.models.cattle import (
    Cattle,
    IdentificationEntry,
    ImageFile,
    Location,
    empty_image_set,
)
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.domain.value_objects.image_category import ImageCategory
from src.infrastructure.db.orm.cattle import CattleORM
from src.utils.datetime_tz import ensure_utc

SORTABLE_COLUMNS = {
    "created_at": CattleORM.created_at,
    "submitted_at": CattleORM.submitted_at,
    "forwarded_at": CattleORM.forwarded_at,
    "breed": CattleORM.breed,
    "age": CattleORM.age,
    "cattle_id": CattleORM.cattle_id,
}


def _images_to_json(images: dict[ImageCategory, list[ImageFile]]) -> dict[str, list[dict]]:
    return {category.value: [img.to_dict() for img in files] for category, files in images.items()}


def _images_from_json(raw: dict | None) -> dict[ImageCategory, list[ImageFile]]:
    images = empty_image_set()
    for key, files in (raw or {}).items():
        images[ImageCategory(key)] = [ImageFile.from_dict(item) for item in files or []]
    return images


class CattleSQLAlchemyRepository(CattleRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: CattleORM) -> Cattle:
        return Cattle(
            id=orm.id,
            cattle_id=orm.cattle_id,
            owner_id=orm.owner_id,
            breed=orm.breed,
            age=orm.age,
            location=Location(state=orm.state, district=orm.district, pin_code=orm.pin_code),
            tag_no=orm.tag_no,
            temporary_id=orm.temporary_id,
            color=orm.color,
            type=orm.type,
            medical_history=orm.medical_history or "",
            images=_images_from_json(orm.images),
            status=orm.status,
            verification_status=orm.verification_status,
            submitted_at=ensure_utc(orm.submitted_at),
            turnaround_deadline=ensure_utc(orm.turnaround_deadline),
            overdue_notified_at=ensure_utc(orm.overdue_notified_at),
            regional_reviewed_by=orm.regional_reviewed_by,
            regional_reviewed_at=ensure_utc(orm.regional_reviewed_at),
            forwarded_at=ensure_utc(orm.forwarded_at),
            regional_denial_reason=orm.regional_denial_reason,
            verified_by=orm.verified_by,
            verified_at=ensure_utc(orm.verified_at),
            rejection_reason=orm.rejection_reason,
            archived_at=ensure_utc(orm.archived_at),
            archived_by=orm.archived_by,
            transfer_history=[UUID(str(tid)) for tid in orm.transfer_history or []],
            identification_history=[
                IdentificationEntry.from_dict(entry) for entry in orm.identification_history or []
            ],
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
            version=orm.version,
        )

    def _values(self, cattle: Cattle) -> dict[str, Any]:
        return {
            "cattle_id": cattle.cattle_id,
            "owner_id": cattle.owner_id,
            "breed": cattle.breed,
            "age": cattle.age,
            "state": cattle.location.state,
            "district": cattle.location.district,
            "pin_code": cattle.location.pin_code,
            "tag_no": cattle.tag_no,
            "temporary_id": cattle.temporary_id,
            "color": cattle.color,
            "type": cattle.type,
            "medical_history": cattle.medical_history,
            "images": _images_to_json(cattle.images),
            "status": cattle.status,
            "verification_status": cattle.verification_status,
            "submitted_at": cattle.submitted_at,
            "turnaround_deadline": cattle.turnaround_deadline,
            "overdue_notified_at": cattle.overdue_notified_at,
            "regional_reviewed_by": cattle.regional_reviewed_by,
            "regional_reviewed_at": cattle.regional_reviewed_at,
            "forwarded_at": cattle.forwarded_at,
            "regional_denial_reason": cattle.regional_denial_reason,
            "verified_by": cattle.verified_by,
            "verified_at": cattle.verified_at,
            "rejection_reason": cattle.rejection_reason,
            "archived_at": cattle.archived_at,
            "archived_by": cattle.archived_by,
            "transfer_history": [str(tid) for tid in cattle.transfer_history],
            "identification_history": [e.to_dict() for e in cattle.identification_history],
            "created_at": cattle.created_at,
            "updated_at": cattle.updated_at,
            "version": cattle.version,
        }

    def _apply_filters(self, stmt, filters: CattleFilter):
        if filters.owner_id is not None:
            stmt = stmt.where(CattleORM.owner_id == filters.owner_id)
        if filters.region is not None:
            stmt = stmt.where(CattleORM.state == filters.region)
        if filters.status is not None:
            stmt = stmt.where(CattleORM.status == filters.status)
        if filters.verification_status is not None:
            stmt = stmt.where(CattleORM.verification_status == filters.verification_status)
        if filters.breed:
            stmt = stmt.where(func.lower(CattleORM.breed) == filters.breed.lower())
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(CattleORM.cattle_id).like(pattern),
                    func.lower(CattleORM.tag_no).like(pattern),
                    func.lower(CattleORM.breed).like(pattern),
                )
            )
        if filters.submitted_from is not None:
            stmt = stmt.where(CattleORM.submitted_at >= filters.submitted_from)
        if filters.submitted_to is not None:
            stmt = stmt.where(CattleORM.submitted_at <= filters.submitted_to)
        return stmt

    async def add(self, cattle: Cattle) -> Cattle:
        orm = CattleORM(id=cattle.id, **self._values(cattle))
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Cattle id already exists") from exc
        return cattle

    async def get(self, cattle_id: UUID) -> Cattle | None:
        stmt = select(CattleORM).where(CattleORM.id == cattle_id)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def get_by_code(self, cattle_code: str) -> Cattle | None:
        stmt = select(CattleORM).where(CattleORM.cattle_id == cattle_code)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list(
        self,
        filters: CattleFilter,
        *,
        limit: int = 20,
        offset: int = 0,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Cattle]:
        column = SORTABLE_COLUMNS.get(order_by)
        if column is None:
            raise ValidationError(
                "Unsupported sort field",
                details={"order_by": f"must be one of {sorted(SORTABLE_COLUMNS)}"},
            )
        stmt = self._apply_filters(select(CattleORM), filters)
        stmt = stmt.order_by(column.desc() if descending else column.asc(), CattleORM.id)
        stmt = stmt.offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def count(self, filters: CattleFilter) -> int:
        stmt = self._apply_filters(select(func.count(CattleORM.id)), filters)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_by_status(self, filters: CattleFilter) -> dict[str, dict]:
        stmt = self._apply_filters(
            select(CattleORM.status, CattleORM.verification_status, func.count(CattleORM.id)),
            filters,
        ).group_by(CattleORM.status, CattleORM.verification_status)
        result = await self.session.execute(stmt)
        by_status: dict[str, int] = {}
        by_verification: dict[str, int] = {}
        for status, verification_status, total in result.all():
            by_status[status.value] = by_status.get(status.value, 0) + total
            by_verification[verification_status.value] = (
                by_verification.get(verification_status.value, 0) + total
            )

        total = func.count(CattleORM.id)
        district_stmt = self._apply_filters(
            select(
                CattleORM.district,
                total,
                func.sum(case((CattleORM.status == LifecycleStatus.ACTIVE, 1), else_=0)),
                func.sum(
                    case(
                        (
                            CattleORM.verification_status
                            == VerificationStatus.PENDING_REGIONAL_REVIEW,
                            1,
                        ),
                        else_=0,
                    )
                ),
            ),
            filters,
        ).group_by(CattleORM.district).order_by(total.desc(), CattleORM.district)
        by_district = {
            district: {
                "total": count,
                "active": int(active or 0),
                "pending_verification": int(pending or 0),
            }
            for district, count, active, pending in (
                await self.session.execute(district_stmt)
            ).all()
        }
        return {
            "status": by_status,
            "verification_status": by_verification,
            "district": by_district,
        }

    def _overdue_stmt(self, stmt, now: datetime, region: str | None):
        stmt = (
            stmt.where(CattleORM.verification_status == VerificationStatus.PENDING_REGIONAL_REVIEW)
            .where(CattleORM.turnaround_deadline.is_not(None))
            .where(CattleORM.turnaround_deadline < now)
        )
        if region is not None:
            stmt = stmt.where(CattleORM.state == region)
        return stmt

    async def list_overdue(
        self,
        now: datetime,
        *,
        region: str | None = None,
        limit: int | None = None,
        unnotified_only: bool = False,
    ) -> list[Cattle]:
        stmt = self._overdue_stmt(select(CattleORM), now, region).order_by(
            CattleORM.turnaround_deadline
        )
        if unnotified_only:
            stmt = stmt.where(CattleORM.overdue_notified_at.is_(None))
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def count_overdue(self, now: datetime, *, region: str | None = None) -> int:
        stmt = self._overdue_stmt(select(func.count(CattleORM.id)), now, region)
        return (await self.session.execute(stmt)).scalar() or 0

    async def mark_overdue_notified(self, cattle_ids: list[UUID], now: datetime) -> list[UUID]:
        if not cattle_ids:
            return []
        stmt = (
            update(CattleORM)
            .where(CattleORM.id.in_(cattle_ids))
            .where(CattleORM.overdue_notified_at.is_(None))
            .values(overdue_notified_at=now)
            .returning(CattleORM.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def save(self, cattle: Cattle, expected_version: int) -> Cattle | None:
        stmt = (
            update(CattleORM)
            .where(CattleORM.id == cattle.id)
            .where(CattleORM.version == expected_version)
            .values(**self._values(cattle))
            .returning(CattleORM.id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Failed to update cattle due to constraint violation") from exc
        if result.scalar_one_or_none() is None:
            return None
        return cattle

    async def delete(self, cattle_id: UUID) -> bool:
        stmt = (
            delete(CattleORM)
            .where(CattleORM.id == cattle_id)
            .returning(CattleORM.id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Cattle is still referenced and cannot be deleted") from exc
        return result.scalar_one_or_none() is not None
