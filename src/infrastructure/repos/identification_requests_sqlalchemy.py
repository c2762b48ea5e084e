from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import case, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError
from src.application.interfaces.repositories.identification_requests import (
    IdentificationRequestsRepository,
    IdentificationStats,
)
from src.domain.models.cattle import ImageFile
from src.domain.models.identification_request import (
    OPEN_STATUSES,
    IdentificationRequest,
    IdentificationResult,
    IdentificationStatus,
)
from src.infrastructure.db.orm.identification_request import IdentificationRequestORM
from src.utils.datetime_tz import ensure_utc


class IdentificationRequestsSQLAlchemyRepository(IdentificationRequestsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: IdentificationRequestORM) -> IdentificationRequest:
        return IdentificationRequest(
            id=orm.id,
            request_id=orm.request_id,
            user_id=orm.user_id,
            region=orm.region,
            image=ImageFile.from_dict(orm.image),
            status=orm.status,
            priority=orm.priority,
            latitude=orm.latitude,
            longitude=orm.longitude,
            address=orm.address,
            device_info=orm.device_info,
            started_at=ensure_utc(orm.started_at),
            completed_at=ensure_utc(orm.completed_at),
            processed_by=orm.processed_by,
            time_taken_seconds=orm.time_taken_seconds,
            result=IdentificationResult(
                found=orm.result_found,
                cattle_ref=orm.result_cattle_ref,
                cattle_code=orm.result_cattle_code,
                confidence=orm.result_confidence,
                message=orm.result_message,
                identified_at=ensure_utc(orm.result_identified_at),
            ),
            admin_notes=orm.admin_notes,
            expires_at=ensure_utc(orm.expires_at),
            cancelled_by=orm.cancelled_by,
            cancelled_at=ensure_utc(orm.cancelled_at),
            cancellation_reason=orm.cancellation_reason,
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
            version=orm.version,
        )

    def _values(self, request: IdentificationRequest) -> dict[str, Any]:
        return {
            "request_id": request.request_id,
            "user_id": request.user_id,
            "region": request.region,
            "image": request.image.to_dict(),
            "status": request.status,
            "priority": request.priority,
            "latitude": request.latitude,
            "longitude": request.longitude,
            "address": request.address,
            "device_info": request.device_info,
            "started_at": request.started_at,
            "completed_at": request.completed_at,
            "processed_by": request.processed_by,
            "time_taken_seconds": request.time_taken_seconds,
            "result_found": request.result.found,
            "result_cattle_ref": request.result.cattle_ref,
            "result_cattle_code": request.result.cattle_code,
            "result_confidence": request.result.confidence,
            "result_message": request.result.message,
            "result_identified_at": request.result.identified_at,
            "admin_notes": request.admin_notes,
            "expires_at": request.expires_at,
            "cancelled_by": request.cancelled_by,
            "cancelled_at": request.cancelled_at,
            "cancellation_reason": request.cancellation_reason,
            "created_at": request.created_at,
            "updated_at": request.updated_at,
            "version": request.version,
        }

    async def add(self, request: IdentificationRequest) -> IdentificationRequest:
        self.session.add(IdentificationRequestORM(id=request.id, **self._values(request)))
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Identification request id already exists") from exc
        return request

    async def get(self, request_id: UUID) -> IdentificationRequest | None:
        stmt = select(IdentificationRequestORM).where(IdentificationRequestORM.id == request_id)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def _page(self, stmt, limit: int, offset: int) -> tuple[list[IdentificationRequest], int]:
        total_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await self.session.execute(total_stmt)).scalar() or 0
        result = await self.session.execute(stmt.offset(offset).limit(limit))
        return [self._to_domain(orm) for orm in result.scalars().all()], total

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        status: IdentificationStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[IdentificationRequest], int]:
        stmt = (
            select(IdentificationRequestORM)
            .where(IdentificationRequestORM.user_id == user_id)
            .order_by(IdentificationRequestORM.created_at.desc())
        )
        if status is not None:
            stmt = stmt.where(IdentificationRequestORM.status == status)
        return await self._page(stmt, limit, offset)

    async def list_queue(
        self, *, region: str | None = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[IdentificationRequest], int]:
        stmt = (
            select(IdentificationRequestORM)
            .where(IdentificationRequestORM.status.in_(OPEN_STATUSES))
            .order_by(IdentificationRequestORM.created_at.asc())
        )
        if region is not None:
            stmt = stmt.where(IdentificationRequestORM.region == region)
        return await self._page(stmt, limit, offset)

    async def list_stale(self, now: datetime) -> list[IdentificationRequest]:
        stmt = (
            select(IdentificationRequestORM)
            .where(IdentificationRequestORM.status.in_(OPEN_STATUSES))
            .where(IdentificationRequestORM.expires_at < now)
            .order_by(IdentificationRequestORM.expires_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def exists_found_for_cattle(self, cattle_ref: UUID) -> bool:
        stmt = select(
            exists()
            .where(IdentificationRequestORM.result_cattle_ref == cattle_ref)
            .where(IdentificationRequestORM.result_found.is_(True))
        )
        return bool((await self.session.execute(stmt)).scalar())

    async def statistics(
        self, *, region: str | None = None, user_id: UUID | None = None
    ) -> IdentificationStats:
        conditions = []
        if region is not None:
            conditions.append(IdentificationRequestORM.region == region)
        if user_id is not None:
            conditions.append(IdentificationRequestORM.user_id == user_id)

        by_status_stmt = (
            select(IdentificationRequestORM.status, func.count(IdentificationRequestORM.id))
            .where(*conditions)
            .group_by(IdentificationRequestORM.status)
        )
        rows = (await self.session.execute(by_status_stmt)).all()
        by_status = {status.value: 0 for status in IdentificationStatus}
        for status, total in rows:
            by_status[status.value] = total

        completed = IdentificationRequestORM.status == IdentificationStatus.COMPLETED
        outcome_stmt = select(
            func.sum(case((IdentificationRequestORM.result_found.is_(True), 1), else_=0)),
            func.sum(case((IdentificationRequestORM.result_found.is_(False), 1), else_=0)),
            func.avg(IdentificationRequestORM.time_taken_seconds),
        ).where(completed, *conditions)
        found, not_found, avg_time = (await self.session.execute(outcome_stmt)).one()
        return IdentificationStats(
            by_status=by_status,
            found=int(found or 0),
            not_found=int(not_found or 0),
            avg_time_taken_seconds=float(avg_time) if avg_time is not None else None,
        )

    async def save(
        self, request: IdentificationRequest, expected_version: int
    ) -> IdentificationRequest | None:
        stmt = (
            update(IdentificationRequestORM)
            .where(IdentificationRequestORM.id == request.id)
            .where(IdentificationRequestORM.version == expected_version)
            .values(**self._values(request))
            .returning(IdentificationRequestORM.id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError(
                "Failed to update identification request due to constraint violation"
            ) from exc
        if result.scalar_one_or_none() is None:
            return None
        return request
