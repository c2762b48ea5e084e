from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError
from src.application.interfaces.repositories.transfer_requests import (
    Direction,
    TransferRequestsRepository,
)
from src.domain.models.transfer_request import TransferRequest, TransferStatus
from src.infrastructure.db.orm.transfer_request import TransferRequestORM
from src.utils.datetime_tz import ensure_utc

PENDING_UNIQUE_INDEX = "ux_transfer_requests_pending_cattle"


def _violates_pending_unique(exc: IntegrityError) -> bool:
    # PostgreSQL names the index; SQLite names the indexed column.
    message = str(exc.orig)
    return PENDING_UNIQUE_INDEX in message or "transfer_requests.cattle_ref" in message


class TransferRequestsSQLAlchemyRepository(TransferRequestsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: TransferRequestORM) -> TransferRequest:
        return TransferRequest(
            id=orm.id,
            cattle_ref=orm.cattle_ref,
            from_owner_id=orm.from_owner_id,
            to_owner_id=orm.to_owner_id,
            transfer_type=orm.transfer_type,
            status=orm.status,
            price=orm.price,
            notes=orm.notes,
            transfer_date=ensure_utc(orm.transfer_date),
            response_message=orm.response_message,
            responded_at=ensure_utc(orm.responded_at),
            cancelled_by=orm.cancelled_by,
            cancelled_at=ensure_utc(orm.cancelled_at),
            cancellation_reason=orm.cancellation_reason,
            completed_at=ensure_utc(orm.completed_at),
            expires_at=ensure_utc(orm.expires_at),
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
            version=orm.version,
        )

    def _values(self, transfer: TransferRequest) -> dict[str, Any]:
        return {
            "cattle_ref": transfer.cattle_ref,
            "from_owner_id": transfer.from_owner_id,
            "to_owner_id": transfer.to_owner_id,
            "transfer_type": transfer.transfer_type,
            "status": transfer.status,
            "price": transfer.price,
            "notes": transfer.notes,
            "transfer_date": transfer.transfer_date,
            "response_message": transfer.response_message,
            "responded_at": transfer.responded_at,
            "cancelled_by": transfer.cancelled_by,
            "cancelled_at": transfer.cancelled_at,
            "cancellation_reason": transfer.cancellation_reason,
            "completed_at": transfer.completed_at,
            "expires_at": transfer.expires_at,
            "created_at": transfer.created_at,
            "updated_at": transfer.updated_at,
            "version": transfer.version,
        }

    async def add(self, transfer: TransferRequest) -> TransferRequest:
        self.session.add(TransferRequestORM(id=transfer.id, **self._values(transfer)))
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if _violates_pending_unique(exc):
                raise ConflictError(
                    "A pending transfer request already exists for this cattle"
                ) from exc
            raise ConflictError("Transfer request violates a database constraint") from exc
        return transfer

    async def get(self, transfer_id: UUID) -> TransferRequest | None:
        stmt = select(TransferRequestORM).where(TransferRequestORM.id == transfer_id)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def get_pending_for_cattle(self, cattle_ref: UUID) -> TransferRequest | None:
        stmt = (
            select(TransferRequestORM)
            .where(TransferRequestORM.cattle_ref == cattle_ref)
            .where(TransferRequestORM.status == TransferStatus.PENDING)
        )
        result = await self.session.execute(stmt)
        orm = result.scalars().first()
        return self._to_domain(orm) if orm else None

    async def list_for_account(
        self,
        account_id: UUID,
        *,
        direction: Direction = "all",
        status: TransferStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TransferRequest], int]:
        stmt = select(TransferRequestORM)
        if direction == "sent":
            stmt = stmt.where(TransferRequestORM.from_owner_id == account_id)
        elif direction == "received":
            stmt = stmt.where(TransferRequestORM.to_owner_id == account_id)
        else:
            stmt = stmt.where(
                or_(
                    TransferRequestORM.from_owner_id == account_id,
                    TransferRequestORM.to_owner_id == account_id,
                )
            )
        if status is not None:
            stmt = stmt.where(TransferRequestORM.status == status)

        total_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.session.execute(total_stmt)).scalar() or 0

        stmt = stmt.order_by(TransferRequestORM.created_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()], total

    async def list_accepted_for_cattle(self, cattle_ref: UUID) -> list[TransferRequest]:
        stmt = (
            select(TransferRequestORM)
            .where(TransferRequestORM.cattle_ref == cattle_ref)
            .where(TransferRequestORM.status == TransferStatus.ACCEPTED)
            .order_by(TransferRequestORM.completed_at.asc())
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def list_stale(self, now: datetime) -> list[TransferRequest]:
        stmt = (
            select(TransferRequestORM)
            .where(TransferRequestORM.status == TransferStatus.PENDING)
            .where(TransferRequestORM.expires_at < now)
            .order_by(TransferRequestORM.expires_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def save(
        self, transfer: TransferRequest, expected_version: int
    ) -> TransferRequest | None:
        stmt = (
            update(TransferRequestORM)
            .where(TransferRequestORM.id == transfer.id)
            .where(TransferRequestORM.version == expected_version)
            .values(**self._values(transfer))
            .returning(TransferRequestORM.id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Failed to update transfer due to constraint violation") from exc
        if result.scalar_one_or_none() is None:
            return None
        return transfer
