from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError
from src.application.interfaces.repositories.holdings import HoldingsRepository
from src.infrastructure.db.orm.holding import HoldingORM


class HoldingsSQLAlchemyRepository(HoldingsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, account_id: UUID, cattle_ref: UUID) -> None:
        self.session.add(HoldingORM(account_id=account_id, cattle_ref=cattle_ref))
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Cattle already held by this account") from exc

    async def move(self, cattle_ref: UUID, from_account_id: UUID, to_account_id: UUID) -> None:
        stmt = (
            update(HoldingORM)
            .where(HoldingORM.cattle_ref == cattle_ref)
            .where(HoldingORM.account_id == from_account_id)
            .values(account_id=to_account_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Cattle already held by the receiving account") from exc
        if not result.rowcount:
            # Sender's holding row was missing; still record the receiver's
            await self.add(to_account_id, cattle_ref)

    async def remove(self, cattle_ref: UUID) -> None:
        await self.session.execute(
            delete(HoldingORM)
            .where(HoldingORM.cattle_ref == cattle_ref)
            .execution_options(synchronize_session=False)
        )

    async def list_for_account(self, account_id: UUID) -> list[UUID]:
        stmt = (
            select(HoldingORM.cattle_ref)
            .where(HoldingORM.account_id == account_id)
            .order_by(HoldingORM.added_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
