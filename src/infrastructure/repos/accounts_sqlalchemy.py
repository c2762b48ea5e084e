from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import ConflictError
from src.application.interfaces.repositories.accounts import AccountsRepository
from src.domain.models.account import Account
from src.domain.value_objects.role import Role
from src.infrastructure.db.orm.account import AccountORM
from src.utils.datetime_tz import ensure_utc


class AccountsSQLAlchemyRepository(AccountsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: AccountORM) -> Account:
        return Account(
            id=orm.id,
            full_name=orm.full_name,
            email=orm.email,
            role=orm.role,
            region=orm.region,
            district=orm.district,
            pin_code=orm.pin_code,
            is_active=orm.is_active,
            is_approved=orm.is_approved,
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
        )

    async def add(self, account: Account) -> Account:
        orm = AccountORM(
            id=account.id,
            full_name=account.full_name,
            email=account.email,
            role=account.role,
            region=account.region,
            district=account.district,
            pin_code=account.pin_code,
            is_active=account.is_active,
            is_approved=account.is_approved,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("An account with this email already exists") from exc
        return self._to_domain(orm)

    async def get(self, account_id: UUID) -> Account | None:
        orm = await self.session.get(AccountORM, account_id)
        return self._to_domain(orm) if orm else None

    async def get_by_email(self, email: str) -> Account | None:
        stmt = select(AccountORM).where(AccountORM.email == email.lower())
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def list_reviewers(self, role: Role, region: str) -> list[Account]:
        stmt = (
            select(AccountORM)
            .where(AccountORM.role == role)
            .where(AccountORM.region == region)
            .where(AccountORM.is_active.is_(True))
            .where(AccountORM.is_approved.is_(True))
            .order_by(AccountORM.created_at)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]
