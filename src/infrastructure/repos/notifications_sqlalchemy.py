from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.repositories.notifications import NotificationsRepository
from src.domain.models.notification import Notification
from src.infrastructure.db.orm.notification import NotificationORM
from src.utils.datetime_tz import ensure_utc


class NotificationsSQLAlchemyRepository(NotificationsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: NotificationORM) -> Notification:
        return Notification(
            id=orm.id,
            recipient_id=orm.recipient_id,
            type=orm.type,
            title=orm.title,
            message=orm.message,
            data=orm.data,
            priority=orm.priority,
            read=orm.read,
            created_at=ensure_utc(orm.created_at),
            read_at=ensure_utc(orm.read_at),
        )

    def _to_orm(self, notification: Notification) -> NotificationORM:
        return NotificationORM(
            id=notification.id,
            recipient_id=notification.recipient_id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            data=notification.data,
            priority=notification.priority,
            read=notification.read,
            created_at=notification.created_at,
            read_at=notification.read_at,
        )

    async def add(self, notification: Notification) -> Notification:
        orm = self._to_orm(notification)
        self.session.add(orm)
        await self.session.flush()
        return self._to_domain(orm)

    async def list_by_recipient(
        self,
        recipient_id: UUID,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]:
        stmt = (
            select(NotificationORM)
            .where(NotificationORM.recipient_id == recipient_id)
            .order_by(NotificationORM.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if unread_only:
            stmt = stmt.where(NotificationORM.read.is_(False))

        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def count_unread(self, recipient_id: UUID) -> int:
        stmt = select(func.count()).where(
            NotificationORM.recipient_id == recipient_id,
            NotificationORM.read.is_(False),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def mark_as_read(self, recipient_id: UUID, notification_ids: list[UUID]) -> int:
        if not notification_ids:
            return 0
        stmt = (
            update(NotificationORM)
            .where(
                NotificationORM.recipient_id == recipient_id,
                NotificationORM.id.in_(notification_ids),
                NotificationORM.read.is_(False),
            )
            .values(read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def mark_all_as_read(self, recipient_id: UUID) -> int:
        stmt = (
            update(NotificationORM)
            .where(
                NotificationORM.recipient_id == recipient_id,
                NotificationORM.read.is_(False),
            )
            .values(read=True, read_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
