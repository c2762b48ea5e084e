from __future__ import annotations

import logging
from uuid import UUID

from src.application.notifications.factory import BuiltNotification
from src.domain.models.notification import Notification
from src.infrastructure.repos.notifications_sqlalchemy import NotificationsSQLAlchemyRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Persists in-app notifications; delivery failures are logged, never raised."""

    def __init__(self, notification_repo: NotificationsSQLAlchemyRepository) -> None:
        self.notification_repo = notification_repo

    async def send_notification(
        self, recipient_id: UUID, built: BuiltNotification
    ) -> Notification | None:
        notification = Notification.create(
            recipient_id=recipient_id,
            type=built.type,
            title=built.title,
            message=built.message,
            data=built.data,
            priority=built.priority,
        )
        session = self.notification_repo.session
        try:
            saved = await self.notification_repo.add(notification)
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(
                "Error persisting notification type=%s recipient=%s: %s",
                built.type,
                recipient_id,
                e,
                exc_info=True,
            )
            return None
        logger.info(
            "Notification created: id=%s recipient=%s type=%s", saved.id, recipient_id, built.type
        )
        return saved

    async def send_many(
        self, recipient_ids: list[UUID], built: BuiltNotification
    ) -> list[Notification]:
        sent = []
        for recipient_id in dict.fromkeys(recipient_ids):
            saved = await self.send_notification(recipient_id, built)
            if saved is not None:
                sent.append(saved)
        return sent
