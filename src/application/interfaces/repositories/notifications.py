from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.notification import Notification


class NotificationsRepository(Protocol):
    async def add(self, notification: Notification) -> Notification: ...

    async def list_by_recipient(
        self,
        recipient_id: UUID,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]: ...

    async def count_unread(self, recipient_id: UUID) -> int: ...

    async def mark_as_read(self, recipient_id: UUID, notification_ids: list[UUID]) -> int: ...

    async def mark_all_as_read(self, recipient_id: UUID) -> int: ...
