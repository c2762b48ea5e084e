from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


@dataclass(slots=True)
class Notification:
    id: UUID
    recipient_id: UUID
    type: str
    title: str
    message: str
    data: dict | None = None
    priority: NotificationPriority = NotificationPriority.MEDIUM
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    read_at: datetime | None = None

    @classmethod
    def create(
        cls,
        recipient_id: UUID,
        type: str,
        title: str,
        message: str,
        data: dict | None = None,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
    ) -> Notification:
        return cls(
            id=uuid4(),
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            data=data,
            priority=priority,
            read=False,
            created_at=datetime.now(timezone.utc),
            read_at=None,
        )

    def mark_as_read(self) -> None:
        if not self.read:
            self.read = True
            self.read_at = datetime.now(timezone.utc)
