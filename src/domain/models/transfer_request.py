from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from src.domain.value_objects.transitions import TransitionTable

TRANSFER_EXPIRY_DAYS = 30
EXPIRED_REASON = "Expired"


class TransferType(str, Enum):
    SELL = "sell"
    GIFT = "gift"
    INHERITANCE = "inheritance"
    OTHER = "other"


class TransferStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class TransferEvent(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"


TRANSFER_TRANSITIONS: TransitionTable[TransferStatus, TransferEvent] = TransitionTable(
    "transfer request",
    {
        (TransferStatus.PENDING, TransferEvent.ACCEPT): TransferStatus.ACCEPTED,
        (TransferStatus.PENDING, TransferEvent.REJECT): TransferStatus.REJECTED,
        (TransferStatus.PENDING, TransferEvent.CANCEL): TransferStatus.CANCELLED,
    },
)


@dataclass(slots=True)
class TransferRequest:
    id: UUID
    cattle_ref: UUID
    from_owner_id: UUID
    to_owner_id: UUID
    transfer_type: TransferType = TransferType.SELL
    status: TransferStatus = TransferStatus.PENDING
    price: Decimal | None = None
    notes: str | None = None
    transfer_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    response_message: str | None = None
    responded_at: datetime | None = None
    cancelled_by: UUID | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    completed_at: datetime | None = None
    expires_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc) + timedelta(days=TRANSFER_EXPIRY_DAYS)
    )

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def initiate(
        cls,
        cattle_ref: UUID,
        from_owner_id: UUID,
        to_owner_id: UUID,
        transfer_type: TransferType = TransferType.SELL,
        price: Decimal | None = None,
        notes: str | None = None,
        expiry_days: int = TRANSFER_EXPIRY_DAYS,
        now: datetime | None = None,
    ) -> TransferRequest:
        if from_owner_id == to_owner_id:
            raise ValueError("Cannot transfer cattle to the same owner")
        now = now or datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            cattle_ref=cattle_ref,
            from_owner_id=from_owner_id,
            to_owner_id=to_owner_id,
            transfer_type=transfer_type,
            status=TransferStatus.PENDING,
            price=price,
            notes=notes,
            transfer_date=now,
            expires_at=now + timedelta(days=expiry_days),
            created_at=now,
            updated_at=now,
            version=1,
        )

    def _advance(self, event: TransferEvent) -> None:
        self.status = TRANSFER_TRANSITIONS.next_state(self.status, event)

    def accept(self, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(TransferEvent.ACCEPT)
        self.responded_at = now
        self.completed_at = now
        self.bump_version(now)

    def reject(self, message: str | None = None, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(TransferEvent.REJECT)
        self.responded_at = now
        self.response_message = message
        self.bump_version(now)

    def cancel(
        self, user_id: UUID | None, reason: str | None = None, now: datetime | None = None
    ) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(TransferEvent.CANCEL)
        self.cancelled_by = user_id
        self.cancelled_at = now
        self.cancellation_reason = reason
        self.bump_version(now)

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.status == TransferStatus.PENDING and now > self.expires_at

    def bump_version(self, now: datetime | None = None) -> None:
        self.version += 1
        self.updated_at = now or datetime.now(timezone.utc)
