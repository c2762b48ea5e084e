from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import UUID, uuid4

from src.domain.models.cattle import ImageFile
from src.domain.value_objects.transitions import TransitionTable

IDENTIFICATION_EXPIRY_DAYS = 7
EXPIRED_MESSAGE = "Request expired"


class IdentificationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class IdentificationEvent(str, Enum):
    START = "start"
    COMPLETE = "complete"
    FAIL = "fail"
    CANCEL = "cancel"


class RequestPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


_S = IdentificationStatus
_E = IdentificationEvent

IDENTIFICATION_TRANSITIONS: TransitionTable[IdentificationStatus, IdentificationEvent] = (
    TransitionTable(
        "identification request",
        {
            (_S.PENDING, _E.START): _S.PROCESSING,
            (_S.PENDING, _E.COMPLETE): _S.COMPLETED,
            (_S.PROCESSING, _E.COMPLETE): _S.COMPLETED,
            (_S.PENDING, _E.FAIL): _S.FAILED,
            (_S.PROCESSING, _E.FAIL): _S.FAILED,
            (_S.PENDING, _E.CANCEL): _S.CANCELLED,
            (_S.PROCESSING, _E.CANCEL): _S.CANCELLED,
        },
    )
)

OPEN_STATUSES = (IdentificationStatus.PENDING, IdentificationStatus.PROCESSING)


def generate_request_code() -> str:
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = str(random.randint(0, 9999)).zfill(4)
    return f"IDR-{timestamp}{suffix}"


@dataclass(slots=True)
class IdentificationResult:
    found: bool = False
    cattle_ref: UUID | None = None
    cattle_code: str | None = None
    confidence: float | None = None
    message: str | None = None
    identified_at: datetime | None = None


@dataclass(slots=True)
class IdentificationRequest:
    id: UUID
    request_id: str
    user_id: UUID
    region: str
    image: ImageFile
    status: IdentificationStatus = IdentificationStatus.PENDING
    priority: RequestPriority = RequestPriority.NORMAL
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    device_info: str | None = None

    started_at: datetime | None = None
    completed_at: datetime | None = None
    processed_by: UUID | None = None
    time_taken_seconds: int | None = None

    result: IdentificationResult = field(default_factory=IdentificationResult)
    admin_notes: str | None = None

    expires_at: datetime = field(
        default_factory=lambda: (
            datetime.now(timezone.utc) + timedelta(days=IDENTIFICATION_EXPIRY_DAYS)
        )
    )
    cancelled_by: UUID | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        user_id: UUID,
        region: str,
        image: ImageFile,
        latitude: float | None = None,
        longitude: float | None = None,
        address: str | None = None,
        device_info: str | None = None,
        priority: RequestPriority = RequestPriority.NORMAL,
        expiry_days: int = IDENTIFICATION_EXPIRY_DAYS,
        now: datetime | None = None,
    ) -> IdentificationRequest:
        now = now or datetime.now(timezone.utc)
        has_geo = latitude is not None and longitude is not None
        return cls(
            id=uuid4(),
            request_id=generate_request_code(),
            user_id=user_id,
            region=region,
            image=image,
            status=IdentificationStatus.PENDING,
            priority=priority,
            latitude=latitude if has_geo else None,
            longitude=longitude if has_geo else None,
            address=address if has_geo else None,
            device_info=device_info,
            expires_at=now + timedelta(days=expiry_days),
            created_at=now,
            updated_at=now,
            version=1,
        )

    def _advance(self, event: IdentificationEvent) -> None:
        self.status = IDENTIFICATION_TRANSITIONS.next_state(self.status, event)

    def start_processing(self, admin_id: UUID, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(IdentificationEvent.START)
        self.started_at = now
        self.processed_by = admin_id
        self.bump_version(now)

    def complete(
        self,
        admin_id: UUID,
        *,
        found: bool,
        cattle_ref: UUID | None = None,
        cattle_code: str | None = None,
        confidence: float | None = None,
        message: str | None = None,
        now: datetime | None = None,
    ) -> None:
        if found and cattle_ref is None:
            raise ValueError("A found result must reference a cattle record")
        now = now or datetime.now(timezone.utc)
        self._advance(IdentificationEvent.COMPLETE)
        self.completed_at = now
        if self.processed_by is None:
            self.processed_by = admin_id
        if self.started_at is not None:
            self.time_taken_seconds = int((now - self.started_at).total_seconds())
        default_message = (
            "Cattle identified successfully" if found else "No match found in database"
        )
        self.result = IdentificationResult(
            found=found,
            cattle_ref=cattle_ref if found else None,
            cattle_code=cattle_code if found else None,
            confidence=confidence,
            message=message or default_message,
            identified_at=now,
        )
        self.bump_version(now)

    def mark_failed(self, message: str, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(IdentificationEvent.FAIL)
        self.completed_at = now
        self.result.message = message
        self.bump_version(now)

    def cancel(self, user_id: UUID, reason: str | None = None, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._advance(IdentificationEvent.CANCEL)
        self.cancelled_by = user_id
        self.cancelled_at = now
        self.cancellation_reason = reason
        self.bump_version(now)

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.status in OPEN_STATUSES and now > self.expires_at

    def bump_version(self, now: datetime | None = None) -> None:
        self.version += 1
        self.updated_at = now or datetime.now(timezone.utc)
