from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class CattleRegisteredEvent:
    actor_id: UUID
    cattle_id: UUID
    cattle_code: str
    owner_id: UUID
    region: str
    district: str | None = None
    owner_name: str | None = None
    turnaround_hours: int = 48


@dataclass(frozen=True)
class CattleForwardedEvent:
    actor_id: UUID
    cattle_id: UUID
    cattle_code: str
    owner_id: UUID
    region: str


@dataclass(frozen=True)
class CattleDeniedEvent:
    actor_id: UUID
    cattle_id: UUID
    cattle_code: str
    owner_id: UUID
    reason: str


@dataclass(frozen=True)
class CattleApprovedEvent:
    actor_id: UUID
    cattle_id: UUID
    cattle_code: str
    owner_id: UUID


@dataclass(frozen=True)
class CattleRejectedEvent:
    actor_id: UUID
    cattle_id: UUID
    cattle_code: str
    owner_id: UUID
    reason: str


@dataclass(frozen=True)
class VerificationOverdueEvent:
    cattle_id: UUID
    cattle_code: str
    region: str
    deadline: datetime | None = None


@dataclass(frozen=True)
class IdentificationRequestedEvent:
    actor_id: UUID
    request_id: UUID
    request_code: str
    region: str
    requester_name: str | None = None


@dataclass(frozen=True)
class IdentificationStartedEvent:
    actor_id: UUID
    request_id: UUID
    request_code: str
    requester_id: UUID


@dataclass(frozen=True)
class IdentificationCompletedEvent:
    actor_id: UUID
    request_id: UUID
    request_code: str
    requester_id: UUID
    found: bool
    cattle_id: UUID | None = None
    cattle_code: str | None = None
    time_taken_seconds: int | None = None
    message: str | None = None


@dataclass(frozen=True)
class IdentificationFailedEvent:
    actor_id: UUID | None
    request_id: UUID
    request_code: str
    requester_id: UUID
    message: str


@dataclass(frozen=True)
class TransferInitiatedEvent:
    actor_id: UUID
    transfer_id: UUID
    cattle_id: UUID
    cattle_code: str
    breed: str
    from_owner_id: UUID
    to_owner_id: UUID
    sender_name: str | None = None


@dataclass(frozen=True)
class TransferAcceptedEvent:
    actor_id: UUID
    transfer_id: UUID
    cattle_id: UUID
    cattle_code: str
    from_owner_id: UUID
    to_owner_id: UUID


@dataclass(frozen=True)
class TransferRejectedEvent:
    actor_id: UUID
    transfer_id: UUID
    cattle_id: UUID
    cattle_code: str
    from_owner_id: UUID
    to_owner_id: UUID
    message: str | None = None


@dataclass(frozen=True)
class TransferCancelledEvent:
    actor_id: UUID | None
    transfer_id: UUID
    cattle_id: UUID
    cattle_code: str
    from_owner_id: UUID
    to_owner_id: UUID
    reason: str | None = None
