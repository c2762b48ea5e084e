from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.domain.models.transfer_request import TransferStatus, TransferType


class TransferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    cattle_ref: UUID
    from_owner_id: UUID
    to_owner_id: UUID
    transfer_type: TransferType
    status: TransferStatus
    price: Decimal | None = None
    notes: str | None = None
    transfer_date: datetime
    response_message: str | None = None
    responded_at: datetime | None = None
    cancelled_by: UUID | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    completed_at: datetime | None = None
    expires_at: datetime
    created_at: datetime
    updated_at: datetime


class TransferListResponse(BaseModel):
    items: list[TransferResponse]
    total: int
    limit: int
    offset: int


class TransferRespond(BaseModel):
    message: str | None = None


class TransferCancel(BaseModel):
    reason: str | None = None
