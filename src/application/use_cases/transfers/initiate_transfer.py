from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.application.authorization import Actor, ensure_role
from src.application.errors import ConflictError, NotFoundError, ValidationError
from src.application.events.models import TransferInitiatedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle.archive_cattle import load_owned
from src.domain.models.transfer_request import (
    TRANSFER_EXPIRY_DAYS,
    TransferRequest,
    TransferType,
)
from src.domain.value_objects.cattle_status import LifecycleStatus
from src.domain.value_objects.role import Role


@dataclass(slots=True)
class InitiateTransferInput:
    to_owner_id: UUID
    transfer_type: TransferType = TransferType.SELL
    price: Decimal | None = None
    notes: str | None = None


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    cattle_id: UUID,
    payload: InitiateTransferInput,
    *,
    expiry_days: int = TRANSFER_EXPIRY_DAYS,
    now: datetime | None = None,
) -> TransferRequest:
    ensure_role(actor, {Role.FARMER}, "Only farmers can transfer cattle")
    if payload.to_owner_id == actor.account_id:
        raise ValidationError(
            "Cannot transfer cattle to yourself", details={"to_owner_id": "must differ from sender"}
        )
    if payload.price is not None and payload.price < 0:
        raise ValidationError("Price cannot be negative", details={"price": "must be >= 0"})

    cattle = await load_owned(uow, actor, cattle_id)

    receiver = await uow.accounts.get(payload.to_owner_id)
    if receiver is None or receiver.role is not Role.FARMER or not receiver.is_active:
        raise NotFoundError("Receiving farmer not found")

    if cattle.status is not LifecycleStatus.ACTIVE:
        raise ConflictError("Only active cattle can be transferred")
    if await uow.transfer_requests.get_pending_for_cattle(cattle.id) is not None:
        raise ConflictError("A pending transfer request already exists for this cattle")

    transfer = TransferRequest.initiate(
        cattle_ref=cattle.id,
        from_owner_id=actor.account_id,
        to_owner_id=receiver.id,
        transfer_type=payload.transfer_type,
        price=payload.price,
        notes=payload.notes,
        expiry_days=expiry_days,
        now=now,
    )
    created = await uow.transfer_requests.add(transfer)
    uow.add_event(
        TransferInitiatedEvent(
            actor_id=actor.account_id,
            transfer_id=created.id,
            cattle_id=cattle.id,
            cattle_code=cattle.cattle_id,
            breed=cattle.breed,
            from_owner_id=created.from_owner_id,
            to_owner_id=created.to_owner_id,
            sender_name=actor.full_name,
        )
    )
    await uow.commit()
    return created
