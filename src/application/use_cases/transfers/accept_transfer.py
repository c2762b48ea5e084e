from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError, NotFoundError
from src.application.events.models import TransferAcceptedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.transfers.get_transfer import load_for_participant
from src.domain.models.transfer_request import TransferRequest
from src.domain.value_objects.transitions import InvalidTransition

logger = logging.getLogger(__name__)


async def execute(
    uow: UnitOfWork, actor: Actor, transfer_id: UUID, *, now: datetime | None = None
) -> TransferRequest:
    """Accept a pending transfer and move the cattle to the receiver.

    The transfer row is claimed with a versioned update first; the cattle
    reassignment and the holdings move happen in the same transaction and are
    rolled back together on any failure.
    """
    now = now or datetime.now(timezone.utc)
    transfer = await load_for_participant(uow, actor, transfer_id, side="receiver")

    try:
        cattle = await uow.cattle.get(transfer.cattle_ref)
        if cattle is None:
            raise NotFoundError("Cattle not found")
        if cattle.owner_id != transfer.from_owner_id:
            raise ConflictError("Cattle is no longer owned by the sender")

        transfer_version = transfer.version
        try:
            transfer.accept(now)
        except InvalidTransition as exc:
            raise ConflictError(str(exc)) from exc
        if await uow.transfer_requests.save(transfer, transfer_version) is None:
            raise ConflictError("Transfer request was already handled")

        cattle_version = cattle.version
        cattle.transfer_to(transfer.to_owner_id, transfer.id, now)
        if await uow.cattle.save(cattle, cattle_version) is None:
            raise ConflictError("Cattle was modified concurrently")
        await uow.holdings.move(cattle.id, transfer.from_owner_id, transfer.to_owner_id)

        uow.add_event(
            TransferAcceptedEvent(
                actor_id=actor.account_id,
                transfer_id=transfer.id,
                cattle_id=cattle.id,
                cattle_code=cattle.cattle_id,
                from_owner_id=transfer.from_owner_id,
                to_owner_id=transfer.to_owner_id,
            )
        )
        await uow.commit()
    except Exception:
        await uow.rollback()
        raise

    logger.info(
        "Transfer %s accepted: cattle=%s %s -> %s",
        transfer.id,
        cattle.id,
        transfer.from_owner_id,
        transfer.to_owner_id,
    )
    return transfer
