from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError
from src.application.events.models import TransferRejectedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.transfers.get_transfer import load_for_participant
from src.domain.models.transfer_request import TransferRequest
from src.domain.value_objects.transitions import InvalidTransition


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    transfer_id: UUID,
    message: str | None = None,
    *,
    now: datetime | None = None,
) -> TransferRequest:
    transfer = await load_for_participant(uow, actor, transfer_id, side="receiver")
    expected_version = transfer.version
    try:
        transfer.reject(message, now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if await uow.transfer_requests.save(transfer, expected_version) is None:
        raise ConflictError("Transfer request was already handled")

    cattle = await uow.cattle.get(transfer.cattle_ref)
    uow.add_event(
        TransferRejectedEvent(
            actor_id=actor.account_id,
            transfer_id=transfer.id,
            cattle_id=transfer.cattle_ref,
            cattle_code=cattle.cattle_id if cattle else "",
            from_owner_id=transfer.from_owner_id,
            to_owner_id=transfer.to_owner_id,
            message=message,
        )
    )
    await uow.commit()
    return transfer
