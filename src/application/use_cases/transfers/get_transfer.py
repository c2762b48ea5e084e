from __future__ import annotations

from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import AuthorizationError, NotFoundError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.transfer_request import TransferRequest


async def load_for_participant(
    uow: UnitOfWork,
    actor: Actor,
    transfer_id: UUID,
    *,
    side: str | None = None,
) -> TransferRequest:
    """Load a transfer visible to the caller.

    Accounts outside the transfer get ``NotFoundError``. With ``side`` set to
    ``"sender"`` or ``"receiver"`` the other participant gets
    ``AuthorizationError``.
    """
    transfer = await uow.transfer_requests.get(transfer_id)
    if transfer is None or actor.account_id not in (transfer.from_owner_id, transfer.to_owner_id):
        raise NotFoundError("Transfer request not found")
    if side == "sender" and actor.account_id != transfer.from_owner_id:
        raise AuthorizationError("Only the sender can do this")
    if side == "receiver" and actor.account_id != transfer.to_owner_id:
        raise AuthorizationError("Only the receiver can do this")
    return transfer


async def execute(uow: UnitOfWork, actor: Actor, transfer_id: UUID) -> TransferRequest:
    return await load_for_participant(uow, actor, transfer_id)
