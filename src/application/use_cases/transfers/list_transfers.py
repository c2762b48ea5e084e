from __future__ import annotations

from dataclasses import dataclass

from src.application.authorization import Actor
from src.application.errors import ValidationError
from src.application.interfaces.repositories.transfer_requests import Direction
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.transfer_request import TransferRequest, TransferStatus

DIRECTIONS = ("sent", "received", "all")


@dataclass(slots=True)
class ListTransfersResult:
    items: list[TransferRequest]
    total: int
    limit: int
    offset: int


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    *,
    direction: Direction = "all",
    status: TransferStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> ListTransfersResult:
    if direction not in DIRECTIONS:
        raise ValidationError(
            "Invalid direction", details={"direction": "one of sent, received, all"}
        )
    if limit <= 0 or limit > 100:
        raise ValidationError("limit must be between 1 and 100")
    if offset < 0:
        raise ValidationError("offset must be zero or greater")
    items, total = await uow.transfer_requests.list_for_account(
        actor.account_id, direction=direction, status=status, limit=limit, offset=offset
    )
    return ListTransfersResult(items=items, total=total, limit=limit, offset=offset)
