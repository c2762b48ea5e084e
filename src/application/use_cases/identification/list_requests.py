from __future__ import annotations

from dataclasses import dataclass

from src.application.authorization import Actor, ensure_role, scope_region
from src.application.errors import ValidationError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.identification_request import IdentificationRequest, IdentificationStatus
from src.domain.value_objects.role import IDENTIFIER_ROLES


@dataclass(slots=True)
class ListIdentificationResult:
    items: list[IdentificationRequest]
    total: int
    limit: int
    offset: int


def _check_page(limit: int, offset: int) -> None:
    if limit <= 0 or limit > 100:
        raise ValidationError("limit must be between 1 and 100")
    if offset < 0:
        raise ValidationError("offset must be zero or greater")


async def list_mine(
    uow: UnitOfWork,
    actor: Actor,
    *,
    status: IdentificationStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> ListIdentificationResult:
    _check_page(limit, offset)
    items, total = await uow.identification_requests.list_for_user(
        actor.account_id, status=status, limit=limit, offset=offset
    )
    return ListIdentificationResult(items=items, total=total, limit=limit, offset=offset)


async def list_queue(
    uow: UnitOfWork, actor: Actor, *, limit: int = 20, offset: int = 0
) -> ListIdentificationResult:
    """Pending and processing requests of the admin's region, oldest first."""
    ensure_role(actor, IDENTIFIER_ROLES, "Only identifier admins see this queue")
    _check_page(limit, offset)
    items, total = await uow.identification_requests.list_queue(
        region=scope_region(actor), limit=limit, offset=offset
    )
    return ListIdentificationResult(items=items, total=total, limit=limit, offset=offset)
