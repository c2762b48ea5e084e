from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from src.application.authorization import Actor, scope_region
from src.application.errors import ValidationError
from src.application.interfaces.repositories.cattle import CattleFilter
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import Cattle
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.domain.value_objects.role import Role


@dataclass(slots=True)
class ListCattleResult:
    items: list[Cattle]
    total: int
    limit: int
    offset: int


def build_filter(
    actor: Actor,
    *,
    status: LifecycleStatus | None = None,
    verification_status: VerificationStatus | None = None,
    breed: str | None = None,
    search: str | None = None,
    owner_id: UUID | None = None,
) -> CattleFilter:
    """Farmers only ever see their own herd; admins see their region."""
    if actor.role is Role.FARMER:
        return CattleFilter(
            owner_id=actor.account_id,
            status=status,
            verification_status=verification_status,
            breed=breed,
            search=search,
        )
    return CattleFilter(
        owner_id=owner_id,
        region=scope_region(actor),
        status=status,
        verification_status=verification_status,
        breed=breed,
        search=search,
    )


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    *,
    limit: int = 20,
    offset: int = 0,
    status: LifecycleStatus | None = None,
    verification_status: VerificationStatus | None = None,
    breed: str | None = None,
    search: str | None = None,
    owner_id: UUID | None = None,
    order_by: str = "created_at",
    descending: bool = True,
) -> ListCattleResult:
    if limit <= 0 or limit > 100:
        raise ValidationError("limit must be between 1 and 100")
    if offset < 0:
        raise ValidationError("offset must be zero or greater")
    filters = build_filter(
        actor,
        status=status,
        verification_status=verification_status,
        breed=breed,
        search=search,
        owner_id=owner_id,
    )
    items = await uow.cattle.list(
        filters, limit=limit, offset=offset, order_by=order_by, descending=descending
    )
    total = await uow.cattle.count(filters)
    return ListCattleResult(items=items, total=total, limit=limit, offset=offset)
