from __future__ import annotations

from uuid import UUID

from src.application.authorization import Actor, ensure_in_scope
from src.application.errors import NotFoundError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import Cattle
from src.domain.value_objects.role import Role


async def execute(uow: UnitOfWork, actor: Actor, cattle_id: UUID) -> Cattle:
    cattle = await uow.cattle.get(cattle_id)
    if cattle is None:
        raise NotFoundError("Cattle not found")
    if actor.role is Role.FARMER:
        if cattle.owner_id != actor.account_id:
            raise NotFoundError("Cattle not found")
    else:
        ensure_in_scope(actor, cattle.region, "Cattle")
    return cattle
