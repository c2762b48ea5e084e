from __future__ import annotations

from src.application.authorization import Actor, scope_region
from src.application.interfaces.repositories.identification_requests import IdentificationStats
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.value_objects.role import Role


async def execute(uow: UnitOfWork, actor: Actor) -> IdentificationStats:
    if actor.role is Role.FARMER:
        return await uow.identification_requests.statistics(user_id=actor.account_id)
    return await uow.identification_requests.statistics(region=scope_region(actor))
