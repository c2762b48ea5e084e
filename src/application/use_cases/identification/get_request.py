from __future__ import annotations

from uuid import UUID

from src.application.authorization import Actor, ensure_in_scope
from src.application.errors import NotFoundError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.identification_request import IdentificationRequest
from src.domain.value_objects.role import Role


async def execute(uow: UnitOfWork, actor: Actor, request_id: UUID) -> IdentificationRequest:
    request = await uow.identification_requests.get(request_id)
    if request is None:
        raise NotFoundError("Identification request not found")
    if actor.role is Role.FARMER:
        if request.user_id != actor.account_id:
            raise NotFoundError("Identification request not found")
    else:
        ensure_in_scope(actor, request.region, "Identification request")
    return request
