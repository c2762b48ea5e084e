from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor, ensure_in_scope, ensure_role
from src.application.errors import ConflictError, NotFoundError
from src.application.events.models import IdentificationStartedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.identification_request import IdentificationRequest
from src.domain.value_objects.role import IDENTIFIER_ROLES
from src.domain.value_objects.transitions import InvalidTransition


async def load_for_identifier(
    uow: UnitOfWork, actor: Actor, request_id: UUID
) -> IdentificationRequest:
    ensure_role(actor, IDENTIFIER_ROLES, "Only identifier admins can process requests")
    request = await uow.identification_requests.get(request_id)
    if request is None:
        raise NotFoundError("Identification request not found")
    ensure_in_scope(actor, request.region, "Identification request")
    return request


async def execute(
    uow: UnitOfWork, actor: Actor, request_id: UUID, *, now: datetime | None = None
) -> IdentificationRequest:
    request = await load_for_identifier(uow, actor, request_id)
    expected_version = request.version
    try:
        request.start_processing(actor.account_id, now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if await uow.identification_requests.save(request, expected_version) is None:
        raise ConflictError("Identification request was modified concurrently")

    uow.add_event(
        IdentificationStartedEvent(
            actor_id=actor.account_id,
            request_id=request.id,
            request_code=request.request_id,
            requester_id=request.user_id,
        )
    )
    await uow.commit()
    return request
