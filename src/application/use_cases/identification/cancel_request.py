from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError, NotFoundError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.identification_request import IdentificationRequest
from src.domain.value_objects.transitions import InvalidTransition


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    request_id: UUID,
    reason: str | None = None,
    *,
    now: datetime | None = None,
) -> IdentificationRequest:
    request = await uow.identification_requests.get(request_id)
    if request is None or request.user_id != actor.account_id:
        raise NotFoundError("Identification request not found")
    expected_version = request.version
    try:
        request.cancel(actor.account_id, reason, now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if await uow.identification_requests.save(request, expected_version) is None:
        raise ConflictError("Identification request was modified concurrently")
    await uow.commit()
    return request
