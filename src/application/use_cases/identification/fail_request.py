from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError, ValidationError
from src.application.events.models import IdentificationFailedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.identification.start_processing import load_for_identifier
from src.domain.models.identification_request import IdentificationRequest
from src.domain.value_objects.transitions import InvalidTransition


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    request_id: UUID,
    message: str | None,
    *,
    reason: str | None = None,
    now: datetime | None = None,
) -> IdentificationRequest:
    message = (message or "").strip()
    if not message:
        raise ValidationError("A failure message is required", details={"message": "required"})
    request = await load_for_identifier(uow, actor, request_id)

    expected_version = request.version
    try:
        request.mark_failed(message, now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if reason:
        request.admin_notes = reason
    if await uow.identification_requests.save(request, expected_version) is None:
        raise ConflictError("Identification request was modified concurrently")

    uow.add_event(
        IdentificationFailedEvent(
            actor_id=actor.account_id,
            request_id=request.id,
            request_code=request.request_id,
            requester_id=request.user_id,
            message=message,
        )
    )
    await uow.commit()
    return request
