from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError, NotFoundError, ValidationError
from src.application.events.models import IdentificationCompletedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.identification.start_processing import load_for_identifier
from src.domain.models.cattle import Cattle
from src.domain.models.identification_request import IdentificationRequest
from src.domain.value_objects.transitions import InvalidTransition


@dataclass(slots=True)
class CompleteIdentificationInput:
    found: bool
    cattle_ref: UUID | None = None
    cattle_code: str | None = None
    confidence: float | None = None
    message: str | None = None
    admin_notes: str | None = None


async def _resolve_cattle(uow: UnitOfWork, payload: CompleteIdentificationInput) -> Cattle:
    if payload.cattle_ref is None and not payload.cattle_code:
        raise ValidationError(
            "A found result must reference a cattle record",
            details={"cattle_ref": "required when found is true"},
        )
    if payload.cattle_ref is not None:
        cattle = await uow.cattle.get(payload.cattle_ref)
    else:
        cattle = await uow.cattle.get_by_code(payload.cattle_code.strip())
    if cattle is None:
        raise NotFoundError("Referenced cattle not found")
    return cattle


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    request_id: UUID,
    payload: CompleteIdentificationInput,
    *,
    now: datetime | None = None,
) -> IdentificationRequest:
    if payload.confidence is not None and not 0 <= payload.confidence <= 100:
        raise ValidationError(
            "Confidence must be between 0 and 100", details={"confidence": "0..100"}
        )
    request = await load_for_identifier(uow, actor, request_id)
    now = now or datetime.now(timezone.utc)

    cattle = await _resolve_cattle(uow, payload) if payload.found else None

    expected_version = request.version
    try:
        request.complete(
            actor.account_id,
            found=payload.found,
            cattle_ref=cattle.id if cattle else None,
            cattle_code=cattle.cattle_id if cattle else None,
            confidence=payload.confidence,
            message=payload.message,
            now=now,
        )
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if payload.admin_notes is not None:
        request.admin_notes = payload.admin_notes
    if await uow.identification_requests.save(request, expected_version) is None:
        raise ConflictError("Identification request was modified concurrently")

    if cattle is not None:
        cattle_version = cattle.version
        cattle.record_identification(actor.account_id, "image_scan", now)
        if await uow.cattle.save(cattle, cattle_version) is None:
            raise ConflictError("Cattle was modified concurrently")

    uow.add_event(
        IdentificationCompletedEvent(
            actor_id=actor.account_id,
            request_id=request.id,
            request_code=request.request_id,
            requester_id=request.user_id,
            found=request.result.found,
            cattle_id=request.result.cattle_ref,
            cattle_code=request.result.cattle_code,
            time_taken_seconds=request.time_taken_seconds,
            message=payload.message,
        )
    )
    await uow.commit()
    return request
