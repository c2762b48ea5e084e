from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from src.application.authorization import Actor, ensure_role
from src.application.errors import NotFoundError, ValidationError
from src.application.events.models import IdentificationRequestedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import ImageFile
from src.domain.models.identification_request import (
    IDENTIFICATION_EXPIRY_DAYS,
    IdentificationRequest,
    RequestPriority,
)
from src.domain.value_objects.role import Role


@dataclass(slots=True)
class CreateIdentificationInput:
    image: ImageFile | None
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    device_info: str | None = None
    priority: RequestPriority = RequestPriority.NORMAL


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    payload: CreateIdentificationInput,
    *,
    expiry_days: int = IDENTIFICATION_EXPIRY_DAYS,
    now: datetime | None = None,
) -> IdentificationRequest:
    ensure_role(actor, {Role.FARMER}, "Only farmers can request identification")
    if payload.image is None:
        raise ValidationError("A cattle image is required", details={"image": "required"})
    if (payload.latitude is None) != (payload.longitude is None):
        raise ValidationError(
            "Latitude and longitude must be provided together",
            details={"location": "latitude and longitude are both required"},
        )

    requester = await uow.accounts.get(actor.account_id)
    if requester is None:
        raise NotFoundError("Account not found")
    if not requester.region:
        raise ValidationError(
            "Requester address must include a state", details={"address": "state is required"}
        )

    request = IdentificationRequest.create(
        user_id=requester.id,
        region=requester.region,
        image=payload.image,
        latitude=payload.latitude,
        longitude=payload.longitude,
        address=payload.address,
        device_info=payload.device_info,
        priority=payload.priority,
        expiry_days=expiry_days,
        now=now,
    )
    created = await uow.identification_requests.add(request)
    uow.add_event(
        IdentificationRequestedEvent(
            actor_id=actor.account_id,
            request_id=created.id,
            request_code=created.request_id,
            region=created.region,
            requester_name=requester.full_name,
        )
    )
    await uow.commit()
    return created
