from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping

from src.application.authorization import Actor, ensure_role
from src.application.errors import NotFoundError, ValidationError
from src.application.events.models import CattleRegisteredEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import DEFAULT_TURNAROUND_HOURS, Cattle, ImageFile, Location
from src.domain.value_objects.image_category import ImageCategory
from src.domain.value_objects.role import Role


@dataclass(slots=True)
class RegisterCattleInput:
    breed: str
    age: int
    images: Mapping[str, list[ImageFile]] = field(default_factory=dict)
    tag_no: str | None = None
    color: str | None = None
    type: str | None = None
    medical_history: str | None = None


def _parse_images(images: Mapping[str, list[ImageFile]]) -> dict[ImageCategory, list[ImageFile]]:
    valid = {category.value for category in ImageCategory}
    unknown = sorted(set(images) - valid)
    if unknown:
        raise ValidationError(
            "Unknown image categories",
            details={name: f"must be one of {sorted(valid)}" for name in unknown},
        )
    return {ImageCategory(name): list(files) for name, files in images.items()}


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    payload: RegisterCattleInput,
    *,
    turnaround_hours: int = DEFAULT_TURNAROUND_HOURS,
    allow_partial_images: bool = False,
    now: datetime | None = None,
) -> Cattle:
    ensure_role(actor, {Role.FARMER}, "Only farmers can register cattle")
    if not payload.breed or not payload.breed.strip():
        raise ValidationError("Breed is required", details={"breed": "required"})
    if payload.age is None or payload.age < 0:
        raise ValidationError("Age must be zero or greater", details={"age": "must be >= 0"})

    owner = await uow.accounts.get(actor.account_id)
    if owner is None:
        raise NotFoundError("Account not found")
    if not owner.region or not owner.district:
        raise ValidationError(
            "Owner address must include state and district",
            details={"address": "state and district are required"},
        )

    cattle = Cattle.register(
        owner_id=owner.id,
        location=Location(state=owner.region, district=owner.district, pin_code=owner.pin_code),
        breed=payload.breed.strip(),
        age=payload.age,
        images=_parse_images(payload.images),
        tag_no=payload.tag_no,
        color=payload.color,
        type=payload.type,
        medical_history=payload.medical_history,
        turnaround_hours=turnaround_hours,
        now=now,
    )
    problems = cattle.image_set_problems(exact=not allow_partial_images)
    if not problems and cattle.total_images == 0:
        problems = {"images": "At least one image is required"}
    if problems:
        raise ValidationError("Incomplete cattle image set", details=problems)

    created = await uow.cattle.add(cattle)
    await uow.holdings.add(owner.id, created.id)
    uow.add_event(
        CattleRegisteredEvent(
            actor_id=actor.account_id,
            cattle_id=created.id,
            cattle_code=created.cattle_id,
            owner_id=owner.id,
            region=created.region,
            district=created.location.district,
            owner_name=owner.full_name,
            turnaround_hours=turnaround_hours,
        )
    )
    await uow.commit()
    return created
