from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor, ensure_in_scope, ensure_role
from src.application.errors import ConflictError, NotFoundError, ValidationError
from src.application.events.models import CattleApprovedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import Cattle
from src.domain.value_objects.cattle_status import VERIFICATION_TRANSITIONS, VerificationEvent
from src.domain.value_objects.role import IDENTIFIER_ROLES
from src.domain.value_objects.transitions import InvalidTransition


async def execute(
    uow: UnitOfWork, actor: Actor, cattle_id: UUID, *, now: datetime | None = None
) -> Cattle:
    ensure_role(actor, IDENTIFIER_ROLES, "Only identifier admins can approve")
    cattle = await uow.cattle.get(cattle_id)
    if cattle is None:
        raise NotFoundError("Cattle not found")
    ensure_in_scope(actor, cattle.region, "Cattle")

    # Active cattle always carry the complete 3/3/3/3/1/1 photo set
    if VERIFICATION_TRANSITIONS.allows(cattle.verification_status, VerificationEvent.APPROVE):
        problems = cattle.image_set_problems(exact=True)
        if problems:
            raise ValidationError("Cannot approve cattle with incomplete images", details=problems)

    expected_version = cattle.version
    try:
        cattle.approve(actor.account_id, now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if await uow.cattle.save(cattle, expected_version) is None:
        raise ConflictError("Cattle was modified concurrently")

    uow.add_event(
        CattleApprovedEvent(
            actor_id=actor.account_id,
            cattle_id=cattle.id,
            cattle_code=cattle.cattle_id,
            owner_id=cattle.owner_id,
        )
    )
    await uow.commit()
    return cattle
