from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor, ensure_in_scope, ensure_role
from src.application.errors import ConflictError, NotFoundError, ValidationError
from src.application.events.models import CattleDeniedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import Cattle
from src.domain.value_objects.role import REVIEWER_ROLES
from src.domain.value_objects.transitions import InvalidTransition


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    cattle_id: UUID,
    reason: str | None,
    *,
    now: datetime | None = None,
) -> Cattle:
    ensure_role(actor, REVIEWER_ROLES, "Only regional admins can deny")
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Denial reason is required", details={"reason": "required"})

    cattle = await uow.cattle.get(cattle_id)
    if cattle is None:
        raise NotFoundError("Cattle not found")
    ensure_in_scope(actor, cattle.region, "Cattle")

    expected_version = cattle.version
    try:
        cattle.deny_by_regional_admin(actor.account_id, reason, now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if await uow.cattle.save(cattle, expected_version) is None:
        raise ConflictError("Cattle was modified concurrently")

    uow.add_event(
        CattleDeniedEvent(
            actor_id=actor.account_id,
            cattle_id=cattle.id,
            cattle_code=cattle.cattle_id,
            owner_id=cattle.owner_id,
            reason=reason,
        )
    )
    await uow.commit()
    return cattle
