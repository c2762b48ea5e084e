from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle.archive_cattle import load_owned
from src.domain.models.cattle import Cattle
from src.domain.value_objects.transitions import InvalidTransition


async def execute(
    uow: UnitOfWork, actor: Actor, cattle_id: UUID, *, now: datetime | None = None
) -> Cattle:
    cattle = await load_owned(uow, actor, cattle_id)
    expected_version = cattle.version
    try:
        cattle.restore(now)
    except InvalidTransition as exc:
        raise ConflictError(str(exc)) from exc
    if await uow.cattle.save(cattle, expected_version) is None:
        raise ConflictError("Cattle was modified concurrently")
    await uow.commit()
    return cattle
