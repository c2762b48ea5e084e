from __future__ import annotations

from datetime import datetime, timezone

from src.application.authorization import Actor, ensure_role, scope_region
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.cattle import Cattle
from src.domain.value_objects.role import REVIEWER_ROLES


async def execute(
    uow: UnitOfWork, actor: Actor, *, now: datetime | None = None, limit: int = 100
) -> list[Cattle]:
    ensure_role(actor, REVIEWER_ROLES)
    now = now or datetime.now(timezone.utc)
    return await uow.cattle.list_overdue(now, region=scope_region(actor), limit=limit)
