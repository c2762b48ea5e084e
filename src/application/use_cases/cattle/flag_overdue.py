from __future__ import annotations

import logging
from datetime import datetime, timezone

from src.application.events.models import VerificationOverdueEvent
from src.application.interfaces.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


async def execute(uow: UnitOfWork, *, now: datetime | None = None) -> int:
    """Emit one overdue event per registration past its review deadline.

    Each registration is reminded about once; the verification state is never changed.
    """
    now = now or datetime.now(timezone.utc)
    overdue = await uow.cattle.list_overdue(now, unnotified_only=True)
    if not overdue:
        return 0

    marked = set(await uow.cattle.mark_overdue_notified([cattle.id for cattle in overdue], now))
    for cattle in overdue:
        if cattle.id not in marked:
            continue
        cattle.overdue_notified_at = now
        uow.add_event(
            VerificationOverdueEvent(
                cattle_id=cattle.id,
                cattle_code=cattle.cattle_id,
                region=cattle.region,
                deadline=cattle.turnaround_deadline,
            )
        )
    await uow.commit()
    if marked:
        logger.info("Flagged %s overdue registration(s)", len(marked))
    return len(marked)
