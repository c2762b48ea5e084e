from __future__ import annotations

import logging
from datetime import datetime, timezone

from src.application.events.models import TransferCancelledEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.transfer_request import EXPIRED_REASON

logger = logging.getLogger(__name__)


async def execute(uow: UnitOfWork, *, now: datetime | None = None) -> int:
    """Cancel pending transfers past their expiry. Returns how many were cancelled."""
    now = now or datetime.now(timezone.utc)
    expired = 0
    for transfer in await uow.transfer_requests.list_stale(now):
        if not transfer.is_expired(now):
            continue
        expected_version = transfer.version
        transfer.cancel(None, EXPIRED_REASON, now)
        if await uow.transfer_requests.save(transfer, expected_version) is None:
            logger.info("Transfer %s changed during sweep; skipped", transfer.id)
            continue
        expired += 1
        cattle = await uow.cattle.get(transfer.cattle_ref)
        uow.add_event(
            TransferCancelledEvent(
                actor_id=None,
                transfer_id=transfer.id,
                cattle_id=transfer.cattle_ref,
                cattle_code=cattle.cattle_id if cattle else "",
                from_owner_id=transfer.from_owner_id,
                to_owner_id=transfer.to_owner_id,
                reason=EXPIRED_REASON,
            )
        )
    await uow.commit()
    if expired:
        logger.info("Expired %s transfer request(s)", expired)
    return expired
