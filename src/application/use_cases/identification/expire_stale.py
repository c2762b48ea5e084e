from __future__ import annotations

import logging
from datetime import datetime, timezone

from src.application.events.models import IdentificationFailedEvent
from src.application.interfaces.unit_of_work import UnitOfWork
from src.domain.models.identification_request import EXPIRED_MESSAGE

logger = logging.getLogger(__name__)


async def execute(uow: UnitOfWork, *, now: datetime | None = None) -> int:
    """Fail every open request past its expiry. Returns how many were expired."""
    now = now or datetime.now(timezone.utc)
    expired = 0
    for request in await uow.identification_requests.list_stale(now):
        if not request.is_expired(now):
            continue
        expected_version = request.version
        request.mark_failed(EXPIRED_MESSAGE, now)
        if await uow.identification_requests.save(request, expected_version) is None:
            logger.info("Identification request %s changed during sweep; skipped", request.id)
            continue
        expired += 1
        uow.add_event(
            IdentificationFailedEvent(
                actor_id=None,
                request_id=request.id,
                request_code=request.request_id,
                requester_id=request.user_id,
                message=EXPIRED_MESSAGE,
            )
        )
    await uow.commit()
    if expired:
        logger.info("Expired %s identification request(s)", expired)
    return expired
