from __future__ import annotations

import logging
from datetime import datetime, timezone

from src.application.events.dispatcher import dispatch_events
from src.application.use_cases.cattle import flag_overdue
from src.application.use_cases.identification import expire_stale as expire_identifications
from src.application.use_cases.transfers import expire_stale as expire_transfers
from src.infrastructure.db.session import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)


async def expire_stale_requests(session_factory, *, now: datetime | None = None) -> dict[str, int]:
    """Fail expired identification requests and cancel expired transfers, then notify."""
    now = now or datetime.now(timezone.utc)
    counts: dict[str, int] = {}
    events: list = []

    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        counts["identification_requests"] = await expire_identifications.execute(uow, now=now)
        events.extend(uow.drain_events())

    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        counts["transfer_requests"] = await expire_transfers.execute(uow, now=now)
        events.extend(uow.drain_events())

    await dispatch_events(session_factory, events)
    logger.info(
        "Stale request sweep done: identification=%s transfer=%s",
        counts["identification_requests"],
        counts["transfer_requests"],
    )
    return counts


async def notify_overdue_verifications(session_factory, *, now: datetime | None = None) -> int:
    """Remind regional admins once about each registration past its review deadline."""
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        count = await flag_overdue.execute(uow, now=now)
        events = uow.drain_events()

    if events:
        await dispatch_events(session_factory, events)
    logger.info("Overdue verification check done: %s new reminder(s)", count)
    return count
