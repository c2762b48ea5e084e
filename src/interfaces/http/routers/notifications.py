from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from src.application.authorization import Actor
from src.infrastructure.db.session import SQLAlchemyUnitOfWork
from src.interfaces.http.deps import get_actor, get_uow
from src.interfaces.http.schemas.notifications import (
    MarkAsReadRequest,
    MarkAsReadResponse,
    NotificationListResponse,
    NotificationSchema,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    actor: Actor = Depends(get_actor),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> NotificationListResponse:
    """Get the caller's notifications, newest first."""
    notifications = await uow.notifications.list_by_recipient(
        actor.account_id,
        unread_only=unread_only,
        limit=limit,
        offset=offset,
    )
    unread_count = await uow.notifications.count_unread(actor.account_id)

    return NotificationListResponse(
        notifications=[NotificationSchema.model_validate(n) for n in notifications],
        total=len(notifications),
        unread_count=unread_count,
    )


@router.post("/read", response_model=MarkAsReadResponse)
async def mark_notifications_as_read(
    payload: MarkAsReadRequest,
    actor: Actor = Depends(get_actor),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> MarkAsReadResponse:
    """Mark specific notifications as read."""
    marked_count = await uow.notifications.mark_as_read(actor.account_id, payload.notification_ids)
    await uow.commit()
    return MarkAsReadResponse(marked_count=marked_count)


@router.post("/read-all", response_model=MarkAsReadResponse)
async def mark_all_notifications_as_read(
    actor: Actor = Depends(get_actor),
    uow: SQLAlchemyUnitOfWork = Depends(get_uow),
) -> MarkAsReadResponse:
    """Mark all of the caller's notifications as read."""
    marked_count = await uow.notifications.mark_all_as_read(actor.account_id)
    await uow.commit()
    logger.debug("Marked %s notification(s) read for %s", marked_count, actor.account_id)
    return MarkAsReadResponse(marked_count=marked_count)
