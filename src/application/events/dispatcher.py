from __future__ import annotations

import logging
from typing import Iterable
from uuid import UUID

from src.application.events.models import (
    CattleApprovedEvent,
    CattleDeniedEvent,
    CattleForwardedEvent,
    CattleRegisteredEvent,
    CattleRejectedEvent,
    IdentificationCompletedEvent,
    IdentificationFailedEvent,
    IdentificationRequestedEvent,
    IdentificationStartedEvent,
    TransferAcceptedEvent,
    TransferCancelledEvent,
    TransferInitiatedEvent,
    TransferRejectedEvent,
    VerificationOverdueEvent,
)
from src.application.notifications.factory import build_notification
from src.application.notifications.types import NotificationType
from src.domain.value_objects.role import Role
from src.infrastructure.repos.accounts_sqlalchemy import AccountsSQLAlchemyRepository
from src.infrastructure.repos.notifications_sqlalchemy import NotificationsSQLAlchemyRepository
from src.infrastructure.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


async def dispatch_events(session_factory, events: Iterable[object]) -> None:
    """
    Dispatch events post-commit. Uses a transient session for reads and sending notifications.
    Safe to call in a background task.
    """
    events = list(events)
    if not events:
        return

    async with session_factory() as session:
        accounts = AccountsSQLAlchemyRepository(session)
        notification_service = NotificationService(NotificationsSQLAlchemyRepository(session))

        for event in events:
            try:
                await _handle(accounts, notification_service, event)
            except Exception as e:
                logger.error(
                    "Error dispatching event %s: %s", type(event).__name__, e, exc_info=True
                )


async def _reviewer_ids(
    accounts: AccountsSQLAlchemyRepository, role: Role, region: str
) -> list[UUID]:
    return [account.id for account in await accounts.list_reviewers(role, region)]


async def _handle(
    accounts: AccountsSQLAlchemyRepository,
    notification_service: NotificationService,
    e: object,
) -> None:
    send = notification_service.send_notification

    if isinstance(e, CattleRegisteredEvent):
        built = build_notification(
            NotificationType.CATTLE_REGISTERED,
            cattle_id=e.cattle_id,
            cattle_code=e.cattle_code,
            owner_id=e.owner_id,
            owner_name=e.owner_name,
            region=e.region,
            district=e.district,
            turnaround_hours=e.turnaround_hours,
        )
        recipients = await _reviewer_ids(accounts, Role.REGIONAL_ADMIN, e.region)
        if not recipients:
            logger.warning("No regional admin available for region=%s", e.region)
        await notification_service.send_many(recipients, built)

    elif isinstance(e, CattleForwardedEvent):
        recipients = await _reviewer_ids(accounts, Role.M_ADMIN, e.region)
        if not recipients:
            logger.warning("No identifier admin available for region=%s", e.region)
        await notification_service.send_many(
            recipients,
            build_notification(
                NotificationType.CATTLE_FORWARDED,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
            ),
        )
        await send(
            e.owner_id,
            build_notification(
                NotificationType.CATTLE_FORWARDED_TO_OWNER,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
            ),
        )

    elif isinstance(e, CattleDeniedEvent):
        await send(
            e.owner_id,
            build_notification(
                NotificationType.CATTLE_DENIED,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
                reason=e.reason,
            ),
        )

    elif isinstance(e, CattleApprovedEvent):
        await send(
            e.owner_id,
            build_notification(
                NotificationType.CATTLE_APPROVED,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
            ),
        )

    elif isinstance(e, CattleRejectedEvent):
        await send(
            e.owner_id,
            build_notification(
                NotificationType.CATTLE_REJECTED,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
                reason=e.reason,
            ),
        )

    elif isinstance(e, VerificationOverdueEvent):
        await notification_service.send_many(
            await _reviewer_ids(accounts, Role.REGIONAL_ADMIN, e.region),
            build_notification(
                NotificationType.VERIFICATION_OVERDUE,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
                deadline=e.deadline,
            ),
        )

    elif isinstance(e, IdentificationRequestedEvent):
        await notification_service.send_many(
            await _reviewer_ids(accounts, Role.M_ADMIN, e.region),
            build_notification(
                NotificationType.IDENTIFICATION_REQUESTED,
                request_id=e.request_id,
                request_code=e.request_code,
                requester_name=e.requester_name,
            ),
        )

    elif isinstance(e, IdentificationStartedEvent):
        await send(
            e.requester_id,
            build_notification(
                NotificationType.IDENTIFICATION_STARTED,
                request_id=e.request_id,
                request_code=e.request_code,
            ),
        )

    elif isinstance(e, IdentificationCompletedEvent):
        await send(
            e.requester_id,
            build_notification(
                NotificationType.IDENTIFICATION_COMPLETED,
                request_id=e.request_id,
                request_code=e.request_code,
                found=e.found,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
                time_taken_seconds=e.time_taken_seconds,
                message=e.message,
            ),
        )

    elif isinstance(e, IdentificationFailedEvent):
        await send(
            e.requester_id,
            build_notification(
                NotificationType.IDENTIFICATION_FAILED,
                request_id=e.request_id,
                request_code=e.request_code,
                message=e.message,
            ),
        )

    elif isinstance(e, TransferInitiatedEvent):
        await send(
            e.to_owner_id,
            build_notification(
                NotificationType.TRANSFER_REQUEST_RECEIVED,
                transfer_id=e.transfer_id,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
                breed=e.breed,
                sender_name=e.sender_name,
            ),
        )

    elif isinstance(e, TransferAcceptedEvent):
        await send(
            e.from_owner_id,
            build_notification(
                NotificationType.TRANSFER_REQUEST_ACCEPTED,
                transfer_id=e.transfer_id,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
            ),
        )

    elif isinstance(e, TransferRejectedEvent):
        await send(
            e.from_owner_id,
            build_notification(
                NotificationType.TRANSFER_REQUEST_REJECTED,
                transfer_id=e.transfer_id,
                cattle_id=e.cattle_id,
                cattle_code=e.cattle_code,
                message=e.message,
            ),
        )

    elif isinstance(e, TransferCancelledEvent):
        built = build_notification(
            NotificationType.TRANSFER_REQUEST_CANCELLED,
            transfer_id=e.transfer_id,
            cattle_id=e.cattle_id,
            cattle_code=e.cattle_code,
            reason=e.reason,
        )
        # Expiry has no actor: both parties hear about it
        recipients = [e.to_owner_id] if e.actor_id else [e.from_owner_id, e.to_owner_id]
        await notification_service.send_many(recipients, built)

    else:
        logger.debug("No handler for event %s", type(e).__name__)
