from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.models.notification import NotificationPriority
from src.utils.datetime_tz import format_day_date

from .types import NotificationType


@dataclass
class BuiltNotification:
    type: str
    title: str
    message: str
    data: dict[str, Any]
    priority: NotificationPriority = field(default=NotificationPriority.MEDIUM)


def _short_label(s: str | None, *, max_len: int = 24) -> str | None:
    if not s:
        return s
    s = str(s)
    return s if len(s) <= max_len else (s[: max(0, max_len - 1)] + "…")


def _id(value: Any) -> str | None:
    return str(value) if value is not None else None


def build_notification(ntype: str, **kwargs: Any) -> BuiltNotification:
    """
    Central place to build notification title/message/data from templates.
    Keep strings easy to find and translate.
    """
    cattle_code: str = kwargs.get("cattle_code") or "cattle"
    cattle_data = {
        "cattle_id": _id(kwargs.get("cattle_id")),
        "cattle_code": kwargs.get("cattle_code"),
    }

    if ntype == NotificationType.CATTLE_REGISTERED:
        owner = _short_label(kwargs.get("owner_name")) or "a farmer"
        district = kwargs.get("district")
        region = kwargs.get("region", "")
        where = f"{district}, {region}" if district else region
        hours = kwargs.get("turnaround_hours", 48)
        message = (
            f"New cattle ({cattle_code}) registered by {owner} in {where}. "
            f"Please verify within {hours} hours."
        )
        return BuiltNotification(
            ntype,
            "New Cattle Registration",
            message,
            {**cattle_data, "owner_id": _id(kwargs.get("owner_id")), "region": region},
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.CATTLE_FORWARDED:
        return BuiltNotification(
            ntype,
            "New Cattle for Identification",
            f"Cattle {cattle_code} forwarded by Regional Admin for identification and approval.",
            cattle_data,
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.CATTLE_FORWARDED_TO_OWNER:
        return BuiltNotification(
            ntype,
            "Cattle Forwarded for Identification",
            f"Your cattle {cattle_code} has been forwarded for identification "
            "by the regional admin.",
            cattle_data,
        )

    if ntype == NotificationType.CATTLE_DENIED:
        reason = kwargs.get("reason", "")
        return BuiltNotification(
            ntype,
            "Cattle Registration Denied",
            f"Your cattle registration ({cattle_code}) was denied by regional admin. "
            f"Reason: {reason}",
            {**cattle_data, "reason": reason},
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.CATTLE_APPROVED:
        return BuiltNotification(
            ntype,
            "Cattle Registration Approved",
            f"Your cattle registration ({cattle_code}) has been approved and is now active.",
            cattle_data,
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.CATTLE_REJECTED:
        reason = kwargs.get("reason", "")
        return BuiltNotification(
            ntype,
            "Cattle Registration Rejected",
            f"Your cattle registration ({cattle_code}) has been rejected. Reason: {reason}",
            {**cattle_data, "reason": reason},
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.VERIFICATION_OVERDUE:
        deadline = kwargs.get("deadline")
        return BuiltNotification(
            ntype,
            "Verification Overdue",
            f"Cattle {cattle_code} has been waiting for review since "
            f"{format_day_date(deadline, include_time=True)}.",
            {**cattle_data, "deadline": deadline.isoformat() if deadline else None},
            NotificationPriority.URGENT,
        )

    request_data = {
        "request_id": _id(kwargs.get("request_id")),
        "request_code": kwargs.get("request_code"),
    }
    request_code = kwargs.get("request_code") or ""

    if ntype == NotificationType.IDENTIFICATION_REQUESTED:
        requester = _short_label(kwargs.get("requester_name")) or "A farmer"
        return BuiltNotification(
            ntype,
            "New Cattle Identification Request",
            f"{requester} has submitted a cattle identification request.",
            request_data,
        )

    if ntype == NotificationType.IDENTIFICATION_STARTED:
        return BuiltNotification(
            ntype,
            "Identification In Progress",
            f"Your cattle identification request {request_code} is now being processed.",
            request_data,
        )

    if ntype == NotificationType.IDENTIFICATION_COMPLETED:
        found = bool(kwargs.get("found"))
        if found:
            seconds = kwargs.get("time_taken_seconds") or 0
            title = "Cattle Identified!"
            message = (
                f"Your cattle has been identified as {cattle_code}. "
                f"Processing completed in {seconds} seconds."
            )
        else:
            title = "Identification Complete"
            message = "No match found for your identification request."
            extra = kwargs.get("message")
            if extra:
                message += f" {extra}"
        return BuiltNotification(
            ntype,
            title,
            message,
            {**request_data, **cattle_data, "found": found},
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.IDENTIFICATION_FAILED:
        reason = kwargs.get("message", "")
        return BuiltNotification(
            ntype,
            "Identification Failed",
            f"Your identification request failed: {reason}",
            {**request_data, "message": reason},
            NotificationPriority.HIGH,
        )

    transfer_data = {**cattle_data, "transfer_id": _id(kwargs.get("transfer_id"))}

    if ntype == NotificationType.TRANSFER_REQUEST_RECEIVED:
        sender = _short_label(kwargs.get("sender_name")) or "A farmer"
        breed = kwargs.get("breed")
        label = f"{cattle_code} ({breed})" if breed else cattle_code
        return BuiltNotification(
            ntype,
            "New Transfer Request",
            f"{sender} wants to transfer cattle {label} to you.",
            transfer_data,
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.TRANSFER_REQUEST_ACCEPTED:
        return BuiltNotification(
            ntype,
            "Transfer Accepted",
            f"Your transfer request for cattle {cattle_code} has been accepted.",
            transfer_data,
            NotificationPriority.HIGH,
        )

    if ntype == NotificationType.TRANSFER_REQUEST_REJECTED:
        message = f"Your transfer request for cattle {cattle_code} has been rejected."
        response = kwargs.get("message")
        if response:
            message += f" Message: {response}"
        return BuiltNotification(ntype, "Transfer Rejected", message, transfer_data)

    if ntype == NotificationType.TRANSFER_REQUEST_CANCELLED:
        message = f"The transfer request for cattle {cattle_code} has been cancelled."
        reason = kwargs.get("reason")
        if reason:
            message += f" Reason: {reason}"
        return BuiltNotification(ntype, "Transfer Cancelled", message, transfer_data)

    # Fallback to pass-through
    return BuiltNotification(
        ntype,
        title=str(kwargs.get("title", "Notification")),
        message=str(kwargs.get("message", "")),
        data=dict(kwargs.get("data", {})),
    )
