from __future__ import annotations


class NotificationType:
    """Canonical notification type names used across backend/frontend."""

    CATTLE_REGISTERED = "cattle_registered"
    CATTLE_FORWARDED = "cattle_forwarded"
    CATTLE_FORWARDED_TO_OWNER = "cattle_forwarded_to_owner"
    CATTLE_DENIED = "cattle_denied"
    CATTLE_APPROVED = "cattle_approved"
    CATTLE_REJECTED = "cattle_rejected"
    VERIFICATION_OVERDUE = "verification_overdue"
    IDENTIFICATION_REQUESTED = "identification_requested"
    IDENTIFICATION_STARTED = "identification_started"
    IDENTIFICATION_COMPLETED = "identification_completed"
    IDENTIFICATION_FAILED = "identification_failed"
    TRANSFER_REQUEST_RECEIVED = "transfer_request_received"
    TRANSFER_REQUEST_ACCEPTED = "transfer_request_accepted"
    TRANSFER_REQUEST_REJECTED = "transfer_request_rejected"
    TRANSFER_REQUEST_CANCELLED = "transfer_request_cancelled"


ALL_TYPES = {
    NotificationType.CATTLE_REGISTERED,
    NotificationType.CATTLE_FORWARDED,
    NotificationType.CATTLE_FORWARDED_TO_OWNER,
    NotificationType.CATTLE_DENIED,
    NotificationType.CATTLE_APPROVED,
    NotificationType.CATTLE_REJECTED,
    NotificationType.VERIFICATION_OVERDUE,
    NotificationType.IDENTIFICATION_REQUESTED,
    NotificationType.IDENTIFICATION_STARTED,
    NotificationType.IDENTIFICATION_COMPLETED,
    NotificationType.IDENTIFICATION_FAILED,
    NotificationType.TRANSFER_REQUEST_RECEIVED,
    NotificationType.TRANSFER_REQUEST_ACCEPTED,
    NotificationType.TRANSFER_REQUEST_REJECTED,
    NotificationType.TRANSFER_REQUEST_CANCELLED,
}
