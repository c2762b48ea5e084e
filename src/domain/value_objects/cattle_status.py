from __future__ import annotations

from enum import Enum

from src.domain.value_objects.transitions import TransitionTable


class LifecycleStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVE = "archive"
    TRANSIT = "transit"


class LifecycleEvent(str, Enum):
    ARCHIVE = "archive"
    RESTORE = "restore"


class VerificationStatus(str, Enum):
    PENDING_REGIONAL_REVIEW = "pending_regional_review"
    FORWARDED_TO_M_ADMIN = "forwarded_to_m_admin"
    DENIED_BY_REGIONAL = "denied_by_regional"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationEvent(str, Enum):
    FORWARD = "forward"
    DENY = "deny"
    APPROVE = "approve"
    REJECT = "reject"


VERIFICATION_TRANSITIONS: TransitionTable[VerificationStatus, VerificationEvent] = TransitionTable(
    "cattle registration",
    {
        (
            VerificationStatus.PENDING_REGIONAL_REVIEW,
            VerificationEvent.FORWARD,
        ): VerificationStatus.FORWARDED_TO_M_ADMIN,
        (
            VerificationStatus.PENDING_REGIONAL_REVIEW,
            VerificationEvent.DENY,
        ): VerificationStatus.DENIED_BY_REGIONAL,
        (
            VerificationStatus.FORWARDED_TO_M_ADMIN,
            VerificationEvent.APPROVE,
        ): VerificationStatus.APPROVED,
        (
            VerificationStatus.FORWARDED_TO_M_ADMIN,
            VerificationEvent.REJECT,
        ): VerificationStatus.REJECTED,
    },
)
