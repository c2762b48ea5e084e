from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from src.application.notifications.factory import build_notification
from src.application.notifications.types import ALL_TYPES, NotificationType
from src.domain.models.notification import NotificationPriority


def test_cattle_registered_mentions_location_and_deadline():
    cattle_id = uuid4()
    built = build_notification(
        NotificationType.CATTLE_REGISTERED,
        cattle_id=cattle_id,
        cattle_code="C123456780001",
        owner_name="Ravi Kumar",
        region="Karnataka",
        district="Mysuru",
        turnaround_hours=48,
    )
    assert built.title == "New Cattle Registration"
    assert "Mysuru, Karnataka" in built.message
    assert "48 hours" in built.message
    assert built.data["cattle_id"] == str(cattle_id)
    assert built.priority is NotificationPriority.HIGH


def test_denial_carries_reason():
    built = build_notification(
        NotificationType.CATTLE_DENIED, cattle_code="C1", reason="Photos unclear"
    )
    assert "Photos unclear" in built.message
    assert built.data["reason"] == "Photos unclear"


def test_overdue_is_urgent_and_formats_deadline():
    deadline = datetime(2026, 10, 2, 14, 30, tzinfo=timezone.utc)
    built = build_notification(
        NotificationType.VERIFICATION_OVERDUE, cattle_code="C9", deadline=deadline
    )
    assert built.priority is NotificationPriority.URGENT
    assert "Fri 02 Oct 14:30 UTC" in built.message
    assert built.data["deadline"] == deadline.isoformat()


def test_identification_completed_found_and_not_found():
    found = build_notification(
        NotificationType.IDENTIFICATION_COMPLETED,
        request_code="IDR-1",
        found=True,
        cattle_code="C77",
        time_taken_seconds=42,
    )
    assert found.title == "Cattle Identified!"
    assert "C77" in found.message
    assert "42 seconds" in found.message

    missing = build_notification(
        NotificationType.IDENTIFICATION_COMPLETED,
        request_code="IDR-2",
        found=False,
        message="Try a clearer muzzle photo.",
    )
    assert missing.data["found"] is False
    assert missing.message.endswith("Try a clearer muzzle photo.")


def test_transfer_received_truncates_long_sender_names():
    built = build_notification(
        NotificationType.TRANSFER_REQUEST_RECEIVED,
        cattle_code="C5",
        breed="Gir",
        sender_name="Venkataramanaiah Subramanyam Gowda",
        transfer_id=uuid4(),
    )
    assert "C5 (Gir)" in built.message
    assert "…" in built.message
    assert built.data["transfer_id"] is not None


def test_every_type_builds_a_title():
    for ntype in ALL_TYPES:
        built = build_notification(ntype, cattle_code="C1", request_code="IDR-1")
        assert built.type == ntype
        assert built.title
