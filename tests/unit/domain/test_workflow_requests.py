from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from src.domain.models.cattle import ImageFile
from src.domain.models.identification_request import (
    IdentificationRequest,
    IdentificationStatus,
)
from src.domain.models.transfer_request import TransferRequest, TransferStatus, TransferType
from src.domain.value_objects.transitions import InvalidTransition

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _identification(**kwargs) -> IdentificationRequest:
    return IdentificationRequest.create(
        user_id=uuid4(),
        region="Karnataka",
        image=ImageFile(filename="scan.jpg", path="identification/scan.jpg"),
        now=NOW,
        **kwargs,
    )


def test_identification_request_defaults():
    request = _identification()
    assert request.request_id.startswith("IDR-")
    assert request.status is IdentificationStatus.PENDING
    assert request.expires_at == NOW + timedelta(days=7)


def test_identification_drops_half_location():
    request = _identification(latitude=12.3, longitude=None, address="Somewhere")
    assert request.latitude is None
    assert request.address is None


def test_identification_complete_measures_time_taken():
    request = _identification()
    admin, cattle_ref = uuid4(), uuid4()
    request.start_processing(admin, NOW)
    request.complete(admin, found=True, cattle_ref=cattle_ref, cattle_code="C1",
                     confidence=91.5, now=NOW + timedelta(minutes=5))
    assert request.status is IdentificationStatus.COMPLETED
    assert request.time_taken_seconds == 300
    assert request.result.found
    assert request.result.cattle_ref == cattle_ref
    assert request.result.message == "Cattle identified successfully"


def test_identification_complete_from_pending_without_start():
    request = _identification()
    request.complete(uuid4(), found=False, now=NOW)
    assert request.status is IdentificationStatus.COMPLETED
    assert request.time_taken_seconds is None
    assert request.result.message == "No match found in database"


def test_identification_found_requires_cattle():
    request = _identification()
    with pytest.raises(ValueError):
        request.complete(uuid4(), found=True, now=NOW)


def test_identification_terminal_states():
    request = _identification()
    request.cancel(request.user_id, "changed my mind", NOW)
    with pytest.raises(InvalidTransition):
        request.start_processing(uuid4(), NOW)
    with pytest.raises(InvalidTransition):
        request.mark_failed("late", NOW)


def test_identification_is_expired():
    request = _identification(expiry_days=1)
    assert not request.is_expired(NOW + timedelta(hours=23))
    assert request.is_expired(NOW + timedelta(days=2))
    request.mark_failed("Request expired", NOW)
    assert not request.is_expired(NOW + timedelta(days=2))


def test_transfer_rejects_self_transfer():
    owner = uuid4()
    with pytest.raises(ValueError):
        TransferRequest.initiate(cattle_ref=uuid4(), from_owner_id=owner, to_owner_id=owner)


def test_transfer_accept_then_no_more_transitions():
    transfer = TransferRequest.initiate(
        cattle_ref=uuid4(),
        from_owner_id=uuid4(),
        to_owner_id=uuid4(),
        transfer_type=TransferType.SELL,
        price=Decimal("25000.00"),
        now=NOW,
    )
    assert transfer.expires_at == NOW + timedelta(days=30)
    transfer.accept(NOW)
    assert transfer.status is TransferStatus.ACCEPTED
    assert transfer.completed_at == NOW
    with pytest.raises(InvalidTransition):
        transfer.cancel(transfer.from_owner_id, None, NOW)
    with pytest.raises(InvalidTransition):
        transfer.reject("no", NOW)


def test_transfer_cancel_without_actor_for_expiry():
    transfer = TransferRequest.initiate(
        cattle_ref=uuid4(), from_owner_id=uuid4(), to_owner_id=uuid4(), expiry_days=1, now=NOW
    )
    assert transfer.is_expired(NOW + timedelta(days=2))
    transfer.cancel(None, "Expired", NOW + timedelta(days=2))
    assert transfer.status is TransferStatus.CANCELLED
    assert transfer.cancelled_by is None
    assert transfer.version == 2
