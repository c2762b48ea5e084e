from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.domain.models.cattle import Cattle, ImageFile, Location, generate_cattle_code
from src.domain.value_objects.cattle_status import (
    VERIFICATION_TRANSITIONS,
    LifecycleStatus,
    VerificationEvent,
    VerificationStatus,
)
from src.domain.value_objects.image_category import (
    REQUIRED_IMAGE_COUNTS,
    TOTAL_REQUIRED_IMAGES,
    ImageCategory,
)
from src.domain.value_objects.transitions import InvalidTransition

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _images(counts=None) -> dict[ImageCategory, list[ImageFile]]:
    counts = counts or REQUIRED_IMAGE_COUNTS
    return {
        category: [
            ImageFile(filename=f"{category.value}{i}.jpg", path=f"p/{category.value}/{i}")
            for i in range(count)
        ]
        for category, count in counts.items()
    }


def _register(**kwargs) -> Cattle:
    return Cattle.register(
        owner_id=kwargs.pop("owner_id", uuid4()),
        location=Location(state="Karnataka", district="Mysuru", pin_code="570001"),
        breed="Gir",
        age=3,
        images=kwargs.pop("images", _images()),
        now=NOW,
        **kwargs,
    )


def test_generate_cattle_code_shape():
    code = generate_cattle_code()
    assert code.startswith("C")
    assert len(code) == 13
    assert code[1:].isdigit()


def test_register_starts_in_transit_with_deadline():
    cattle = _register(turnaround_hours=24)
    assert cattle.status is LifecycleStatus.TRANSIT
    assert cattle.verification_status is VerificationStatus.PENDING_REGIONAL_REVIEW
    assert cattle.temporary_id == f"TEMP-{cattle.cattle_id}"
    assert cattle.turnaround_deadline == NOW + timedelta(hours=24)
    assert cattle.total_images == TOTAL_REQUIRED_IMAGES == 14
    assert cattle.version == 1
    assert cattle.region == "Karnataka"


def test_register_fills_missing_categories():
    cattle = _register(images={ImageCategory.MUZZLE: _images()[ImageCategory.MUZZLE]})
    assert set(cattle.images) == set(ImageCategory)
    assert cattle.images[ImageCategory.FACE] == []


def test_image_set_problems_exact_and_partial():
    partial = _register(images={ImageCategory.MUZZLE: _images()[ImageCategory.MUZZLE]})
    exact_problems = partial.image_set_problems(exact=True)
    assert "face" in exact_problems
    assert "muzzle" not in exact_problems
    assert partial.image_set_problems(exact=False) == {}

    too_many = _register(images=_images({ImageCategory.FULL_BODY_LEFT: 2}))
    assert "full_body_left" in too_many.image_set_problems(exact=False)


def test_full_verification_path_to_approved():
    cattle = _register()
    reviewer, identifier = uuid4(), uuid4()

    cattle.forward_to_m_admin(reviewer, NOW)
    assert cattle.verification_status is VerificationStatus.FORWARDED_TO_M_ADMIN
    assert cattle.regional_reviewed_by == reviewer
    assert cattle.forwarded_at == NOW

    cattle.approve(identifier, NOW)
    assert cattle.verification_status is VerificationStatus.APPROVED
    assert cattle.status is LifecycleStatus.ACTIVE
    assert cattle.temporary_id is None
    assert cattle.identification_history[-1].method == "admin_approval"
    assert cattle.version == 3


def test_denied_and_rejected_are_terminal():
    denied = _register()
    denied.deny_by_regional_admin(uuid4(), "blurry photos", NOW)
    assert denied.regional_denial_reason == "blurry photos"
    with pytest.raises(InvalidTransition):
        denied.forward_to_m_admin(uuid4(), NOW)

    rejected = _register()
    rejected.forward_to_m_admin(uuid4(), NOW)
    rejected.reject(uuid4(), "duplicate", NOW)
    with pytest.raises(InvalidTransition):
        rejected.approve(uuid4(), NOW)

    for state in (VerificationStatus.DENIED_BY_REGIONAL, VerificationStatus.REJECTED,
                  VerificationStatus.APPROVED):
        assert not any(VERIFICATION_TRANSITIONS.allows(state, event) for event in VerificationEvent)


def test_cannot_approve_before_forward():
    cattle = _register()
    with pytest.raises(InvalidTransition) as excinfo:
        cattle.approve(uuid4(), NOW)
    assert excinfo.value.event is VerificationEvent.APPROVE
    assert cattle.verification_status is VerificationStatus.PENDING_REGIONAL_REVIEW
    assert cattle.version == 1


def test_archive_and_restore():
    cattle = _register()
    user = uuid4()
    cattle.archive(user, NOW)
    assert cattle.status is LifecycleStatus.ARCHIVE
    assert cattle.archived_by == user
    with pytest.raises(InvalidTransition):
        cattle.archive(user, NOW)

    cattle.restore(NOW)
    assert cattle.status is LifecycleStatus.TRANSIT
    assert cattle.archived_at is None
    with pytest.raises(InvalidTransition):
        cattle.restore(NOW)


def test_restore_approved_cattle_returns_to_active():
    cattle = _register()
    cattle.forward_to_m_admin(uuid4(), NOW)
    cattle.approve(uuid4(), NOW)
    cattle.archive(cattle.owner_id, NOW)
    cattle.restore(NOW)
    assert cattle.status is LifecycleStatus.ACTIVE


def test_is_overdue_only_while_awaiting_regional_review():
    cattle = _register(turnaround_hours=48)
    assert not cattle.is_overdue(NOW + timedelta(hours=47))
    assert cattle.is_overdue(NOW + timedelta(hours=49))
    cattle.forward_to_m_admin(uuid4(), NOW)
    assert not cattle.is_overdue(NOW + timedelta(hours=49))


def test_transfer_to_appends_history():
    cattle = _register()
    new_owner, transfer_id = uuid4(), uuid4()
    cattle.transfer_to(new_owner, transfer_id, NOW)
    assert cattle.owner_id == new_owner
    assert cattle.transfer_history == [transfer_id]


def test_image_file_dict_keeps_uploaded_at():
    image = ImageFile(filename="a.jpg", path="x/a.jpg", size=10, mimetype="image/jpeg",
                      uploaded_at=NOW)
    restored = ImageFile.from_dict(image.to_dict())
    assert restored.uploaded_at == NOW
    assert restored.path == "x/a.jpg"
