from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.application.authorization import Actor
from src.application.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.application.events.models import (
    CattleApprovedEvent,
    CattleForwardedEvent,
    CattleRegisteredEvent,
)
from src.application.use_cases.cattle import (
    approve_cattle,
    archive_cattle,
    cattle_statistics,
    delete_cattle,
    deny_cattle,
    flag_overdue,
    forward_cattle,
    register_cattle,
)
from src.domain.models.account import Account
from src.domain.models.cattle import ImageFile
from src.domain.models.identification_request import IdentificationRequest
from src.domain.models.transfer_request import TransferRequest
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus
from src.domain.value_objects.image_category import REQUIRED_IMAGE_COUNTS
from src.domain.value_objects.role import Role


def _images(counts=None) -> dict[str, list[ImageFile]]:
    if counts is None:
        counts = {c.value: n for c, n in REQUIRED_IMAGE_COUNTS.items()}
    return {
        name: [
            ImageFile(filename=f"{name}{i}.jpg", path=f"cattle/{name}/{i}.jpg") for i in range(n)
        ]
        for name, n in counts.items()
    }


def _farmer(uow, region="Karnataka", district="Mysuru") -> Actor:
    account = uow.accounts.put(
        Account.create("Ravi", f"ravi{uuid4().hex[:6]}@example.test", Role.FARMER,
                       region=region, district=district)
    )
    return Actor(account_id=account.id, role=Role.FARMER, region=region, full_name="Ravi")


def _admin(role: Role, region: str | None = "Karnataka") -> Actor:
    return Actor(account_id=uuid4(), role=role, region=region, full_name="Admin")


async def _register(uow, actor, **kwargs):
    payload = register_cattle.RegisterCattleInput(
        breed=kwargs.pop("breed", "Gir"), age=3, images=kwargs.pop("images", _images())
    )
    return await register_cattle.execute(uow, actor, payload, **kwargs)


async def test_register_cattle_creates_holding_and_event(uow):
    farmer = _farmer(uow)
    cattle = await _register(uow, farmer, turnaround_hours=12)

    assert cattle.owner_id == farmer.account_id
    assert cattle.location.state == "Karnataka"
    assert (farmer.account_id, cattle.id) in uow.holdings.pairs
    assert uow.state.commits == 1
    [event] = uow.events
    assert isinstance(event, CattleRegisteredEvent)
    assert event.region == "Karnataka"
    assert event.turnaround_hours == 12


async def test_register_cattle_denies_admins(uow):
    with pytest.raises(AuthorizationError):
        await _register(uow, _admin(Role.REGIONAL_ADMIN))
    assert uow.cattle.items == {}


async def test_register_cattle_requires_owner_address(uow):
    farmer = _farmer(uow, district=None)
    with pytest.raises(ValidationError) as excinfo:
        await _register(uow, farmer)
    assert "address" in excinfo.value.details


async def test_register_cattle_rejects_incomplete_images(uow):
    farmer = _farmer(uow)
    with pytest.raises(ValidationError) as excinfo:
        await _register(uow, farmer, images=_images({"muzzle": 2, "face": 3}))
    assert set(excinfo.value.details) >= {"muzzle", "left", "full_body_right"}
    assert uow.events == []


async def test_register_cattle_partial_images_when_allowed(uow):
    farmer = _farmer(uow)
    cattle = await _register(
        uow, farmer, images=_images({"muzzle": 1}), allow_partial_images=True
    )
    assert cattle.total_images == 1

    with pytest.raises(ValidationError):
        await _register(uow, farmer, images={}, allow_partial_images=True)


async def test_register_cattle_rejects_unknown_category(uow):
    farmer = _farmer(uow)
    images = _images()
    images["tail"] = []
    with pytest.raises(ValidationError) as excinfo:
        await _register(uow, farmer, images=images)
    assert "tail" in excinfo.value.details


async def test_forward_and_approve(uow):
    farmer = _farmer(uow)
    cattle = await _register(uow, farmer)
    uow.events.clear()

    forwarded = await forward_cattle.execute(uow, _admin(Role.REGIONAL_ADMIN), cattle.id)
    assert forwarded.verification_status is VerificationStatus.FORWARDED_TO_M_ADMIN
    approved = await approve_cattle.execute(uow, _admin(Role.M_ADMIN), cattle.id)
    assert approved.status is LifecycleStatus.ACTIVE
    assert [type(e) for e in uow.events] == [CattleForwardedEvent, CattleApprovedEvent]


async def test_forward_out_of_region_reads_as_missing(uow):
    cattle = await _register(uow, _farmer(uow))
    with pytest.raises(NotFoundError):
        await forward_cattle.execute(uow, _admin(Role.REGIONAL_ADMIN, "Gujarat"), cattle.id)


async def test_forward_requires_reviewer_role(uow):
    cattle = await _register(uow, _farmer(uow))
    with pytest.raises(AuthorizationError):
        await forward_cattle.execute(uow, _admin(Role.M_ADMIN), cattle.id)


async def test_forward_twice_conflicts(uow):
    cattle = await _register(uow, _farmer(uow))
    reviewer = _admin(Role.REGIONAL_ADMIN)
    await forward_cattle.execute(uow, reviewer, cattle.id)
    with pytest.raises(ConflictError):
        await forward_cattle.execute(uow, reviewer, cattle.id)


async def test_forward_lost_race_conflicts(uow):
    cattle = await _register(uow, _farmer(uow))
    uow.cattle.fail_next_save = True
    with pytest.raises(ConflictError):
        await forward_cattle.execute(uow, _admin(Role.SUPER_ADMIN, None), cattle.id)
    assert uow.state.commits == 1


async def test_deny_requires_reason(uow):
    cattle = await _register(uow, _farmer(uow))
    with pytest.raises(ValidationError):
        await deny_cattle.execute(uow, _admin(Role.REGIONAL_ADMIN), cattle.id, "   ")
    assert cattle.verification_status is VerificationStatus.PENDING_REGIONAL_REVIEW


async def test_approve_requires_complete_image_set(uow):
    farmer = _farmer(uow)
    cattle = await _register(
        uow, farmer, images=_images({"muzzle": 3}), allow_partial_images=True
    )
    await forward_cattle.execute(uow, _admin(Role.REGIONAL_ADMIN), cattle.id)
    with pytest.raises(ValidationError):
        await approve_cattle.execute(uow, _admin(Role.M_ADMIN), cattle.id)
    assert cattle.verification_status is VerificationStatus.FORWARDED_TO_M_ADMIN


async def test_archive_by_other_farmer_is_not_found(uow):
    cattle = await _register(uow, _farmer(uow))
    with pytest.raises(NotFoundError):
        await archive_cattle.execute(uow, _farmer(uow), cattle.id)


async def test_delete_blocked_by_pending_transfer(uow):
    farmer = _farmer(uow)
    cattle = await _register(uow, farmer)
    await uow.transfer_requests.add(
        TransferRequest.initiate(
            cattle_ref=cattle.id, from_owner_id=farmer.account_id, to_owner_id=uuid4()
        )
    )
    with pytest.raises(ConflictError):
        await delete_cattle.execute(uow, farmer, cattle.id)
    assert cattle.id in uow.cattle.items


class RecordingStorage:
    def __init__(self) -> None:
        self.deleted: list[str] = []

    async def delete_objects(self, keys):
        self.deleted.extend(keys)
        return len(keys)


async def test_delete_removes_images_after_commit(uow):
    farmer = _farmer(uow)
    cattle = await _register(uow, farmer)
    storage = RecordingStorage()

    await delete_cattle.execute(uow, farmer, cattle.id, storage=storage)

    assert cattle.id not in uow.cattle.items
    assert not any(ref == cattle.id for _, ref in uow.holdings.pairs)
    assert len(storage.deleted) == 14


async def test_flag_overdue_emits_events_without_state_change(uow):
    cattle = await _register(uow, _farmer(uow), turnaround_hours=1)
    uow.events.clear()
    now = datetime.now(timezone.utc) + timedelta(hours=2)

    count = await flag_overdue.execute(uow, now=now)

    assert count == 1
    assert uow.events[0].cattle_id == cattle.id
    assert cattle.version == 1
    assert cattle.verification_status is VerificationStatus.PENDING_REGIONAL_REVIEW
    assert cattle.overdue_notified_at == now
    assert uow.state.commits == 2


async def test_flag_overdue_reminds_once(uow):
    await _register(uow, _farmer(uow), turnaround_hours=1)
    uow.events.clear()
    now = datetime.now(timezone.utc) + timedelta(hours=2)

    assert await flag_overdue.execute(uow, now=now) == 1
    assert await flag_overdue.execute(uow, now=now + timedelta(hours=1)) == 0
    assert len(uow.events) == 1
    assert await uow.cattle.count_overdue(now) == 1


async def test_delete_blocked_by_found_identification(uow):
    farmer = _farmer(uow)
    cattle = await _register(uow, farmer)
    request = IdentificationRequest.create(
        user_id=farmer.account_id,
        region="Karnataka",
        image=ImageFile(filename="scan.jpg", path="identification/scan.jpg"),
    )
    request.complete(uuid4(), found=True, cattle_ref=cattle.id, cattle_code=cattle.cattle_id)
    await uow.identification_requests.add(request)

    with pytest.raises(ConflictError):
        await delete_cattle.execute(uow, farmer, cattle.id)
    assert cattle.id in uow.cattle.items
    assert any(ref == cattle.id for _, ref in uow.holdings.pairs)


async def test_statistics_count_overdue_for_reviewers(uow):
    farmer = _farmer(uow)
    await _register(uow, farmer, turnaround_hours=1)
    counts = {
        "status": {"transit": 1},
        "verification_status": {"pending_regional_review": 1},
        "district": {"Mysuru": {"total": 1, "active": 0, "pending_verification": 1}},
    }

    async def count_by_status(filters):
        return counts

    uow.cattle.count_by_status = count_by_status
    later = datetime.now(timezone.utc) + timedelta(hours=2)

    stats = await cattle_statistics.execute(uow, _admin(Role.REGIONAL_ADMIN), now=later)
    assert stats.total == 1
    assert stats.overdue == 1
    assert stats.by_district["Mysuru"].pending_verification == 1
    assert stats.by_status["active"] == 0

    farmer_stats = await cattle_statistics.execute(uow, farmer, now=later)
    assert farmer_stats.overdue == 0
