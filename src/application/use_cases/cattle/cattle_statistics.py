from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.application.authorization import Actor
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle.list_cattle import build_filter
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus


@dataclass(slots=True)
class DistrictCounts:
    total: int = 0
    active: int = 0
    pending_verification: int = 0


@dataclass(slots=True)
class CattleStatistics:
    total: int
    by_status: dict[str, int] = field(default_factory=dict)
    by_verification_status: dict[str, int] = field(default_factory=dict)
    by_district: dict[str, DistrictCounts] = field(default_factory=dict)
    overdue: int = 0


async def execute(
    uow: UnitOfWork, actor: Actor, *, now: datetime | None = None
) -> CattleStatistics:
    filters = build_filter(actor)
    counts = await uow.cattle.count_by_status(filters)
    by_status = {status.value: 0 for status in LifecycleStatus}
    by_status.update(counts["status"])
    by_verification = {status.value: 0 for status in VerificationStatus}
    by_verification.update(counts["verification_status"])
    by_district = {
        district: DistrictCounts(**values)
        for district, values in counts.get("district", {}).items()
    }

    overdue = 0
    if actor.role.can_review_registrations():
        now = now or datetime.now(timezone.utc)
        overdue = await uow.cattle.count_overdue(now, region=filters.region)
    return CattleStatistics(
        total=sum(by_status.values()),
        by_status=by_status,
        by_verification_status=by_verification,
        by_district=by_district,
        overdue=overdue,
    )
