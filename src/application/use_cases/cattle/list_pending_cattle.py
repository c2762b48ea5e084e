from __future__ import annotations

from src.application.authorization import Actor, ensure_role, scope_region
from src.application.errors import ValidationError
from src.application.interfaces.repositories.cattle import CattleFilter
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle.list_cattle import ListCattleResult
from src.domain.value_objects.cattle_status import VerificationStatus
from src.domain.value_objects.role import IDENTIFIER_ROLES, REVIEWER_ROLES

# Review queue per stage: who works it and how it is ordered
QUEUES = {
    VerificationStatus.PENDING_REGIONAL_REVIEW: (
        REVIEWER_ROLES,
        "submitted_at",
    ),
    VerificationStatus.FORWARDED_TO_M_ADMIN: (IDENTIFIER_ROLES, "forwarded_at"),
}


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    stage: VerificationStatus,
    *,
    limit: int = 20,
    offset: int = 0,
) -> ListCattleResult:
    if stage not in QUEUES:
        raise ValidationError("Not a review stage", details={"stage": stage.value})
    roles, order_by = QUEUES[stage]
    ensure_role(actor, roles, "Role not allowed to work this review queue")
    if limit <= 0 or limit > 100:
        raise ValidationError("limit must be between 1 and 100")

    filters = CattleFilter(region=scope_region(actor), verification_status=stage)
    items = await uow.cattle.list(
        filters, limit=limit, offset=offset, order_by=order_by, descending=False
    )
    total = await uow.cattle.count(filters)
    return ListCattleResult(items=items, total=total, limit=limit, offset=offset)
