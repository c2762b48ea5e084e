from __future__ import annotations

from uuid import UUID

from src.application.authorization import Actor
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle import get_cattle
from src.domain.models.transfer_request import TransferRequest


async def execute(uow: UnitOfWork, actor: Actor, cattle_id: UUID) -> list[TransferRequest]:
    cattle = await get_cattle.execute(uow, actor, cattle_id)
    transfers = await uow.transfer_requests.list_accepted_for_cattle(cattle.id)
    by_id = {t.id: t for t in transfers}
    # Follow the cattle's own append-only history for ordering
    ordered = [by_id.pop(tid) for tid in cattle.transfer_history if tid in by_id]
    return ordered + list(by_id.values())
