from __future__ import annotations

import logging
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import ConflictError, NotFoundError
from src.application.interfaces.unit_of_work import UnitOfWork
from src.application.use_cases.cattle.archive_cattle import load_owned
from src.infrastructure.storage.ports import StorageService

logger = logging.getLogger(__name__)


async def execute(
    uow: UnitOfWork,
    actor: Actor,
    cattle_id: UUID,
    *,
    storage: StorageService | None = None,
) -> None:
    cattle = await load_owned(uow, actor, cattle_id)
    if await uow.transfer_requests.get_pending_for_cattle(cattle.id) is not None:
        raise ConflictError("Cancel the pending transfer request before deleting this cattle")
    if await uow.identification_requests.exists_found_for_cattle(cattle.id):
        raise ConflictError(
            "Cattle is referenced by a completed identification and cannot be deleted; "
            "archive it instead"
        )

    paths = cattle.all_image_paths()
    await uow.holdings.remove(cattle.id)
    if not await uow.cattle.delete(cattle.id):
        raise NotFoundError("Cattle not found")
    await uow.commit()
    logger.info(
        "Cattle deleted: id=%s code=%s owner=%s", cattle.id, cattle.cattle_id, actor.account_id
    )

    if storage is not None and paths:
        try:
            await storage.delete_objects(paths)
        except Exception as e:
            logger.error("Failed to delete images of cattle %s: %s", cattle.id, e, exc_info=True)
