from __future__ import annotations

from typing import Protocol
from uuid import UUID


class HoldingsRepository(Protocol):
    async def add(self, account_id: UUID, cattle_ref: UUID) -> None: ...

    async def move(self, cattle_ref: UUID, from_account_id: UUID, to_account_id: UUID) -> None: ...

    async def remove(self, cattle_ref: UUID) -> None: ...

    async def list_for_account(self, account_id: UUID) -> list[UUID]: ...
