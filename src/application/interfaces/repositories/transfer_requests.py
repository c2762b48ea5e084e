from __future__ import annotations

from datetime import datetime
from typing import Literal, Protocol
from uuid import UUID

from src.domain.models.transfer_request import TransferRequest, TransferStatus

Direction = Literal["sent", "received", "all"]


class TransferRequestsRepository(Protocol):
    async def add(self, transfer: TransferRequest) -> TransferRequest: ...

    async def get(self, transfer_id: UUID) -> TransferRequest | None: ...

    async def get_pending_for_cattle(self, cattle_ref: UUID) -> TransferRequest | None: ...

    async def list_for_account(
        self,
        account_id: UUID,
        *,
        direction: Direction = "all",
        status: TransferStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TransferRequest], int]: ...

    async def list_accepted_for_cattle(self, cattle_ref: UUID) -> list[TransferRequest]: ...

    async def list_stale(self, now: datetime) -> list[TransferRequest]: ...

    async def save(
        self, transfer: TransferRequest, expected_version: int
    ) -> TransferRequest | None: ...
