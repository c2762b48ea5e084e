from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.identification_request import (
    IdentificationRequest,
    IdentificationStatus,
)


class IdentificationStats:
    def __init__(
        self,
        by_status: dict[str, int],
        found: int,
        not_found: int,
        avg_time_taken_seconds: float | None,
    ) -> None:
        self.by_status = by_status
        self.found = found
        self.not_found = not_found
        self.avg_time_taken_seconds = avg_time_taken_seconds

    @property
    def total(self) -> int:
        return sum(self.by_status.values())


class IdentificationRequestsRepository(Protocol):
    async def add(self, request: IdentificationRequest) -> IdentificationRequest: ...

    async def get(self, request_id: UUID) -> IdentificationRequest | None: ...

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        status: IdentificationStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[IdentificationRequest], int]: ...

    async def list_queue(
        self, *, region: str | None = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[IdentificationRequest], int]: ...

    async def list_stale(self, now: datetime) -> list[IdentificationRequest]: ...

    async def exists_found_for_cattle(self, cattle_ref: UUID) -> bool: ...

    async def statistics(
        self, *, region: str | None = None, user_id: UUID | None = None
    ) -> IdentificationStats: ...

    async def save(
        self, request: IdentificationRequest, expected_version: int
    ) -> IdentificationRequest | None: ...
