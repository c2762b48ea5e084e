from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.models.cattle import Cattle
from src.domain.value_objects.cattle_status import LifecycleStatus, VerificationStatus


@dataclass(slots=True)
class CattleFilter:
    owner_id: UUID | None = None
    region: str | None = None
    status: LifecycleStatus | None = None
    verification_status: VerificationStatus | None = None
    breed: str | None = None
    search: str | None = None
    submitted_from: datetime | None = None
    submitted_to: datetime | None = None


class CattleRepository(Protocol):
    async def add(self, cattle: Cattle) -> Cattle: ...

    async def get(self, cattle_id: UUID) -> Cattle | None: ...

    async def get_by_code(self, cattle_code: str) -> Cattle | None: ...

    async def list(
        self,
        filters: CattleFilter,
        *,
        limit: int = 20,
        offset: int = 0,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Cattle]: ...

    async def count(self, filters: CattleFilter) -> int: ...

    async def count_by_status(self, filters: CattleFilter) -> dict[str, dict]: ...

    async def list_overdue(
        self,
        now: datetime,
        *,
        region: str | None = None,
        limit: int | None = None,
        unnotified_only: bool = False,
    ) -> list[Cattle]: ...

    async def count_overdue(self, now: datetime, *, region: str | None = None) -> int: ...

    async def mark_overdue_notified(self, cattle_ids: list[UUID], now: datetime) -> list[UUID]: ...

    async def save(self, cattle: Cattle, expected_version: int) -> Cattle | None: ...

    async def delete(self, cattle_id: UUID) -> bool: ...
