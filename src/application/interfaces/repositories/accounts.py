from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.models.account import Account
from src.domain.value_objects.role import Role


class AccountsRepository(Protocol):
    async def add(self, account: Account) -> Account: ...

    async def get(self, account_id: UUID) -> Account | None: ...

    async def get_by_email(self, email: str) -> Account | None: ...

    async def list_reviewers(self, role: Role, region: str) -> list[Account]:
        """Active, approved admins of ``role`` assigned to ``region``."""
        ...
