from __future__ import annotations

from typing import Protocol

from src.application.interfaces.repositories.accounts import AccountsRepository
from src.application.interfaces.repositories.cattle import CattleRepository
from src.application.interfaces.repositories.holdings import HoldingsRepository
from src.application.interfaces.repositories.identification_requests import (
    IdentificationRequestsRepository,
)
from src.application.interfaces.repositories.notifications import NotificationsRepository
from src.application.interfaces.repositories.transfer_requests import (
    TransferRequestsRepository,
)


class UnitOfWork(Protocol):
    accounts: AccountsRepository
    cattle: CattleRepository
    holdings: HoldingsRepository
    identification_requests: IdentificationRequestsRepository
    transfer_requests: TransferRequestsRepository
    notifications: NotificationsRepository
    # Domain events collected during the transaction
    events: list

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    # Record a domain event during the transaction
    def add_event(self, event: object) -> None: ...

    # Drain collected events (used for post-commit dispatch)
    def drain_events(self) -> list: ...
