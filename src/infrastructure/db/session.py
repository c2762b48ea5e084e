from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.application.interfaces.unit_of_work import UnitOfWork


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False, future=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


class SQLAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory
        self.session: AsyncSession | None = None
        self.events: list = []
        self._clear_repos()

    def _clear_repos(self) -> None:
        self.accounts = None
        self.cattle = None
        self.holdings = None
        self.identification_requests = None
        self.transfer_requests = None
        self.notifications = None

    async def __aenter__(self) -> UnitOfWork:
        self.session = self._session_factory()
        from src.infrastructure.repos.accounts_sqlalchemy import AccountsSQLAlchemyRepository
        from src.infrastructure.repos.cattle_sqlalchemy import CattleSQLAlchemyRepository
        from src.infrastructure.repos.holdings_sqlalchemy import HoldingsSQLAlchemyRepository
        from src.infrastructure.repos.identification_requests_sqlalchemy import (
            IdentificationRequestsSQLAlchemyRepository,
        )
        from src.infrastructure.repos.notifications_sqlalchemy import (
            NotificationsSQLAlchemyRepository,
        )
        from src.infrastructure.repos.transfer_requests_sqlalchemy import (
            TransferRequestsSQLAlchemyRepository,
        )

        self.accounts = AccountsSQLAlchemyRepository(self.session)
        self.cattle = CattleSQLAlchemyRepository(self.session)
        self.holdings = HoldingsSQLAlchemyRepository(self.session)
        self.identification_requests = IdentificationRequestsSQLAlchemyRepository(self.session)
        self.transfer_requests = TransferRequestsSQLAlchemyRepository(self.session)
        self.notifications = NotificationsSQLAlchemyRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self.session:
            return
        try:
            if exc:
                self.events.clear()
                await self.session.rollback()
        finally:
            await self.session.close()
            self.session = None
            self._clear_repos()

    async def commit(self) -> None:
        if not self.session:
            return
        await self.session.commit()

    async def rollback(self) -> None:
        if not self.session:
            return
        self.events.clear()
        await self.session.rollback()

    def add_event(self, event: object) -> None:
        self.events.append(event)

    def drain_events(self) -> list:
        events, self.events = self.events, []
        return events
