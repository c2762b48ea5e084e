from __future__ import annotations

import secrets
from collections.abc import AsyncIterator

from fastapi import BackgroundTasks, Depends, Header, Request

from src.application.authorization import Actor
from src.application.errors import AuthError, InfrastructureError
from src.application.events.dispatcher import dispatch_events
from src.config.settings import Settings, get_settings
from src.infrastructure.auth.context import AuthContext
from src.infrastructure.db.session import SQLAlchemyUnitOfWork
from src.infrastructure.storage.ports import StorageService


async def get_auth_context(request: Request) -> AuthContext:
    context = getattr(request.state, "auth_context", None)
    if context is None:
        raise AuthError("Authentication required")
    return context


async def get_actor(context: AuthContext = Depends(get_auth_context)) -> Actor:
    return context.actor


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Session factory not configured")
    uow = SQLAlchemyUnitOfWork(session_factory)
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_storage(request: Request) -> StorageService | None:
    """Configured object storage, or None when S3 is not set up."""
    return getattr(request.app.state, "storage", None)


def require_storage(storage: StorageService | None = Depends(get_storage)) -> StorageService:
    if storage is None:
        raise InfrastructureError("Object storage is not configured")
    return storage


def require_maintenance_key(
    x_maintenance_key: str | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    expected = settings.maintenance_api_key
    if expected is None:
        raise AuthError("Maintenance endpoint is disabled")
    if not x_maintenance_key or not secrets.compare_digest(
        x_maintenance_key, expected.get_secret_value()
    ):
        raise AuthError("Invalid maintenance key")


def schedule_dispatch(
    request: Request, background_tasks: BackgroundTasks, uow: SQLAlchemyUnitOfWork
) -> None:
    """Hand events collected by a committed use case to a post-response task."""
    events = uow.drain_events()
    session_factory = getattr(request.app.state, "session_factory", None)
    if events and session_factory is not None:
        background_tasks.add_task(dispatch_events, session_factory, events)
