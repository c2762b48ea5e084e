from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from src.application.errors import AuthorizationError, NotFoundError
from src.domain.value_objects.role import Role


@dataclass(slots=True, frozen=True)
class Actor:
    """The authenticated account a use case acts on behalf of."""

    account_id: UUID
    role: Role
    region: str | None = None
    full_name: str | None = None


def ensure_role(actor: Actor, allowed: Iterable[Role], message: str | None = None) -> None:
    if actor.role not in set(allowed):
        raise AuthorizationError(message or "Role not allowed for this action")


def in_scope(actor: Actor, region: str | None) -> bool:
    if actor.role is Role.SUPER_ADMIN:
        return True
    if actor.role.is_region_scoped:
        return bool(actor.region) and actor.region == region
    return False


def ensure_in_scope(actor: Actor, region: str | None, what: str = "Record") -> None:
    """Region-scoped admins only see their own region; anything else reads as missing."""
    if not in_scope(actor, region):
        raise NotFoundError(f"{what} not found")


def scope_region(actor: Actor) -> str | None:
    """Region filter for admin listings; None means all regions."""
    if actor.role is Role.SUPER_ADMIN:
        return None
    if not actor.region:
        raise AuthorizationError("Admin account has no assigned region")
    return actor.region
