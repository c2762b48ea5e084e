from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from src.application.authorization import Actor
from src.application.errors import AuthError, AuthorizationError
from src.domain.models.account import Account
from src.domain.value_objects.role import Role


@dataclass(slots=True)
class AuthContext:
    account_id: UUID
    email: str
    role: Role
    region: str | None
    full_name: str
    claims: dict[str, Any]

    @property
    def actor(self) -> Actor:
        return Actor(
            account_id=self.account_id,
            role=self.role,
            region=self.region,
            full_name=self.full_name,
        )


def build_auth_context(account: Account | None, claims: dict[str, Any]) -> AuthContext:
    """Turn a loaded identity-store account into the request's auth context.

    Missing or deactivated accounts are rejected as unauthenticated; admins
    still waiting for approval are authenticated but forbidden.
    """
    if account is None or not account.is_active:
        raise AuthError("Inactive or missing account")
    if account.role.is_admin and not account.is_approved:
        raise AuthorizationError("Admin account is pending approval")
    return AuthContext(
        account_id=account.id,
        email=account.email,
        role=account.role,
        region=account.region,
        full_name=account.full_name,
        claims=claims,
    )
