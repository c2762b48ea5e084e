from __future__ import annotations

from uuid import uuid4

import pytest
from jose import jwt

from src.application.errors import AuthError, AuthorizationError
from src.domain.models.account import Account
from src.domain.value_objects.role import Role
from src.infrastructure.auth.context import build_auth_context
from src.infrastructure.auth.jwt_service import JWTService


def _service(**kwargs) -> JWTService:
    return JWTService(
        secret_key="unit-secret", algorithm="HS256", access_token_expires_minutes=5, **kwargs
    )


def test_token_round_trip_with_issuer_and_audience():
    service = _service(issuer="registry", audience="mobile")
    subject = uuid4()
    token = service.create_access_token(subject=subject, extra_claims={"role": "farmer"})
    claims = service.decode(token)
    assert service.subject(claims) == subject
    assert claims["role"] == "farmer"
    assert claims["typ"] == "access"


def test_decode_rejects_wrong_secret():
    token = _service().create_access_token(subject=uuid4())
    other = JWTService(secret_key="other", algorithm="HS256", access_token_expires_minutes=5)
    with pytest.raises(AuthError):
        other.decode(token)


def test_decode_rejects_non_access_tokens():
    token = jwt.encode({"sub": str(uuid4()), "typ": "refresh"}, "unit-secret", algorithm="HS256")
    with pytest.raises(AuthError):
        _service().decode(token)


def test_subject_must_be_uuid():
    with pytest.raises(AuthError):
        _service().subject({"sub": "not-a-uuid"})
    with pytest.raises(AuthError):
        _service().subject({})


def test_build_auth_context_for_active_farmer():
    account = Account.create("Ravi", "Ravi@Example.test", Role.FARMER, region="Karnataka")
    context = build_auth_context(account, {"sub": str(account.id)})
    assert context.email == "ravi@example.test"
    assert context.actor.account_id == account.id
    assert context.actor.region == "Karnataka"


def test_build_auth_context_rejects_missing_or_inactive():
    with pytest.raises(AuthError):
        build_auth_context(None, {})
    inactive = Account.create("Gone", "gone@example.test", Role.FARMER, is_active=False)
    with pytest.raises(AuthError):
        build_auth_context(inactive, {})


def test_unapproved_admin_is_forbidden():
    pending = Account.create(
        "New Admin", "admin@example.test", Role.REGIONAL_ADMIN, region="Karnataka",
        is_approved=False,
    )
    with pytest.raises(AuthorizationError):
        build_auth_context(pending, {})
    context = build_auth_context(
        Account.create("Farmer", "f@example.test", Role.FARMER, is_approved=False), {}
    )
    assert context.actor.role is Role.FARMER
