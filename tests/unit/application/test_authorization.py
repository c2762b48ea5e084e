from __future__ import annotations

from uuid import uuid4

import pytest

from src.application.authorization import (
    Actor,
    ensure_in_scope,
    ensure_role,
    in_scope,
    scope_region,
)
from src.application.errors import AuthorizationError, NotFoundError
from src.domain.value_objects.role import IDENTIFIER_ROLES, REVIEWER_ROLES, Role


def _actor(role: Role, region: str | None = "Karnataka") -> Actor:
    return Actor(account_id=uuid4(), role=role, region=region)


def test_ensure_role_rejects_other_roles():
    ensure_role(_actor(Role.FARMER), {Role.FARMER})
    with pytest.raises(AuthorizationError):
        ensure_role(_actor(Role.FARMER), {Role.M_ADMIN}, "nope")


def test_region_scope_by_role():
    assert in_scope(_actor(Role.SUPER_ADMIN, None), "Gujarat")
    assert in_scope(_actor(Role.REGIONAL_ADMIN), "Karnataka")
    assert not in_scope(_actor(Role.REGIONAL_ADMIN), "Gujarat")
    assert not in_scope(_actor(Role.M_ADMIN, None), "Karnataka")
    assert not in_scope(_actor(Role.FARMER), "Karnataka")


def test_out_of_scope_reads_as_missing():
    with pytest.raises(NotFoundError):
        ensure_in_scope(_actor(Role.M_ADMIN), "Gujarat", "Cattle")


def test_scope_region():
    assert scope_region(_actor(Role.SUPER_ADMIN, None)) is None
    assert scope_region(_actor(Role.REGIONAL_ADMIN)) == "Karnataka"
    with pytest.raises(AuthorizationError):
        scope_region(_actor(Role.M_ADMIN, None))


def test_role_capabilities():
    assert Role.REGIONAL_ADMIN.can_review_registrations()
    assert not Role.M_ADMIN.can_review_registrations()
    assert Role.M_ADMIN.can_identify()
    assert Role.SUPER_ADMIN.can_identify()
    assert not Role.FARMER.is_admin
    assert REVIEWER_ROLES == {Role.REGIONAL_ADMIN, Role.SUPER_ADMIN}
    assert IDENTIFIER_ROLES == {Role.M_ADMIN, Role.SUPER_ADMIN}
