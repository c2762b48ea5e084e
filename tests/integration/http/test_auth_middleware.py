from __future__ import annotations

from uuid import uuid4

from src.domain.value_objects.role import Role


async def test_health_is_public(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_missing_or_malformed_header(client):
    missing = await client.get("/api/v1/cattle")
    assert missing.status_code == 401
    assert missing.json()["code"] == "auth_error"

    wrong_scheme = await client.get("/api/v1/cattle", headers={"Authorization": "Basic abc"})
    assert wrong_scheme.status_code == 401

    garbage = await client.get("/api/v1/cattle", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401
    assert garbage.json()["code"] == "auth_error"


async def test_token_for_unknown_account(app, client):
    token = app.state.jwt_service.create_access_token(subject=str(uuid4()))
    response = await client.get("/api/v1/cattle", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_inactive_account_rejected(client, make_account):
    suspended = await make_account(is_active=False)
    response = await client.get("/api/v1/cattle", headers=suspended.headers)
    assert response.status_code == 401


async def test_unapproved_admin_forbidden(client, make_account):
    pending_admin = await make_account(Role.REGIONAL_ADMIN, is_approved=False)
    response = await client.get(
        "/api/v1/admin/regional/cattle/pending", headers=pending_admin.headers
    )
    assert response.status_code == 403
    assert response.json()["code"] == "forbidden"


async def test_farmer_cannot_reach_admin_queue(client, accounts):
    response = await client.get(
        "/api/v1/admin/m-admin/cattle/pending", headers=accounts["farmer"].headers
    )
    assert response.status_code == 403
