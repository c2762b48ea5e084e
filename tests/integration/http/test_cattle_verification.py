from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select, update

from src.domain.value_objects.role import Role
from src.infrastructure.db.orm.cattle import CattleORM
from src.infrastructure.db.orm.notification import NotificationORM


async def _notification_types(app, recipient_id: str) -> list[str]:
    async with app.state.session_factory() as session:
        result = await session.execute(
            select(NotificationORM.type).where(NotificationORM.recipient_id == UUID(recipient_id))
        )
        return sorted(result.scalars().all())


async def test_registration_forward_approve_flow(app, client, accounts, register_cattle):
    farmer = accounts["farmer"]
    regional = accounts["regional"]
    m_admin = accounts["m_admin"]

    created = await register_cattle(farmer)
    assert created["status"] == "transit"
    assert created["verification"]["status"] == "pending_regional_review"
    assert created["temporary_id"] == f"TEMP-{created['cattle_id']}"
    assert created["location"] == {"state": "Karnataka", "district": "Mysuru", "pin_code": "570001"}
    assert created["total_images"] == 14
    assert len(created["images"]["muzzle"]) == 3
    assert await _notification_types(app, regional.id) == ["cattle_registered"]

    queue = await client.get("/api/v1/admin/regional/cattle/pending", headers=regional.headers)
    assert queue.status_code == 200
    assert [item["id"] for item in queue.json()["items"]] == [created["id"]]

    forwarded = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/forward", headers=regional.headers
    )
    assert forwarded.status_code == 200
    assert forwarded.json()["verification"]["status"] == "forwarded_to_m_admin"
    assert forwarded.json()["verification"]["reviewed_by_regional_admin"] == regional.id

    m_queue = await client.get("/api/v1/admin/m-admin/cattle/pending", headers=m_admin.headers)
    assert m_queue.json()["total"] == 1

    approved = await client.put(
        f"/api/v1/admin/m-admin/cattle/{created['id']}/approve", headers=m_admin.headers
    )
    assert approved.status_code == 200
    body = approved.json()
    assert body["status"] == "active"
    assert body["verification"]["status"] == "approved"
    assert body["temporary_id"] is None
    assert body["identification_history"][0]["method"] == "admin_approval"

    assert await _notification_types(app, farmer.id) == [
        "cattle_approved",
        "cattle_forwarded_to_owner",
    ]
    assert await _notification_types(app, m_admin.id) == ["cattle_forwarded"]


async def test_terminal_states_conflict(client, accounts, register_cattle):
    regional = accounts["regional"]
    created = await register_cattle(accounts["farmer"])

    denied = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/deny",
        json={"reason": "Muzzle photos are blurred"},
        headers=regional.headers,
    )
    assert denied.status_code == 200
    assert denied.json()["verification"]["regional_denial_reason"] == "Muzzle photos are blurred"

    again = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/forward", headers=regional.headers
    )
    assert again.status_code == 409
    assert again.json()["code"] == "conflict"

    approve = await client.put(
        f"/api/v1/admin/m-admin/cattle/{created['id']}/approve",
        headers=accounts["m_admin"].headers,
    )
    assert approve.status_code == 409


async def test_deny_and_reject_require_reason(client, accounts, register_cattle):
    created = await register_cattle(accounts["farmer"])
    response = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/deny",
        json={},
        headers=accounts["regional"].headers,
    )
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"

    await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/forward",
        headers=accounts["regional"].headers,
    )
    reject = await client.put(
        f"/api/v1/admin/m-admin/cattle/{created['id']}/reject",
        json={"reason": ""},
        headers=accounts["m_admin"].headers,
    )
    assert reject.status_code == 422


async def test_out_of_region_reviewer_sees_nothing(client, accounts, register_cattle):
    created = await register_cattle(accounts["farmer"])
    elsewhere = accounts["regional_elsewhere"]

    forward = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/forward", headers=elsewhere.headers
    )
    assert forward.status_code == 404

    queue = await client.get("/api/v1/admin/regional/cattle/pending", headers=elsewhere.headers)
    assert queue.json()["total"] == 0

    super_queue = await client.get(
        "/api/v1/admin/regional/cattle/pending", headers=accounts["super_admin"].headers
    )
    assert super_queue.json()["total"] == 1


async def test_role_checks_on_review_actions(client, accounts, register_cattle):
    created = await register_cattle(accounts["farmer"])

    farmer_forward = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/forward",
        headers=accounts["farmer"].headers,
    )
    assert farmer_forward.status_code == 403

    m_admin_forward = await client.put(
        f"/api/v1/admin/regional/cattle/{created['id']}/forward",
        headers=accounts["m_admin"].headers,
    )
    assert m_admin_forward.status_code == 403


async def test_registration_validation(client, accounts, make_account):
    farmer = accounts["farmer"]
    incomplete = {
        "breed": "Gir",
        "age": 3,
        "images": {"muzzle": [{"filename": "m.jpg", "path": "cattle/m.jpg"}]},
    }
    response = await client.post("/api/v1/cattle", json=incomplete, headers=farmer.headers)
    assert response.status_code == 422
    assert "face" in response.json()["details"]

    bad_age = await client.post(
        "/api/v1/cattle", json={"breed": "Gir", "age": -1}, headers=farmer.headers
    )
    assert bad_age.status_code == 422
    assert bad_age.json()["code"] == "validation_error"

    admin = await client.post(
        "/api/v1/cattle", json={"breed": "Gir", "age": 2}, headers=accounts["regional"].headers
    )
    assert admin.status_code == 403

    homeless = await make_account(Role.FARMER, district=None)
    no_address = await client.post(
        "/api/v1/cattle",
        json={"breed": "Gir", "age": 2, "images": {}},
        headers=homeless.headers,
    )
    assert no_address.status_code == 422
    assert "address" in no_address.json()["details"]


async def test_overdue_listing(app, client, accounts, register_cattle):
    created = await register_cattle(accounts["farmer"])

    async with app.state.session_factory() as session:
        await session.execute(
            update(CattleORM)
            .where(CattleORM.id == UUID(created["id"]))
            .values(turnaround_deadline=datetime.now(timezone.utc) - timedelta(hours=2))
        )
        await session.commit()

    overdue = await client.get("/api/v1/admin/cattle/overdue", headers=accounts["regional"].headers)
    assert overdue.status_code == 200
    assert [c["id"] for c in overdue.json()] == [created["id"]]
    assert overdue.json()[0]["verification"]["is_overdue"] is True

    stats = await client.get("/api/v1/cattle/statistics", headers=accounts["regional"].headers)
    assert stats.json()["overdue"] == 1
