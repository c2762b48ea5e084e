from __future__ import annotations

from src.domain.value_objects.role import Role

SCAN_IMAGE = {
    "filename": "scan.jpg",
    "path": "identification/scan.jpg",
    "size": 2048,
    "mimetype": "image/jpeg",
}


async def _create(client, requester, **extra):
    response = await client.post(
        "/api/v1/identification",
        json={"image": SCAN_IMAGE, "latitude": 12.3, "longitude": 76.6, **extra},
        headers=requester.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_identification_found_flow(client, accounts, approved_cattle):
    owner, finder, identifier = accounts["farmer"], accounts["buyer"], accounts["m_admin"]
    cattle = await approved_cattle(owner)

    created = await _create(client, finder, address="Near the market", priority="high")
    assert created["request_id"].startswith("IDR-")
    assert created["status"] == "pending"
    assert created["location"] == {"latitude": 12.3, "longitude": 76.6}
    assert created["region"] == "Karnataka"

    queue = await client.get("/api/v1/admin/identification/pending", headers=identifier.headers)
    assert [r["id"] for r in queue.json()["items"]] == [created["id"]]

    started = await client.put(
        f"/api/v1/admin/identification/{created['id']}/start", headers=identifier.headers
    )
    assert started.status_code == 200
    assert started.json()["status"] == "processing"
    assert started.json()["processing"]["processed_by"] == identifier.id

    completed = await client.put(
        f"/api/v1/admin/identification/{created['id']}/complete",
        json={"found": True, "cattle_code": cattle["cattle_id"], "confidence": 92.5},
        headers=identifier.headers,
    )
    assert completed.status_code == 200
    body = completed.json()
    assert body["status"] == "completed"
    assert body["result"]["found"] is True
    assert body["result"]["cattle_ref"] == cattle["id"]
    assert body["processing"]["time_taken_seconds"] is not None

    record = await client.get(f"/api/v1/cattle/{cattle['id']}", headers=owner.headers)
    history = record.json()["identification_history"]
    assert history[-1]["method"] == "image_scan"
    assert history[-1]["identified_by"] == identifier.id

    late_cancel = await client.put(
        f"/api/v1/identification/{created['id']}/cancel", headers=finder.headers
    )
    assert late_cancel.status_code == 409

    stats = await client.get("/api/v1/identification/statistics", headers=finder.headers)
    assert stats.json()["found"] == 1
    assert stats.json()["by_status"]["completed"] == 1

    notifications = await client.get("/api/v1/notifications", headers=finder.headers)
    types = [n["type"] for n in notifications.json()["notifications"]]
    assert sorted(types) == ["identification_completed", "identification_started"]


async def test_identification_failure_needs_message(client, accounts):
    requester, identifier = accounts["farmer"], accounts["m_admin"]
    created = await _create(client, requester)

    missing = await client.put(
        f"/api/v1/admin/identification/{created['id']}/fail",
        json={"reason": "blurry"},
        headers=identifier.headers,
    )
    assert missing.status_code == 422
    assert missing.json()["code"] == "validation_error"

    failed = await client.put(
        f"/api/v1/admin/identification/{created['id']}/fail",
        json={"message": "Image too blurry to match"},
        headers=identifier.headers,
    )
    assert failed.status_code == 200
    assert failed.json()["status"] == "failed"
    assert failed.json()["result"]["message"] == "Image too blurry to match"


async def test_identification_visibility_and_roles(client, accounts, make_account):
    requester, other = accounts["farmer"], accounts["buyer"]
    created = await _create(client, requester)

    hidden = await client.get(f"/api/v1/identification/{created['id']}", headers=other.headers)
    assert hidden.status_code == 404
    foreign_cancel = await client.put(
        f"/api/v1/identification/{created['id']}/cancel", headers=other.headers
    )
    assert foreign_cancel.status_code == 404

    regional_start = await client.put(
        f"/api/v1/admin/identification/{created['id']}/start",
        headers=accounts["regional"].headers,
    )
    assert regional_start.status_code == 403

    elsewhere = await make_account(Role.M_ADMIN, region="Gujarat", district="Anand")
    out_of_region = await client.put(
        f"/api/v1/admin/identification/{created['id']}/start", headers=elsewhere.headers
    )
    assert out_of_region.status_code == 404
    empty_queue = await client.get(
        "/api/v1/admin/identification/pending", headers=elsewhere.headers
    )
    assert empty_queue.json()["total"] == 0

    admin_create = await client.post(
        "/api/v1/identification",
        json={"image": SCAN_IMAGE},
        headers=accounts["m_admin"].headers,
    )
    assert admin_create.status_code == 403

    cancelled = await client.put(
        f"/api/v1/identification/{created['id']}/cancel",
        json={"reason": "Found it myself"},
        headers=requester.headers,
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    mine = await client.get(
        "/api/v1/identification/mine", params={"status": "cancelled"}, headers=requester.headers
    )
    assert [r["id"] for r in mine.json()["items"]] == [created["id"]]


async def test_identification_rejects_half_coordinates(client, accounts):
    response = await client.post(
        "/api/v1/identification",
        json={"image": SCAN_IMAGE, "latitude": 12.3},
        headers=accounts["farmer"].headers,
    )
    assert response.status_code == 422
