from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select, update

from src.infrastructure.db.orm.cattle import CattleORM
from src.infrastructure.db.orm.identification_request import IdentificationRequestORM
from src.infrastructure.db.orm.notification import NotificationORM
from src.infrastructure.db.orm.transfer_request import TransferRequestORM

SWEEP_URL = "/api/v1/admin/maintenance/expire-stale"


async def test_maintenance_requires_key(client):
    missing = await client.post(SWEEP_URL)
    assert missing.status_code == 401
    assert missing.json()["code"] == "auth_error"

    wrong = await client.post(SWEEP_URL, headers={"X-Maintenance-Key": "nope"})
    assert wrong.status_code == 401


async def test_maintenance_sweeps_stale_work(
    app, client, accounts, register_cattle, approved_cattle, test_settings
):
    key_header = {"X-Maintenance-Key": test_settings.maintenance_api_key.get_secret_value()}
    farmer, buyer = accounts["farmer"], accounts["buyer"]
    cattle = await approved_cattle(farmer)
    transfer = await client.post(
        f"/api/v1/cattle/{cattle['id']}/transfer",
        json={"to_owner_id": buyer.id},
        headers=farmer.headers,
    )
    scan = await client.post(
        "/api/v1/identification",
        json={"image": {"filename": "scan.jpg", "path": "identification/scan.jpg"}},
        headers=buyer.headers,
    )
    waiting = await register_cattle(farmer)

    past = datetime.now(timezone.utc) - timedelta(hours=1)
    async with app.state.session_factory() as session:
        await session.execute(
            update(TransferRequestORM)
            .where(TransferRequestORM.id == UUID(transfer.json()["id"]))
            .values(expires_at=past)
        )
        await session.execute(
            update(IdentificationRequestORM)
            .where(IdentificationRequestORM.id == UUID(scan.json()["id"]))
            .values(expires_at=past)
        )
        await session.execute(
            update(CattleORM)
            .where(CattleORM.id == UUID(waiting["id"]))
            .values(turnaround_deadline=past)
        )
        await session.commit()

    swept = await client.post(SWEEP_URL, headers=key_header)
    assert swept.status_code == 200
    assert swept.json() == {
        "identification_requests": 1,
        "transfer_requests": 1,
        "overdue_verifications": 1,
    }

    expired_transfer = await client.get(
        f"/api/v1/transfers/{transfer.json()['id']}", headers=farmer.headers
    )
    assert expired_transfer.json()["status"] == "cancelled"
    assert expired_transfer.json()["cancelled_by"] is None

    expired_scan = await client.get(
        f"/api/v1/identification/{scan.json()['id']}", headers=buyer.headers
    )
    assert expired_scan.json()["status"] == "failed"

    async with app.state.session_factory() as session:
        rows = await session.execute(
            select(NotificationORM.recipient_id).where(
                NotificationORM.type == "transfer_request_cancelled"
            )
        )
        assert sorted(str(r) for r in rows.scalars()) == sorted([farmer.id, buyer.id])
        overdue = await session.execute(
            select(NotificationORM.recipient_id).where(
                NotificationORM.type == "verification_overdue"
            )
        )
        assert [str(r) for r in overdue.scalars()] == [accounts["regional"].id]

    second = await client.post(
        SWEEP_URL,
        params={"notify_overdue": "false"},
        headers=key_header,
    )
    assert second.json() == {"identification_requests": 0, "transfer_requests": 0}

    third = await client.post(SWEEP_URL, headers=key_header)
    assert third.json()["overdue_verifications"] == 0
    async with app.state.session_factory() as session:
        reminders = await session.execute(
            select(NotificationORM.id).where(NotificationORM.type == "verification_overdue")
        )
        assert len(reminders.scalars().all()) == 1
        notified_at = await session.execute(
            select(CattleORM.overdue_notified_at).where(CattleORM.id == UUID(waiting["id"]))
        )
        assert notified_at.scalar_one() is not None

    listed = await client.get("/api/v1/admin/cattle/overdue", headers=accounts["regional"].headers)
    assert [c["id"] for c in listed.json()] == [waiting["id"]]



async def test_cattle_report_json_is_region_scoped(client, accounts, approved_cattle):
    await approved_cattle(accounts["farmer"])
    await approved_cattle(accounts["buyer"])

    report = await client.get(
        "/api/v1/reports/cattle", params={"format": "json"}, headers=accounts["regional"].headers
    )
    assert report.status_code == 200
    data = report.json()["data"]
    assert data["summary"]["region"] == "Karnataka"
    assert data["summary"]["in_report"] == 2
    assert data["by_verification_status"]["approved"] == 2
    assert {row["owner_name"] for row in data["cattle"]} == {"Ravi Kumar", "Lakshmi Devi"}

    elsewhere = await client.get(
        "/api/v1/reports/cattle",
        params={"format": "json"},
        headers=accounts["regional_elsewhere"].headers,
    )
    assert elsewhere.json()["data"]["summary"]["in_report"] == 0

    denied = await client.get("/api/v1/reports/cattle", headers=accounts["farmer"].headers)
    assert denied.status_code == 403


async def test_cattle_report_pdf(client, accounts, approved_cattle):
    await approved_cattle(accounts["farmer"])

    report = await client.get("/api/v1/reports/cattle", headers=accounts["super_admin"].headers)
    assert report.status_code == 200
    body = report.json()
    assert body["format"] == "pdf"
    assert body["file_name"].endswith(".pdf")
    assert base64.b64decode(body["content"]).startswith(b"%PDF")


async def test_verification_report_turnaround(app, client, accounts, approved_cattle):
    slow = await approved_cattle(accounts["farmer"])
    quick = await approved_cattle(accounts["buyer"])

    submitted = datetime.now(timezone.utc) - timedelta(days=3)
    async with app.state.session_factory() as session:
        await session.execute(
            update(CattleORM)
            .where(CattleORM.id == UUID(slow["id"]))
            .values(submitted_at=submitted, turnaround_deadline=submitted + timedelta(hours=48))
        )
        await session.commit()

    report = await client.get(
        "/api/v1/reports/verification",
        params={"format": "json"},
        headers=accounts["regional"].headers,
    )
    assert report.status_code == 200
    data = report.json()["data"]
    rows = {row["cattle_id"]: row for row in data["cattle"]}
    assert rows[slow["cattle_id"]]["turnaround_hours"] >= 71
    assert rows[slow["cattle_id"]]["is_overdue"] is True
    assert rows[quick["cattle_id"]]["turnaround_hours"] < 1
    assert rows[quick["cattle_id"]]["is_overdue"] is False
    assert data["summary"]["registrations"] == 2
    assert data["summary"]["verified"] == 2
    assert data["summary"]["overdue"] == 1
    assert data["by_verification_status"]["approved"] == 2

    recent = await client.get(
        "/api/v1/reports/verification",
        params={
            "format": "json",
            "from": (datetime.now(timezone.utc) - timedelta(days=1)).isoformat(),
        },
        headers=accounts["regional"].headers,
    )
    assert [row["cattle_id"] for row in recent.json()["data"]["cattle"]] == [quick["cattle_id"]]

    elsewhere = await client.get(
        "/api/v1/reports/verification",
        params={"format": "json"},
        headers=accounts["regional_elsewhere"].headers,
    )
    assert elsewhere.json()["data"]["cattle"] == []


async def test_verification_report_validation_and_pdf(client, accounts, register_cattle):
    await register_cattle(accounts["farmer"])

    backwards = await client.get(
        "/api/v1/reports/verification",
        params={"from": "2026-02-01T00:00:00", "to": "2026-01-01T00:00:00"},
        headers=accounts["super_admin"].headers,
    )
    assert backwards.status_code == 422
    assert backwards.json()["code"] == "validation_error"

    denied = await client.get("/api/v1/reports/verification", headers=accounts["farmer"].headers)
    assert denied.status_code == 403

    report = await client.get(
        "/api/v1/reports/verification", headers=accounts["super_admin"].headers
    )
    assert report.status_code == 200
    body = report.json()
    assert body["title"] == "Verification Report"
    assert base64.b64decode(body["content"]).startswith(b"%PDF")
