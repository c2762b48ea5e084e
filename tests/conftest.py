from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from src.config.settings import Settings
from src.domain.models.account import Account
from src.domain.value_objects.image_category import REQUIRED_IMAGE_COUNTS
from src.domain.value_objects.role import Role
from src.infrastructure.db.base import Base
from src.infrastructure.db.orm import (  # noqa: F401
    account,
    cattle,
    holding,
    identification_request,
    notification,
    transfer_request,
)
from src.infrastructure.repos.accounts_sqlalchemy import AccountsSQLAlchemyRepository
from src.interfaces.http.main import create_app

MAINTENANCE_KEY = "maintenance-test-key"


@dataclass
class SeededAccount:
    account: Account
    token: str

    @property
    def id(self) -> str:
        return str(self.account.id)

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def full_image_set() -> dict[str, list[dict]]:
    return {
        category.value: [
            {
                "filename": f"{category.value}_{i}.jpg",
                "path": f"cattle/test/{category.value}/{i}.jpg",
                "size": 1024,
                "mimetype": "image/jpeg",
            }
            for i in range(count)
        ]
        for category, count in REQUIRED_IMAGE_COUNTS.items()
    }


def cattle_payload(**overrides) -> dict:
    payload = {
        "breed": "Gir",
        "age": 4,
        "tag_no": "KA-001",
        "color": "brown",
        "type": "cow",
        "medical_history": "Vaccinated",
        "images": full_image_set(),
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "jwt_secret_key": "test-secret-key",
            "log_level": "INFO",
            "environment": "test",
            "maintenance_api_key": MAINTENANCE_KEY,
        }
    )


@pytest.fixture()
def app(test_settings: Settings):
    return create_app(settings=test_settings)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    engine = app.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    await engine.dispose()


@pytest.fixture()
def make_account(app, client) -> Callable[..., Awaitable[SeededAccount]]:
    counter = {"n": 0}

    async def _make(
        role: Role = Role.FARMER,
        *,
        region: str | None = "Karnataka",
        district: str | None = "Mysuru",
        full_name: str | None = None,
        is_active: bool = True,
        is_approved: bool = True,
    ) -> SeededAccount:
        counter["n"] += 1
        n = counter["n"]
        new = Account.create(
            full_name=full_name or f"{role.value.title()} {n}",
            email=f"{role.value}{n}@example.test",
            role=role,
            region=region,
            district=district,
            pin_code="570001",
            is_active=is_active,
            is_approved=is_approved,
        )
        async with app.state.session_factory() as session:
            saved = await AccountsSQLAlchemyRepository(session).add(new)
            await session.commit()
        token = app.state.jwt_service.create_access_token(subject=saved.id)
        return SeededAccount(account=saved, token=token)

    return _make


@pytest.fixture()
async def accounts(make_account) -> dict[str, SeededAccount]:
    """One account per role in Karnataka plus a second farmer and an out-of-region reviewer."""
    return {
        "farmer": await make_account(Role.FARMER, full_name="Ravi Kumar"),
        "buyer": await make_account(Role.FARMER, full_name="Lakshmi Devi"),
        "regional": await make_account(Role.REGIONAL_ADMIN, district=None),
        "m_admin": await make_account(Role.M_ADMIN, district=None),
        "super_admin": await make_account(Role.SUPER_ADMIN, region=None, district=None),
        "regional_elsewhere": await make_account(
            Role.REGIONAL_ADMIN, region="Gujarat", district=None
        ),
    }


@pytest.fixture()
def register_cattle(client):
    async def _register(owner: SeededAccount, **overrides) -> dict:
        response = await client.post(
            "/api/v1/cattle", json=cattle_payload(**overrides), headers=owner.headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture()
def approved_cattle(client, accounts, register_cattle):
    """Register, forward and approve a cattle for the given owner."""

    async def _approved(owner: SeededAccount | None = None) -> dict:
        owner = owner or accounts["farmer"]
        created = await register_cattle(owner)
        forwarded = await client.put(
            f"/api/v1/admin/regional/cattle/{created['id']}/forward",
            headers=accounts["regional"].headers,
        )
        assert forwarded.status_code == 200, forwarded.text
        approved = await client.put(
            f"/api/v1/admin/m-admin/cattle/{created['id']}/approve",
            headers=accounts["m_admin"].headers,
        )
        assert approved.status_code == 200, approved.text
        return approved.json()

    return _approved
