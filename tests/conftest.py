"""
tests.conftest

Shared fixtures: an app bound to a temporary SQLite database, an in-process HTTP
client and an authenticated admin.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from school_portal.api.app import create_app
from school_portal.auth.crypto import encrypt_data
from school_portal.settings import Settings

ADMIN_EMAIL = "admin@school.example.com"
ADMIN_PASSWORD = "Admin@1234"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path}/test.db",
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://test",
        log_dir=None,
        smtp_host=None,
        crypto_secret_key="test-crypto-key",
        jwt_access_secret="test-access-secret-0123456789abcdef",
        jwt_refresh_secret="test-refresh-secret-0123456789abcdef",
        system_admin_email=ADMIN_EMAIL,
        system_admin_password=ADMIN_PASSWORD,
        housekeeping_enabled=False,
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run the lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def login(client: httpx.AsyncClient, settings: Settings):
    async def _login(
        *, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD, role: str = "admin"
    ) -> httpx.Response:
        return await client.post(
            f"/api/v1/auth/{role}/login",
            json={"email": email, "password": encrypt_data(settings.crypto_secret_key, password)},
        )

    return _login


@pytest_asyncio.fixture
async def tokens(login) -> dict[str, str]:
    r = await login()
    assert r.status_code == 200, r.text
    return r.json()["data"]


@pytest.fixture
def auth_headers(tokens: dict[str, str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {tokens['accessToken']}"}


# --- Module Notes -----------------------------------------------------------
# The system admin configured above is created by the app lifespan, so every test
# starts with exactly one (super-admin) account.
