"""
tests.test_auth

Admin authentication flows over HTTP.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import httpx
import pytest
from fastapi import FastAPI

from school_portal.auth.crypto import encrypt_data
from school_portal.auth.passwords import hash_password
from school_portal.db.models import UserType, utcnow
from school_portal.db.repositories.admins import AdminRepo
from school_portal.settings import Settings


async def _create_admin(app: FastAPI, *, email: str, password: str) -> uuid.UUID:
    async with app.state.sessionmaker() as session:
        admin = await AdminRepo(session).create(
            name="Office Admin",
            email=email,
            password_hash=hash_password(password),
            user_type=UserType.admin,
        )
        await session.commit()
        return admin.id


async def _reset_token(app: FastAPI, email: str) -> str | None:
    async with app.state.sessionmaker() as session:
        admin = await AdminRepo(session).get_by_email(email)
        return admin.reset_password_token if admin else None


@pytest.mark.asyncio
async def test_login_returns_encrypted_tokens(login, settings: Settings) -> None:
    r = await login()
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Authorized."
    tokens = body["data"]
    assert set(tokens) == {"accessToken", "refreshToken"}
    # Encrypted, so not a bare three-part JWT.
    assert tokens["accessToken"].count(".") != 2


@pytest.mark.asyncio
async def test_login_unknown_email(login) -> None:
    r = await login(email="nobody@school.example.com")
    assert r.status_code == 401
    assert r.json()["message"] == (
        "Unauthorized access. Please check your email and password and try again."
    )


@pytest.mark.asyncio
async def test_login_wrong_password(login) -> None:
    r = await login(password="Wrong@1234")
    assert r.status_code == 401
    assert r.json()["message"].startswith("Incorrect password.")


@pytest.mark.asyncio
async def test_login_with_unencrypted_password(client: httpx.AsyncClient, settings: Settings) -> None:
    r = await client.post(
        "/api/v1/auth/admin/login",
        json={"email": settings.system_admin_email, "password": "plain-text"},
    )
    assert r.status_code == 401
    assert r.json()["message"] == "Bad encrypted data."


@pytest.mark.asyncio
async def test_login_body_errors(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/api/v1/auth/admin/login", content=b"", headers={"Content-Type": "application/json"}
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Request body is empty, expected data in JSON format."

    r = await client.post(
        "/api/v1/auth/admin/login", content=b"{nope", headers={"Content-Type": "application/json"}
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid JSON body or empty request body."

    r = await client.post("/api/v1/auth/admin/login", json={"email": "not-an-email", "password": "x"})
    assert r.status_code == 400
    assert r.json()["data"][0]["path"] == "email"

    r = await client.post(
        "/api/v1/auth/admin/login", content=b"email=x", headers={"Content-Type": "text/plain"}
    )
    assert r.status_code == 415
    assert r.json()["message"] == "Unsupported Content-Type: text/plain"


@pytest.mark.asyncio
async def test_super_admin_route_rejects_regular_admin(app: FastAPI, login) -> None:
    await _create_admin(app, email="office@school.example.com", password="Office@123")

    r = await login(email="office@school.example.com", password="Office@123", role="super-admin")
    assert r.status_code == 403

    r = await login(email="office@school.example.com", password="Office@123", role="admin")
    assert r.status_code == 200

    # The configured system admin is a super-admin and may use either route.
    r = await login(role="super-admin")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_profile(client: httpx.AsyncClient, auth_headers: dict[str, str], settings: Settings) -> None:
    r = await client.get("/api/v1/auth/profile", headers=auth_headers)
    assert r.status_code == 200
    profile = r.json()["data"]
    assert profile["email"] == settings.system_admin_email
    assert profile["userType"] == "super-admin"


@pytest.mark.asyncio
async def test_profile_requires_token(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/v1/auth/profile")
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid token provided."

    r = await client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_refresh_token(client: httpx.AsyncClient, tokens: dict[str, str]) -> None:
    r = await client.get(
        "/api/v1/auth/refresh-token",
        headers={"Authorization": f"Bearer {tokens['refreshToken']}"},
    )
    assert r.status_code == 200
    assert set(r.json()["data"]) == {"accessToken", "refreshToken"}

    # An access token is not accepted where a refresh token is expected, and vice versa.
    r = await client.get(
        "/api/v1/auth/refresh-token",
        headers={"Authorization": f"Bearer {tokens['accessToken']}"},
    )
    assert r.status_code == 403
    r = await client.get(
        "/api/v1/auth/profile",
        headers={"Authorization": f"Bearer {tokens['refreshToken']}"},
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_verify_user(app: FastAPI, client: httpx.AsyncClient) -> None:
    admin_id = await _create_admin(app, email="office@school.example.com", password="Office@123")

    r = await client.get(f"/api/v1/auth/verify/user/{admin_id}")
    assert r.status_code == 200
    assert r.json()["message"] == "User verified."
    assert r.json()["data"]["email"] == "office@school.example.com"

    r = await client.get(f"/api/v1/auth/verify/user/{uuid.uuid4()}")
    assert r.status_code == 404

    r = await client.get("/api/v1/auth/verify/user/not-a-uuid")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_password_reset_flow(
    app: FastAPI, client: httpx.AsyncClient, login, settings: Settings
) -> None:
    email = settings.system_admin_email
    key = settings.crypto_secret_key

    r = await client.post("/api/v1/auth/admin/request-new-password", json={"email": "x@school.example.com"})
    assert r.status_code == 404

    r = await client.put("/api/v1/auth/admin/request-new-password", json={"email": email})
    assert r.status_code == 200
    assert r.json()["message"] == "Password reset email sent successfully."
    token = await _reset_token(app, email)
    assert token is not None and len(token) == 40

    path = f"/api/v1/auth/admin/reset-password/{token}"
    r = await client.post(
        path,
        json={"password": encrypt_data(key, "Fresh@1234"), "confirmPassword": encrypt_data(key, "Other@1234")},
    )
    assert r.status_code == 400
    assert r.json()["data"][0] == {"path": "confirmPassword", "message": "Passwords must match"}

    r = await client.post(
        path,
        json={"password": encrypt_data(key, "weak"), "confirmPassword": encrypt_data(key, "weak")},
    )
    assert r.status_code == 400

    body = {"password": encrypt_data(key, "Fresh@1234"), "confirmPassword": encrypt_data(key, "Fresh@1234")}
    r = await client.post("/api/v1/auth/admin/reset-password/unknown-token", json=body)
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid reset password token."

    r = await client.put(path, json=body)
    assert r.status_code == 200
    assert r.json()["message"] == "Password reset successful."

    # Tokens are single use.
    r = await client.put(path, json=body)
    assert r.status_code == 400

    assert (await login()).status_code == 401
    assert (await login(password="Fresh@1234")).status_code == 200


@pytest.mark.asyncio
async def test_expired_reset_token(app: FastAPI, client: httpx.AsyncClient, settings: Settings) -> None:
    async with app.state.sessionmaker() as session:
        repo = AdminRepo(session)
        admin = await repo.get_by_email(settings.system_admin_email)
        await repo.set_reset_token(
            admin, token="a" * 40, expires_at=utcnow() - timedelta(minutes=1)
        )
        await session.commit()

    key = settings.crypto_secret_key
    r = await client.post(
        f"/api/v1/auth/reset-password/{'a' * 40}",
        json={"password": encrypt_data(key, "Fresh@1234"), "confirmPassword": encrypt_data(key, "Fresh@1234")},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid reset password token."
