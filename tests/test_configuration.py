"""
tests.test_configuration

The single-row site configuration.
"""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from school_portal.settings import Settings

PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)

CONFIG = {
    "name": "Green Valley School",
    "description": "A community school since 1972.",
    "address": "12 Lake Road, Dhaka",
    "emails": ["office@greenvalley.example.org", "info@greenvalley.example.org"],
    "contacts": ["01712345678"],
    "socialLinks": ["https://facebook.com/greenvalley"],
}

ADMIN_PATH = "/api/v1/admin/configuration"


def _image(field: str, name: str = "logo.png") -> list[tuple[str, tuple[str, bytes, str]]]:
    return [(field, (name, PNG, "image/png"))]


@pytest.mark.asyncio
async def test_configuration_lifecycle(
    client: httpx.AsyncClient, auth_headers: dict[str, str], settings: Settings
) -> None:
    r = await client.get("/api/v1/configuration")
    assert r.status_code == 404
    assert r.json()["message"] == "No configuration found."

    r = await client.post(ADMIN_PATH, data=CONFIG, files=_image("banner"), headers=auth_headers)
    assert r.status_code == 400
    assert any(e["path"] == "logo" for e in r.json()["data"])

    r = await client.post(ADMIN_PATH, data=CONFIG, files=_image("logo"), headers=auth_headers)
    assert r.status_code == 201, r.text
    assert r.json()["message"] == "Configuration entry created successfully."
    created = r.json()["data"]
    assert created["emails"] == CONFIG["emails"]
    assert created["contacts"] == ["01712345678"]
    assert created["banner"] is None
    old_logo = created["logo"]["fileId"]

    # A second POST updates the stored row with whatever was sent.
    r = await client.post(
        ADMIN_PATH, data={"name": "Green Valley High"}, files=_image("banner"), headers=auth_headers
    )
    assert r.status_code == 200
    assert r.json()["message"] == "Configuration updated successfully."
    assert r.json()["data"]["name"] == "Green Valley High"
    assert r.json()["data"]["address"] == CONFIG["address"]
    assert r.json()["data"]["banner"] is not None

    r = await client.get("/api/v1/configuration")
    assert r.status_code == 200
    assert r.json()["message"] == "Configuration retrieved successfully."

    r = await client.patch(
        ADMIN_PATH, data={"contacts": "12345"}, files=_image("logo"), headers=auth_headers
    )
    assert r.status_code == 400

    r = await client.patch(
        ADMIN_PATH, data={"address": "1 Hill Road"}, files=_image("logo", "new.png"), headers=auth_headers
    )
    assert r.status_code == 200
    assert r.json()["message"] == "Configuration entry updated successfully."
    assert r.json()["data"]["logo"]["fileId"] != old_logo
    assert not (Path(settings.upload_dir) / old_logo).exists()

    r = await client.delete(ADMIN_PATH, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Configuration entry deleted successfully."

    r = await client.delete(ADMIN_PATH, headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Configuration entry not found."


@pytest.mark.asyncio
async def test_configuration_writes_need_form_data(
    client: httpx.AsyncClient, auth_headers: dict[str, str]
) -> None:
    r = await client.post(ADMIN_PATH, json=CONFIG, headers=auth_headers)
    assert r.status_code == 415

    r = await client.patch(ADMIN_PATH, data={"name": "x"}, files=_image("logo"))
    assert r.status_code == 401
