"""
tests.test_resources

Generic resource routes: CRUD, categories, uniqueness, uploads and guards.
"""

from __future__ import annotations

import uuid
from pathlib import Path

import httpx
import pytest

from school_portal.resources.registry import MAX_FILE_SIZE
from school_portal.settings import Settings

# Smallest valid PNG (1x1, transparent).
PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)

FAQ = {"question": "When does the term start?", "answer": "The first Sunday of January."}


def _png(name: str = "photo.png") -> tuple[str, bytes, str]:
    return (name, PNG, "image/png")


@pytest.mark.asyncio
async def test_faq_crud(client: httpx.AsyncClient, auth_headers: dict[str, str]) -> None:
    r = await client.get("/api/v1/faq")
    assert r.status_code == 404
    assert r.json()["message"] == "No FAQ available at this time."

    r = await client.post("/api/v1/admin/faq", json=FAQ, headers=auth_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == f'FAQ entry with question "{FAQ["question"]}" created successfully.'
    entry = body["data"]
    assert set(entry) == {"id", "question", "answer", "createdAt", "updatedAt"}
    entry_id = entry["id"]

    r = await client.get("/api/v1/faq")
    assert r.status_code == 200
    assert r.json()["message"] == "1 FAQ retrieved successfully."
    assert [e["id"] for e in r.json()["data"]] == [entry_id]

    r = await client.get(f"/api/v1/faq/{entry_id}")
    assert r.status_code == 200
    assert r.json()["message"] == f'FAQ entry with the ID: "{entry_id}" retrieved successfully.'

    r = await client.patch(
        f"/api/v1/admin/faq/{entry_id}", json={"answer": "Mid January."}, headers=auth_headers
    )
    assert r.status_code == 200
    assert r.json()["message"] == f'FAQ entry with the ID "{entry_id}" updated successfully.'
    assert r.json()["data"]["answer"] == "Mid January."
    assert r.json()["data"]["question"] == FAQ["question"]

    r = await client.delete(f"/api/v1/admin/faq/{entry_id}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["message"] == f'FAQ entry with ID: "{entry_id}" deleted successfully.'

    r = await client.get(f"/api/v1/faq/{entry_id}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_faq_search_filters(client: httpx.AsyncClient, auth_headers: dict[str, str]) -> None:
    await client.post("/api/v1/admin/faq", json=FAQ, headers=auth_headers)
    await client.post(
        "/api/v1/admin/faq",
        json={"question": "Is there a bus service?", "answer": "Yes, on all routes."},
        headers=auth_headers,
    )

    r = await client.get("/api/v1/faq", params={"question": "bus"})
    assert r.status_code == 200
    assert [e["question"] for e in r.json()["data"]] == ["Is there a bus service?"]

    r = await client.get("/api/v1/faq", params={"question": "library"})
    assert r.status_code == 404

    r = await client.get("/api/v1/faq", params={"unknown": "x"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_faq_conflicts(client: httpx.AsyncClient, auth_headers: dict[str, str]) -> None:
    r = await client.post("/api/v1/admin/faq", json=FAQ, headers=auth_headers)
    first_id = r.json()["data"]["id"]

    r = await client.post("/api/v1/admin/faq", json=FAQ, headers=auth_headers)
    assert r.status_code == 409
    assert r.json()["message"] == f'FAQ entry with question "{FAQ["question"]}" already exists.'

    r = await client.post(
        "/api/v1/admin/faq",
        json={"question": "Other question?", "answer": "Other answer."},
        headers=auth_headers,
    )
    second_id = r.json()["data"]["id"]

    r = await client.patch(
        f"/api/v1/admin/faq/{second_id}", json={"question": FAQ["question"]}, headers=auth_headers
    )
    assert r.status_code == 409

    # Re-sending an entry's own unique value is not a conflict.
    r = await client.patch(
        f"/api/v1/admin/faq/{first_id}", json={"question": FAQ["question"]}, headers=auth_headers
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_faq_validation(client: httpx.AsyncClient, auth_headers: dict[str, str]) -> None:
    r = await client.post("/api/v1/admin/faq", json={"question": "Only a question?"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Validation error occurred."
    assert {"path": "answer", "message": "Field required"} in r.json()["data"]

    r = await client.post(
        "/api/v1/admin/faq", json={**FAQ, "question": "x" * 101}, headers=auth_headers
    )
    assert r.status_code == 400

    r = await client.post("/api/v1/admin/faq", json={**FAQ, "extra": 1}, headers=auth_headers)
    assert r.status_code == 400

    r = await client.post("/api/v1/admin/faq", json=FAQ, headers=auth_headers)
    entry_id = r.json()["data"]["id"]
    r = await client.patch(f"/api/v1/admin/faq/{entry_id}", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["data"][0]["message"] == 'At least one field is required along with "id".'

    r = await client.patch(
        f"/api/v1/admin/faq/{uuid.uuid4()}", json={"answer": "x"}, headers=auth_headers
    )
    assert r.status_code == 404

    r = await client.get("/api/v1/faq/not-a-uuid")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_write_guards(client: httpx.AsyncClient, auth_headers: dict[str, str]) -> None:
    r = await client.post("/api/v1/admin/faq", json=FAQ)
    assert r.status_code == 401

    # Content type is rejected before the token is even looked at.
    r = await client.post(
        "/api/v1/admin/faq", content=b"question=x", headers={"Content-Type": "text/plain"}
    )
    assert r.status_code == 415

    r = await client.post(
        "/api/v1/admin/career", json={"title": "x"}, headers=auth_headers
    )
    assert r.status_code == 415
    assert r.json()["message"] == "Unsupported Content-Type: application/json"

    r = await client.delete(f"/api/v1/admin/faq/{uuid.uuid4()}")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_career_uploads(
    client: httpx.AsyncClient, auth_headers: dict[str, str], settings: Settings
) -> None:
    fields = {
        "title": "Mathematics teacher",
        "subTitle": "Full time",
        "description": "Teach grades 6 to 8.",
        "date": "05/01/2025",
    }

    r = await client.post("/api/v1/admin/career", data=fields, headers=auth_headers)
    assert r.status_code == 415  # no files at all is sent form-urlencoded

    r = await client.post(
        "/api/v1/admin/career",
        data=fields,
        files=[("files", ("notes.txt", b"hello", "text/plain"))],
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["data"][0]["path"] == "files"

    r = await client.post(
        "/api/v1/admin/career",
        data=fields,
        files=[("files", _png("a.png")), ("files", _png("b.png"))],
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    entry = r.json()["data"]
    assert entry["subTitle"] == "Full time"
    assert entry["date"].startswith("2025-01-05")
    first, second = entry["files"]
    upload_dir = Path(settings.upload_dir)
    assert (upload_dir / first["fileId"]).is_file()
    assert first["file"] == f"http://test/uploads/{first['fileId']}"

    r = await client.get(f"/uploads/{first['fileId']}")
    assert r.status_code == 200
    assert r.content == PNG

    r = await client.patch(
        f"/api/v1/admin/career/{entry['id']}",
        data={"deleteFiles": first["fileId"]},
        files=[("files", _png("c.png"))],
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    remaining = r.json()["data"]["files"]
    assert [f["fileId"] for f in remaining][0] == second["fileId"]
    assert len(remaining) == 2
    assert not (upload_dir / first["fileId"]).exists()

    r = await client.patch(
        f"/api/v1/admin/career/{entry['id']}",
        data={"deleteFiles": "missing.png"},
        files=[("files", _png("d.png"))],
        headers=auth_headers,
    )
    assert r.status_code == 404
    assert "missing.png" in r.json()["message"]

    r = await client.delete(f"/api/v1/admin/career/{entry['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert not any(upload_dir.iterdir())


@pytest.mark.asyncio
async def test_announcement_categories(client: httpx.AsyncClient, auth_headers: dict[str, str]) -> None:
    fields = {
        "title": "Exam routine",
        "description": "Published for all classes.",
        "date": "2025-03-01",
        "isHeadline": "true",
    }

    r = await client.post(
        "/api/v1/admin/announcement/bogus",
        data=fields,
        files=[("files", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["data"][0]["path"] == "category"

    r = await client.post(
        "/api/v1/admin/announcement/notice",
        data=fields,
        files=[("files", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    entry = r.json()["data"]
    assert entry["category"] == "notice"
    assert entry["isHeadline"] is True
    assert entry["isAdvertise"] is False

    # Titles are unique per category only.
    r = await client.post(
        "/api/v1/admin/announcement/notice",
        data=fields,
        files=[("files", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 409
    r = await client.post(
        "/api/v1/admin/announcement/transportation",
        data=fields,
        files=[("files", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 201

    r = await client.get("/api/v1/announcement/notice")
    assert r.status_code == 200
    assert r.json()["message"] == (
        'Announcement entry with the CATEGORY: "notice" retrieved successfully.'
    )
    assert len(r.json()["data"]) == 1

    r = await client.get("/api/v1/announcement/admission_info")
    assert r.status_code == 404

    r = await client.get(f"/api/v1/announcement/notice/{entry['id']}")
    assert r.status_code == 200
    r = await client.get(f"/api/v1/announcement/transportation/{entry['id']}")
    assert r.status_code == 404

    r = await client.get("/api/v1/announcement/notice", params={"date": "01/03/2025"})
    assert r.status_code == 200
    r = await client.get("/api/v1/announcement/notice", params={"date": "02/03/2025"})
    assert r.status_code == 404

    r = await client.delete(
        f"/api/v1/admin/announcement/transportation/{entry['id']}", headers=auth_headers
    )
    assert r.status_code == 404
    r = await client.delete(f"/api/v1/admin/announcement/notice/{entry['id']}", headers=auth_headers)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_donations_are_admin_read_only(
    client: httpx.AsyncClient, auth_headers: dict[str, str]
) -> None:
    donation = {"memberName": "Rahim", "amount": 500, "paymentMethod": "bank", "date": "01/02/2025"}

    r = await client.post(
        "/api/v1/admin/donation", json={**donation, "amount": -1}, headers=auth_headers
    )
    assert r.status_code == 400

    r = await client.post("/api/v1/admin/donation", json=donation, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["message"] == 'Donation entry with memberName "Rahim" created successfully.'
    entry_id = r.json()["data"]["id"]

    r = await client.get("/api/v1/donation")
    assert r.status_code == 404
    r = await client.get("/api/v1/admin/donation")
    assert r.status_code == 401

    r = await client.get("/api/v1/admin/donation", headers=auth_headers)
    assert r.status_code == 200
    r = await client.get(f"/api/v1/admin/donation/{entry_id}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["data"]["bankName"] is None


@pytest.mark.asyncio
async def test_gallery_video_requires_https_links(
    client: httpx.AsyncClient, auth_headers: dict[str, str]
) -> None:
    video = {"title": "Sports day", "description": "Highlights.", "youtubeLinks": ["http://youtu.be/x"]}
    r = await client.post("/api/v1/admin/gallery/video", json=video, headers=auth_headers)
    assert r.status_code == 400

    video["youtubeLinks"] = ["https://youtu.be/x", "https://youtu.be/y"]
    r = await client.post("/api/v1/admin/gallery/video", json=video, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["data"]["youtubeLinks"] == video["youtubeLinks"]

    r = await client.get("/api/v1/gallery/video")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_donation_amount_must_be_finite(
    client: httpx.AsyncClient, auth_headers: dict[str, str]
) -> None:
    # `1e400` overflows to inf when decoded; it must never reach the database.
    body = b'{"memberName": "Karim", "amount": 1e400, "paymentMethod": "cash", "date": "01/02/2025"}'
    r = await client.post(
        "/api/v1/admin/donation",
        content=body,
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["data"][0]["path"] == "amount"

    r = await client.get("/api/v1/admin/donation", headers=auth_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_announcements_across_categories(
    client: httpx.AsyncClient, auth_headers: dict[str, str]
) -> None:
    fields = {"title": "Bus timings", "description": "New winter schedule.", "date": "10/11/2025"}
    ids = {}
    for category in ("notice", "transportation"):
        r = await client.post(
            f"/api/v1/admin/announcement/{category}",
            data=fields,
            files=[("files", _png())],
            headers=auth_headers,
        )
        assert r.status_code == 201, r.text
        ids[category] = r.json()["data"]["id"]

    r = await client.get("/api/v1/announcement")
    assert r.status_code == 200
    assert r.json()["message"] == "2 Announcement retrieved successfully."
    assert {e["category"] for e in r.json()["data"]} == {"notice", "transportation"}

    notice_url = f"/api/v1/admin/announcement/notice/{ids['notice']}"

    r = await client.patch(
        notice_url, data={"category": "bogus"}, files=[("files", _png())], headers=auth_headers
    )
    assert r.status_code == 400
    assert r.json()["data"][0]["path"] == "category"

    # The title is already used in the target category.
    r = await client.patch(
        notice_url,
        data={"category": "transportation"},
        files=[("files", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 409

    r = await client.delete(
        f"/api/v1/admin/announcement/transportation/{ids['transportation']}", headers=auth_headers
    )
    assert r.status_code == 200

    r = await client.patch(
        notice_url,
        data={"category": "transportation"},
        files=[("files", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["category"] == "transportation"

    r = await client.get("/api/v1/announcement/notice")
    assert r.status_code == 404
    r = await client.get(f"/api/v1/announcement/transportation/{ids['notice']}")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_oversized_upload_is_rejected(
    client: httpx.AsyncClient, auth_headers: dict[str, str], settings: Settings
) -> None:
    fields = {
        "title": "Librarian",
        "subTitle": "Part time",
        "description": "Runs the school library.",
        "date": "05/01/2025",
    }
    big = PNG + b"\0" * MAX_FILE_SIZE
    r = await client.post(
        "/api/v1/admin/career",
        data=fields,
        files=[("files", ("big.png", big, "image/png"))],
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["data"] == [{"path": "files", "message": 'File "big.png" exceeds 5 MB'}]

    upload_dir = Path(settings.upload_dir)
    assert not any(upload_dir.iterdir())


@pytest.mark.asyncio
async def test_replacing_single_file_removes_old_one(
    client: httpx.AsyncClient, auth_headers: dict[str, str], settings: Settings
) -> None:
    r = await client.post(
        "/api/v1/admin/school/speech",
        data={"title": "Principal's welcome", "description": "Welcome to a new year."},
        files=[("image", _png("old.png"))],
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    entry = r.json()["data"]
    old_id = entry["image"]["fileId"]
    upload_dir = Path(settings.upload_dir)
    assert (upload_dir / old_id).is_file()

    r = await client.patch(
        f"/api/v1/admin/school/speech/{entry['id']}",
        files=[("image", _png("new.png"))],
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    new_id = r.json()["data"]["image"]["fileId"]
    assert new_id != old_id
    assert (upload_dir / new_id).is_file()
    assert not (upload_dir / old_id).exists()


@pytest.mark.asyncio
async def test_team_emails_are_unique_ignoring_case(
    client: httpx.AsyncClient, auth_headers: dict[str, str]
) -> None:
    member = {
        "name": "Nadia Islam",
        "email": "Nadia.Islam@School.example.com",
        "joinDate": "01/01/2024",
        "designation": "Coordinator",
        "organization": "Parents' council",
    }
    r = await client.post(
        "/api/v1/admin/team", data=member, files=[("image", _png())], headers=auth_headers
    )
    assert r.status_code == 201, r.text
    assert r.json()["data"]["email"] == "nadia.islam@school.example.com"

    r = await client.post(
        "/api/v1/admin/team",
        data={**member, "email": "nadia.islam@school.example.com"},
        files=[("image", _png())],
        headers=auth_headers,
    )
    assert r.status_code == 409
    assert r.json()["message"] == (
        'Team entry with email "nadia.islam@school.example.com" already exists.'
    )
