"""Project routes — envelope shape, auth gate, multipart aliases, round-trip.

Invariants:
    - Every mutation and GET /{id} return 401 without a bearer token
    - Invalid ids and query values return 400 with errors keyed by field
    - A created project fetched by id returns the supplied field values
"""

import pytest

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
PROJECT = {
    "name": "Portfolio Site",
    "details": "Personal site built with React",
    "skills": ["react", "tailwind"],
    "demo_link": "https://me.example.com",
    "github_link": "https://github.com/me/site",
}


async def _create(client, auth_headers, body=None):
    res = await client.post("/api/projects", json=body or PROJECT, headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


async def test_create_requires_token(client):
    res = await client.post("/api/projects", json=PROJECT)
    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Access token required"


async def test_invalid_token_is_401(client):
    res = await client.post(
        "/api/projects", json=PROJECT, headers={"Authorization": "Bearer nope"},
    )
    assert res.status_code == 401


async def test_roundtrip_returns_supplied_fields(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.get(f"/api/projects/{created['id']}", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    for field, value in PROJECT.items():
        assert data[field] == value
    assert data["created_at"] and data["updated_at"]
    assert data["has_image"] is False
    assert data["image_url"] is None


async def test_get_by_id_requires_token(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.get(f"/api/projects/{created['id']}")
    assert res.status_code == 401


async def test_get_unknown_id_is_404(client, auth_headers):
    res = await client.get("/api/projects/9999", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Project not found"


async def test_non_numeric_id_is_400(client, auth_headers):
    res = await client.get("/api/projects/abc", headers=auth_headers)
    assert res.status_code == 400
    assert "project_id" in res.json()["errors"]


async def test_zero_id_is_400(client, auth_headers):
    res = await client.delete("/api/projects/0", headers=auth_headers)
    assert res.status_code == 400


async def test_validation_reports_every_field(client, auth_headers):
    res = await client.post(
        "/api/projects", json={"details": "short"}, headers=auth_headers,
    )
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert set(body["errors"]) == {"name", "details"}


async def test_skills_omitted_is_empty_list(client, auth_headers):
    data = await _create(client, auth_headers, {"name": "CLI", "details": "A command line tool"})
    assert data["skills"] == []


async def test_duplicate_name_is_400_conflict(client, auth_headers):
    await _create(client, auth_headers)
    res = await client.post("/api/projects", json=PROJECT, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Project with this name already exists"


async def test_multipart_create_with_uploaded_file_alias(client, auth_headers, blob_store):
    res = await client.post(
        "/api/projects",
        data={"name": "Gallery", "details": "Photo gallery app", "skills": ["vue", "css"]},
        files={"uploadedFile": ("shot.png", PNG, "image/png")},
        headers=auth_headers,
    )
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    assert data["has_image"] is True
    assert data["skills"] == ["vue", "css"]
    assert data["image_url"].rsplit("/", 1)[-1] in await blob_store.list_names()


async def test_multipart_comma_separated_skills(client, auth_headers):
    res = await client.post(
        "/api/projects",
        data={"name": "Gallery", "details": "Photo gallery app", "skills": "vue, css"},
        files={"image": ("shot.png", PNG, "image/png")},
        headers=auth_headers,
    )
    assert res.json()["data"]["skills"] == ["vue", "css"]


async def test_multipart_json_array_skills(client, auth_headers):
    res = await client.post(
        "/api/projects",
        data={
            "name": "Gallery",
            "details": "Photo gallery app",
            "skills": '["JavaScript", "React", "Node.js"]',
        },
        files={"image": ("shot.png", PNG, "image/png")},
        headers=auth_headers,
    )
    assert res.status_code == 201, res.text
    assert res.json()["data"]["skills"] == ["JavaScript", "React", "Node.js"]


async def test_oversized_upload_is_rejected(client, auth_headers, blob_store):
    res = await client.post(
        "/api/projects",
        data={"name": "Huge", "details": "Project with a huge image"},
        files={"image": ("big.png", PNG + b"\x00" * (10 * 1024 * 1024), "image/png")},
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"].startswith("File too large")
    assert await blob_store.list_names() == []


async def test_pdf_upload_is_rejected_and_nothing_persisted(client, auth_headers, blob_store):
    res = await client.post(
        "/api/projects",
        data={"name": "Resume", "details": "My resume as a project"},
        files={"image": ("cv.pdf", b"%PDF-1.7", "application/pdf")},
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert await blob_store.list_names() == []
    listing = await client.get("/api/projects")
    assert listing.json()["pagination"]["total"] == 0


async def test_two_files_are_rejected(client, auth_headers):
    res = await client.post(
        "/api/projects",
        data={"name": "Gallery", "details": "Photo gallery app"},
        files=[
            ("image", ("a.png", PNG, "image/png")),
            ("uploadedFile", ("b.png", PNG, "image/png")),
        ],
        headers=auth_headers,
    )
    assert res.status_code == 400


@pytest.mark.parametrize("value", [None, ""])
async def test_optional_links_accept_null_and_blank(client, auth_headers, value):
    created = await _create(
        client, auth_headers,
        {**PROJECT, "name": "Links", "demo_link": value, "github_link": value},
    )
    assert created["demo_link"] is None
    assert created["github_link"] is None

    res = await client.put(
        f"/api/projects/{created['id']}",
        json={"demo_link": "https://demo.example.com", "github_link": value},
        headers=auth_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["demo_link"] == "https://demo.example.com"

    res = await client.put(
        f"/api/projects/{created['id']}",
        json={"demo_link": value},
        headers=auth_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["demo_link"] is None


async def test_update_is_partial(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.put(
        f"/api/projects/{created['id']}",
        json={"details": "Rewritten description text"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["details"] == "Rewritten description text"
    assert data["name"] == PROJECT["name"]
    assert data["skills"] == PROJECT["skills"]


async def test_update_requires_token(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.put(f"/api/projects/{created['id']}", json={"name": "X"})
    assert res.status_code == 401


async def test_delete_then_404(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.delete(f"/api/projects/{created['id']}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Project deleted successfully"
    res = await client.get(f"/api/projects/{created['id']}", headers=auth_headers)
    assert res.status_code == 404


async def test_delete_requires_token(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.delete(f"/api/projects/{created['id']}")
    assert res.status_code == 401


async def test_list_is_public_and_paginated(client, auth_headers):
    for i in range(3):
        await _create(client, auth_headers, {**PROJECT, "name": f"Project {i}"})
    res = await client.get("/api/projects", params={"limit": 2})
    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {
        "page": 1, "limit": 2, "total": 3, "pages": 2, "hasNext": True, "hasPrev": False,
    }


async def test_list_rejects_bad_query(client):
    res = await client.get("/api/projects", params={"limit": 500, "sortBy": "details"})
    assert res.status_code == 400
    assert set(res.json()["errors"]) == {"limit", "sortBy"}


async def test_list_filters_by_skills_and_has_image(client, auth_headers):
    await _create(client, auth_headers)
    await _create(client, auth_headers, {**PROJECT, "name": "Other", "skills": ["go"]})
    res = await client.get("/api/projects", params={"skills": "react", "hasImage": "false"})
    names = [p["name"] for p in res.json()["data"]]
    assert names == ["Portfolio Site"]


async def test_search_envelope(client, auth_headers):
    await _create(client, auth_headers)
    res = await client.get("/api/projects/search", params={"q": "react"})
    assert res.status_code == 200
    body = res.json()
    assert body["search"]["query"] == "react"
    assert body["search"]["totalResults"] == 1
    assert body["pagination"]["total"] == 1


async def test_search_requires_q(client):
    res = await client.get("/api/projects/search")
    assert res.status_code == 400
    assert "q" in res.json()["errors"]


async def test_upload_image_endpoint(client, auth_headers, blob_store):
    res = await client.post(
        "/api/projects/upload-image",
        files={"uploadedFile": ("logo.png", PNG, "image/png")},
        headers=auth_headers,
    )
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["originalName"] == "logo.png"
    assert data["mimetype"] == "image/png"
    assert data["size"] == len(PNG)
    assert data["url"].endswith(data["filename"])
    assert await blob_store.list_names() == [data["filename"]]


async def test_upload_image_without_file_is_400(client, auth_headers):
    res = await client.post(
        "/api/projects/upload-image", data={"x": "1"}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["message"] == "No file uploaded"


async def test_upload_image_requires_token(client):
    res = await client.post(
        "/api/projects/upload-image", files={"image": ("a.png", PNG, "image/png")},
    )
    assert res.status_code == 401
