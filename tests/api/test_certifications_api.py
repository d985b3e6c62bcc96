"""Certification routes — public reads, authenticated writes."""

import pytest

CERT = {
    "title": "Certified Kubernetes Administrator",
    "issuer": "CNCF",
    "issued_date": "2023-03-01",
    "certification_id": "LF-123",
    "link_url": "https://verify.example.com/LF-123",
}


async def _create(client, auth_headers, body=None):
    res = await client.post("/api/certifications", json=body or CERT, headers=auth_headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


async def test_create_requires_token(client):
    res = await client.post("/api/certifications", json=CERT)
    assert res.status_code == 401


async def test_get_is_public_and_has_link(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.get(f"/api/certifications/{created['id']}")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["issued_date"] == "2023-03-01"
    assert data["has_link"] is True


async def test_missing_fields_all_reported(client, auth_headers):
    res = await client.post("/api/certifications", json={}, headers=auth_headers)
    assert res.status_code == 400
    assert set(res.json()["errors"]) == {"title", "issuer", "issued_date"}


async def test_duplicate_pair_conflicts(client, auth_headers):
    await _create(client, auth_headers)
    res = await client.post("/api/certifications", json=CERT, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Certification with this title and issuer already exists"


async def test_by_issuer(client, auth_headers):
    await _create(client, auth_headers)
    await _create(client, auth_headers, {**CERT, "issuer": "Amazon"})
    res = await client.get("/api/certifications/issuer/cncf")
    body = res.json()
    assert res.status_code == 200
    assert [c["issuer"] for c in body["data"]] == ["CNCF"]
    assert body["pagination"]["total"] == 1


async def test_update_and_delete(client, auth_headers):
    created = await _create(client, auth_headers)
    res = await client.put(
        f"/api/certifications/{created['id']}",
        json={"link_url": ""},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["data"]["has_link"] is False

    res = await client.delete(f"/api/certifications/{created['id']}")
    assert res.status_code == 401
    res = await client.delete(f"/api/certifications/{created['id']}", headers=auth_headers)
    assert res.status_code == 200
    res = await client.get(f"/api/certifications/{created['id']}")
    assert res.status_code == 404


async def test_update_unknown_id_is_404(client, auth_headers):
    res = await client.put(
        "/api/certifications/777", json={"title": "X"}, headers=auth_headers,
    )
    assert res.status_code == 404


@pytest.mark.parametrize("value", [None, ""])
async def test_optional_fields_accept_null_and_blank(client, auth_headers, value):
    created = await _create(
        client, auth_headers,
        {**CERT, "certification_id": value, "details": value, "link_url": value},
    )
    assert created["certification_id"] is None
    assert created["details"] is None
    assert created["has_link"] is False

    res = await client.put(
        f"/api/certifications/{created['id']}",
        json={"certification_id": value, "details": value, "link_url": value},
        headers=auth_headers,
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["link_url"] is None


async def test_details_over_2000_chars_reports_characters(client, auth_headers):
    res = await client.post(
        "/api/certifications",
        json={**CERT, "details": "x" * 2001},
        headers=auth_headers,
    )
    assert res.status_code == 400
    assert res.json()["errors"] == {"details": "Details must not exceed 2000 characters"}
