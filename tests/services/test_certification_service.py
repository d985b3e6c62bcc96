"""Certification service — natural key (title, issuer) and issuer listing."""

from datetime import date

import pytest

from portfolio_api.core.errors import ConflictError
from portfolio_api.services.certification_service import CertificationService


@pytest.fixture
def service(store):
    return CertificationService(store)


def _cert(title="CKA", issuer="CNCF", issued=date(2023, 1, 1)):
    return {"title": title, "issuer": issuer, "issued_date": issued}


async def test_same_title_different_issuer_is_allowed(service):
    await service.create(_cert())
    await service.create(_cert(issuer="Linux Foundation"))


async def test_same_title_and_issuer_conflicts(service):
    await service.create(_cert())
    with pytest.raises(ConflictError) as exc:
        await service.create(_cert(issued=date(2024, 1, 1)))
    assert exc.value.message == "Certification with this title and issuer already exists"


async def test_update_issuer_into_existing_pair_conflicts(service):
    await service.create(_cert())
    other = await service.create(_cert(issuer="Linux Foundation"))
    with pytest.raises(ConflictError):
        await service.update(other.id, {"issuer": "CNCF"})


async def test_update_non_key_field(service):
    row = await service.create(_cert())
    updated = await service.update(row.id, {"link_url": "https://verify.test/1"})
    assert updated.has_link is True
    assert updated.title == "CKA"


async def test_by_issuer_is_case_insensitive_substring(service):
    await service.create(_cert("CKA", "CNCF"))
    await service.create(_cert("CKAD", "CNCF"))
    await service.create(_cert("SAA", "Amazon Web Services"))
    rows, pagination = await service.by_issuer("amazon")
    assert [r.title for r in rows] == ["SAA"]
    assert pagination.total == 1


async def test_list_sorted_by_issued_date_desc(service):
    await service.create(_cert("Old", issued=date(2019, 1, 1)))
    await service.create(_cert("New", issued=date(2024, 1, 1)))
    rows, _ = await service.list()
    assert [r.title for r in rows] == ["New", "Old"]
