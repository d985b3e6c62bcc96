"""Project service — conflict check, image coupling and compensation.

Invariants:
    - A conflict stops the operation before any upload
    - Persist failure after upload removes the uploaded image and surfaces BackendError
    - Replacing an image deletes the old one only after the update commits
"""

import pytest

from portfolio_api.core.errors import BackendError, ConflictError, ResourceNotFoundError, UploadError
from portfolio_api.infrastructure.resource_store import SqlResourceStore
from portfolio_api.services.image_lifecycle import ImageUpload, name_from_url
from portfolio_api.services.project_service import ProjectService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
BASE = {"name": "Portfolio Site", "details": "Personal site built with React", "skills": []}


def _png(name="shot.png"):
    return ImageUpload(payload=PNG, mime_type="image/png", filename=name)


class FailingWriteStore(SqlResourceStore):
    """Reads work, every write fails like a dropped connection."""

    async def insert(self, model, record):
        raise BackendError("Failed to create project", "connection reset", "create")

    async def update(self, model, record_id, partial):
        raise BackendError("Failed to update project", "connection reset", "update")


@pytest.fixture
def service(store, images):
    return ProjectService(store, images)


async def test_create_without_skills_stores_empty_list(service):
    row = await service.create({"name": "CLI", "details": "Command line tool for ops"})
    assert row.skills == []
    assert row.has_image is False


async def test_create_with_image_sets_url(service, blob_store):
    row = await service.create(dict(BASE), _png())
    assert row.has_image is True
    assert await blob_store.list_names() == [name_from_url(row.image_url)]


async def test_duplicate_name_conflicts_before_upload(service, blob_store):
    await service.create(dict(BASE))
    with pytest.raises(ConflictError) as exc:
        await service.create(dict(BASE), _png())
    assert exc.value.message == "Project with this name already exists"
    assert await blob_store.list_names() == []


async def test_different_names_never_conflict(service):
    await service.create(dict(BASE))
    await service.create({**BASE, "name": "Portfolio Site 2"})


async def test_bad_image_aborts_before_persist(service, store):
    pdf = ImageUpload(payload=b"%PDF", mime_type="application/pdf", filename="cv.pdf")
    with pytest.raises(UploadError):
        await service.create(dict(BASE), pdf)
    _, pagination = await service.list()
    assert pagination.total == 0


async def test_persist_failure_removes_uploaded_image(test_db, images, blob_store):
    service = ProjectService(FailingWriteStore(test_db), images)
    with pytest.raises(BackendError):
        await service.create(dict(BASE), _png())
    assert await blob_store.list_names() == []


async def test_update_persist_failure_keeps_old_image(service, test_db, images, blob_store):
    row = await service.create(dict(BASE), _png("old.png"))
    old_name = name_from_url(row.image_url)

    failing = ProjectService(FailingWriteStore(test_db), images)
    with pytest.raises(BackendError):
        await failing.update(row.id, {"details": "Updated details for the site"}, _png("new.png"))
    assert await blob_store.list_names() == [old_name]


async def test_update_replaces_image_and_deletes_old(service, blob_store):
    row = await service.create(dict(BASE), _png("old.png"))
    old_name = name_from_url(row.image_url)

    updated = await service.update(row.id, {}, _png("new.png"))
    new_name = name_from_url(updated.image_url)
    assert new_name != old_name
    assert await blob_store.list_names() == [new_name]


async def test_update_without_file_keeps_image(service):
    row = await service.create(dict(BASE), _png())
    updated = await service.update(row.id, {"details": "Now with a longer description"})
    assert updated.image_url == row.image_url


async def test_update_unknown_id_is_not_found(service, blob_store):
    with pytest.raises(ResourceNotFoundError):
        await service.update(404, {"name": "Anything"}, _png())
    assert await blob_store.list_names() == []


async def test_update_to_taken_name_conflicts(service):
    await service.create(dict(BASE))
    other = await service.create({**BASE, "name": "Other"})
    with pytest.raises(ConflictError):
        await service.update(other.id, {"name": "Portfolio Site"})


async def test_update_keeping_own_name_is_allowed(service):
    row = await service.create(dict(BASE))
    updated = await service.update(row.id, {"name": "Portfolio Site", "skills": ["react"]})
    assert updated.skills == ["react"]


async def test_delete_removes_image(service, blob_store):
    row = await service.create(dict(BASE), _png())
    await service.delete(row.id)
    assert await blob_store.list_names() == []
    with pytest.raises(ResourceNotFoundError):
        await service.get(row.id)


async def test_search_matches_skill_or_text(service):
    await service.create({**BASE, "skills": ["fastapi"]})
    await service.create({"name": "Game", "details": "Built with FastAPI websockets"})
    await service.create({"name": "Other", "details": "Nothing relevant here"})
    rows, pagination = await service.search("fastapi")
    assert {r.name for r in rows} == {"Portfolio Site", "Game"}
    assert pagination.total == 2


async def test_list_filters_and_paginates(service):
    for i in range(5):
        await service.create({"name": f"P{i}", "details": "Ten chars minimum", "skills": ["go"]})
    await service.create({"name": "Py", "details": "Ten chars minimum", "skills": ["python"]})
    rows, pagination = await service.list(page=2, limit=2, skills=["go"], sort_by="name")
    assert pagination.total == 5
    assert pagination.pages == 3
    assert [r.name for r in rows] == ["P2", "P1"]


async def test_upload_image_stores_without_project(service, blob_store):
    stored = await service.upload_image(_png())
    assert await blob_store.list_names() == [stored.generated_name]
    _, pagination = await service.list()
    assert pagination.total == 0
