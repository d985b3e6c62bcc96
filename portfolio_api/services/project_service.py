"""Project Service — project CRUD with the image lifecycle coupled to each write.

Invariants:
    - Create/update order: conflict check → image upload → persist → cleanup
    - A persistence failure after a successful upload removes the new image
      (best-effort) and re-raises the original persistence error
    - The old image is removed only AFTER the update carrying its replacement commits
    - An update without a new file leaves image_url unchanged
    - Delete removes the stored image best-effort after the row is gone
"""

from __future__ import annotations

import logging
from typing import Any

from portfolio_api.core.domain_types import SortOrder
from portfolio_api.core.pagination import Pagination
from portfolio_api.core.query_filters import ArrayContains, Equals, Filter, TextSearch
from portfolio_api.core.repository_protocols import ResourceStore
from portfolio_api.models.project import Project
from portfolio_api.services.image_lifecycle import (
    ImageLifecycleManager, ImageUpload, StoredImage,
)
from portfolio_api.services.resource_service import ResourceService

logger = logging.getLogger(__name__)


class ProjectService(ResourceService):
    model = Project
    natural_key = ("name",)

    def __init__(self, store: ResourceStore, images: ImageLifecycleManager):
        super().__init__(store)
        self.images = images

    # ─── Reads ──────────────────────────────────────────────────

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: SortOrder = SortOrder.DESC,
        search: str | None = None,
        skills: list[str] | None = None,
        has_image: bool | None = None,
    ) -> tuple[list[Project], Pagination]:
        filters: list[Filter] = []
        if search:
            filters.append(TextSearch(search, ("name", "details")))
        if skills:
            filters.append(ArrayContains("skills", tuple(skills)))
        if has_image is not None:
            filters.append(Equals("has_image", has_image))
        return await self.page(filters, sort_by, sort_order, page, limit)

    async def search(self, q: str, page: int = 1, limit: int = 10) -> tuple[list[Project], Pagination]:
        """Match q against name, details, or an exact skill; newest first."""
        filters = [TextSearch(q, ("name", "details"), array_columns=("skills",))]
        return await self.page(filters, "created_at", SortOrder.DESC, page, limit)

    # ─── Writes ─────────────────────────────────────────────────

    async def create(self, record: dict[str, Any], image: ImageUpload | None = None) -> Project:
        record = {**record, "skills": record.get("skills") or []}
        await self.ensure_unique(self.key_of(record))

        stored = await self._upload(image)
        if stored is not None:
            record["image_url"] = stored.public_url

        try:
            row = await self.store.insert(Project, record)
        except Exception:
            await self._compensate(stored)
            raise
        logger.info(
            f"Created project {row.id}",
            extra={"resource": "Project", "resource_id": str(row.id)},
        )
        return row

    async def update(
        self, record_id: int, partial: dict[str, Any], image: ImageUpload | None = None,
    ) -> Project:
        existing = await self.get(record_id)
        old_image_url = existing.image_url
        await self.ensure_unique_on_update(existing, partial)

        partial = dict(partial)
        stored = await self._upload(image)
        if stored is not None:
            partial["image_url"] = stored.public_url

        try:
            row = await self.store.update(Project, record_id, partial)
        except Exception:
            await self._compensate(stored)
            raise

        if stored is not None and old_image_url:
            await self.images.remove_by_url(old_image_url)
        return row

    async def delete(self, record_id: int) -> Project:
        removed = await super().delete(record_id)
        if removed.image_url:
            await self.images.remove_by_url(removed.image_url)
        return removed

    async def upload_image(self, image: ImageUpload) -> StoredImage:
        """Store an image without attaching it to a project."""
        return await self.images.store(image.payload, image.mime_type, image.filename)

    # ─── Image helpers ──────────────────────────────────────────

    async def _upload(self, image: ImageUpload | None) -> StoredImage | None:
        if image is None:
            return None
        return await self.images.store(image.payload, image.mime_type, image.filename)

    async def _compensate(self, stored: StoredImage | None) -> None:
        if stored is None:
            return
        logger.warning(
            f"Persist failed, removing uploaded image {stored.generated_name}",
            extra={"image_name": stored.generated_name, "operation": "compensate"},
        )
        await self.images.remove(stored.generated_name)
