"""Resource Service — shared CRUD orchestration for projects, certifications and journey items.

Invariants:
    - Duplicate check runs before any write; a hit raises ConflictError with no side effects
    - Updates fetch the record first: unknown ids are 404 before any other step
    - On update the natural key is resolved from supplied values falling back to stored
      ones, and checked only when it actually changes
    - list/page helpers return (rows, Pagination) with pages = ceil(total / limit)

Design Decisions:
    - Store and blob dependencies are constructor arguments (injected per request),
      never module globals: services run against fakes in tests
    - The store's unique constraint backs the read-before-write check, so a race
      between two creates still ends in ConflictError instead of a duplicate row
"""

import logging
from typing import Any, ClassVar, Sequence

from portfolio_api.core.domain_types import SortOrder
from portfolio_api.core.errors import ConflictError
from portfolio_api.core.pagination import Pagination, compute_pagination, page_offset
from portfolio_api.core.query_filters import Filter, Sort, natural_key_filters
from portfolio_api.core.repository_protocols import ResourceStore

logger = logging.getLogger(__name__)


class ResourceService:
    """Base service; subclasses set `model` and `natural_key`."""

    model: ClassVar[type]
    natural_key: ClassVar[tuple[str, ...]]

    def __init__(self, store: ResourceStore):
        self.store = store

    # ─── Reads ──────────────────────────────────────────────────

    async def page(
        self,
        filters: Sequence[Filter],
        sort_by: str,
        sort_order: SortOrder,
        page: int,
        limit: int,
    ) -> tuple[list[Any], Pagination]:
        sort = Sort(sort_by, descending=sort_order == SortOrder.DESC)
        rows, total = await self.store.list(
            self.model, filters, sort, page_offset(page, limit), limit,
        )
        return rows, compute_pagination(page, limit, total)

    async def get(self, record_id: int) -> Any:
        return await self.store.get_by_id(self.model, record_id)

    # ─── Writes ─────────────────────────────────────────────────

    async def create(self, record: dict[str, Any]) -> Any:
        await self.ensure_unique(self.key_of(record))
        row = await self.store.insert(self.model, record)
        logger.info(
            f"Created {self.model.resource_label} {row.id}",
            extra={"resource": self.model.resource_label, "resource_id": str(row.id)},
        )
        return row

    async def update(self, record_id: int, partial: dict[str, Any]) -> Any:
        existing = await self.get(record_id)
        await self.ensure_unique_on_update(existing, partial)
        return await self.store.update(self.model, record_id, partial)

    async def delete(self, record_id: int) -> Any:
        """Delete and return the removed row (subclasses clean up what it referenced)."""
        existing = await self.get(record_id)
        await self.store.delete(self.model, record_id)
        logger.info(
            f"Deleted {self.model.resource_label} {record_id}",
            extra={"resource": self.model.resource_label, "resource_id": str(record_id)},
        )
        return existing

    # ─── Natural key ────────────────────────────────────────────

    def key_of(self, record: dict[str, Any]) -> dict[str, Any]:
        return {column: record[column] for column in self.natural_key}

    def resolved_key(self, existing: Any, partial: dict[str, Any]) -> dict[str, Any]:
        return {
            column: partial.get(column, getattr(existing, column))
            for column in self.natural_key
        }

    async def ensure_unique(self, key: dict[str, Any], exclude_id: int | None = None) -> None:
        _, total = await self.store.list(
            self.model, natural_key_filters(key, exclude_id), None, 0, 1,
        )
        if total > 0:
            logger.info(
                f"Duplicate {self.model.resource_label}: {key}",
                extra={"resource": self.model.resource_label, "operation": "conflict_check"},
            )
            raise ConflictError(self.model.conflict_message)

    async def ensure_unique_on_update(self, existing: Any, partial: dict[str, Any]) -> None:
        key = self.resolved_key(existing, partial)
        current = {column: getattr(existing, column) for column in self.natural_key}
        if key != current:
            await self.ensure_unique(key, exclude_id=existing.id)
