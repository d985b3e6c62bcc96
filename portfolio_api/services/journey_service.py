"""Journey Service — timeline CRUD, per-type and current-item listing.

Invariants:
    - (title, company_name) is the natural key
    - After an update, end_date (if any) is strictly after start_date, where either side
      may come from the stored record when it is not part of the update
    - "current" means end_date is null
"""

from __future__ import annotations

from typing import Any

from portfolio_api.core.domain_types import JourneyType, SortOrder
from portfolio_api.core.errors import FieldValidationError
from portfolio_api.core.pagination import Pagination
from portfolio_api.core.query_filters import Equals, Filter
from portfolio_api.models.journey_item import JourneyItem
from portfolio_api.schemas.journey import check_date_order
from portfolio_api.services.resource_service import ResourceService


class JourneyService(ResourceService):
    model = JourneyItem
    natural_key = ("title", "company_name")

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "start_date",
        sort_order: SortOrder = SortOrder.DESC,
        journey_type: JourneyType | None = None,
        current: bool | None = None,
    ) -> tuple[list[JourneyItem], Pagination]:
        filters: list[Filter] = []
        if journey_type is not None:
            filters.append(Equals("journey_type", JourneyType(journey_type).value))
        if current is not None:
            filters.append(Equals("is_current", current))
        return await self.page(filters, sort_by, sort_order, page, limit)

    async def by_type(
        self,
        journey_type: JourneyType,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "start_date",
        sort_order: SortOrder = SortOrder.DESC,
    ) -> tuple[list[JourneyItem], Pagination]:
        return await self.list(page, limit, sort_by, sort_order, journey_type=journey_type)

    async def current(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "start_date",
        sort_order: SortOrder = SortOrder.DESC,
    ) -> tuple[list[JourneyItem], Pagination]:
        return await self.list(page, limit, sort_by, sort_order, current=True)

    async def update(self, record_id: int, partial: dict[str, Any]) -> JourneyItem:
        existing = await self.get(record_id)
        if "start_date" in partial or "end_date" in partial:
            try:
                check_date_order(
                    partial.get("start_date", existing.start_date),
                    partial.get("end_date", existing.end_date),
                )
            except ValueError as e:
                raise FieldValidationError({"end_date": str(e)})
        await self.ensure_unique_on_update(existing, partial)
        return await self.store.update(JourneyItem, record_id, partial)
