"""Certification Service — certification CRUD and per-issuer listing.

Invariants:
    - (title, issuer) is the natural key; duplicates raise ConflictError before any write
    - issuer filters are case-insensitive substring matches
"""

from __future__ import annotations

from portfolio_api.core.domain_types import SortOrder
from portfolio_api.core.pagination import Pagination
from portfolio_api.core.query_filters import Filter, ILike
from portfolio_api.models.certification import Certification
from portfolio_api.services.resource_service import ResourceService


class CertificationService(ResourceService):
    model = Certification
    natural_key = ("title", "issuer")

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "issued_date",
        sort_order: SortOrder = SortOrder.DESC,
        issuer: str | None = None,
    ) -> tuple[list[Certification], Pagination]:
        filters: list[Filter] = []
        if issuer:
            filters.append(ILike("issuer", issuer))
        return await self.page(filters, sort_by, sort_order, page, limit)

    async def by_issuer(
        self,
        issuer: str,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "issued_date",
        sort_order: SortOrder = SortOrder.DESC,
    ) -> tuple[list[Certification], Pagination]:
        return await self.page([ILike("issuer", issuer)], sort_by, sort_order, page, limit)
