"""Boundary Protocols — contracts between the services and the external stores.

Invariants:
    - Services depend on these Protocols only; implementations live in infrastructure/
    - Implementations are injected per request (FastAPI dependencies), never imported globally
    - ResourceStore.get_by_id / update / delete raise ResourceNotFoundError for unknown ids

Design Decisions:
    - Protocol over ABC: structural subtyping lets tests pass plain fakes
    - `model` argument is the ORM class: one store instance serves all three resources
"""

from typing import Any, Protocol, Sequence

from portfolio_api.core.query_filters import Filter, Sort


class ResourceStore(Protocol):
    """Contract for relational persistence — implemented by infrastructure/resource_store.py."""
    async def list(
        self,
        model: type,
        filters: Sequence[Filter],
        sort: Sort | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Any], int]: ...
    async def get_by_id(self, model: type, record_id: int) -> Any: ...
    async def insert(self, model: type, record: dict[str, Any]) -> Any: ...
    async def update(self, model: type, record_id: int, partial: dict[str, Any]) -> Any: ...
    async def delete(self, model: type, record_id: int) -> None: ...


class BlobStore(Protocol):
    """Contract for object storage — implemented by infrastructure/blob_storage.py."""
    async def put(self, name: str, payload: bytes, content_type: str) -> None: ...
    async def delete(self, name: str) -> None: ...
    async def list_names(self) -> list[str]: ...
    def public_url(self, name: str) -> str: ...
