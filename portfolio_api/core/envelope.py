"""Response Envelope — builds the uniform JSON body returned by every endpoint.

Invariants:
    - Every body has success (bool), message (str) and timestamp (ISO-8601, UTC)
    - `data` is omitted when None (success) and `errors` when empty (error)
    - Paginated and search bodies always carry a full pagination block

Design Decisions:
    - Plain dict builders over a pydantic response model: routes return them as-is
      and error handlers reuse the same shape
"""

from datetime import datetime, timezone
from typing import Any

from portfolio_api.core.pagination import Pagination


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def success(data: Any = None, message: str = "Success") -> dict:
    body: dict[str, Any] = {"success": True, "message": message, "timestamp": _now()}
    if data is not None:
        body["data"] = data
    return body


def error(message: str = "Error", errors: dict[str, str] | str | None = None) -> dict:
    body: dict[str, Any] = {"success": False, "message": message, "timestamp": _now()}
    if errors:
        body["errors"] = errors
    return body


def paginated(data: list, pagination: Pagination, message: str = "Success") -> dict:
    return {
        "success": True,
        "message": message,
        "timestamp": _now(),
        "data": data,
        "pagination": pagination.to_dict(),
    }


def search_results(
    results: list,
    query: str,
    pagination: Pagination,
    filters: dict | None = None,
    message: str = "Search completed successfully",
) -> dict:
    """Search body; `totalResults` counts the rows in this page, `pagination.total` all matches."""
    return {
        "success": True,
        "message": message,
        "timestamp": _now(),
        "data": results,
        "search": {
            "query": query,
            "filters": filters or {},
            "totalResults": len(results),
        },
        "pagination": pagination.to_dict(),
    }


def deleted(message: str = "Resource deleted successfully") -> dict:
    return success(None, message)
