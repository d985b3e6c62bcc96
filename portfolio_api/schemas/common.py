"""Common Schemas — shared field types, paging query, and the raw-input validation entry point.

Invariants:
    - parse_input() reports every violated field at once, never just the first
    - Field errors are keyed by field path ("skills.2", "end_date") with a readable message
    - Optional text/URL fields normalize "" to None; URLs keep the caller's exact string

Design Decisions:
    - Annotated aliases (RequiredName, Details, OptionalUrl) over per-model validators:
      create and update schemas share one definition per constraint
    - Update schemas type required fields as non-Optional with a None default: omitted
      fields stay unset (partial update) while an explicit null still fails validation
"""

from typing import Annotated, Any, Mapping, TypeVar

from fastapi import Path
from pydantic import (
    AfterValidator, AnyHttpUrl, BaseModel, BeforeValidator, ConfigDict, Field,
    StringConstraints, TypeAdapter, ValidationError,
)
from pydantic_core import PydanticCustomError

from portfolio_api.core.domain_types import SortOrder
from portfolio_api.core.errors import FieldValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)
_LOCATION_PREFIXES = {"body", "query", "path", "form", "header"}


# ─── Field Types ───────────────────────────────────────────────

def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "Input should be a valid http(s) URL")
    return value


RequiredName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
]
Details = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10)]
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]
UrlText = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_check_url)]

# Constraints sit on the inner str: None (sent, or produced from "") skips them
OptionalShortText = Annotated[ShortText | None, BeforeValidator(blank_to_none)]
OptionalUrl = Annotated[UrlText | None, BeforeValidator(blank_to_none)]

IdParam = Annotated[int, Path(ge=1, description="Positive integer record id")]


class PageQuery(BaseModel):
    """page/limit/sortOrder shared by every list endpoint; sortBy is per resource."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    sort_order: SortOrder = Field(SortOrder.DESC, alias="sortOrder")


class SearchQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    q: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=50)


# ─── Error Translation ─────────────────────────────────────────

def _field_label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def _humanize(field: str, error: dict) -> str:
    label = _field_label(field.split(".")[0]) if field else "Request"
    ctx = error.get("ctx") or {}
    kind = error.get("type")
    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{label} must not be empty"
        return f"{label} must be at least {ctx.get('min_length')} characters long"
    if kind == "string_too_long":
        return f"{label} must not exceed {ctx.get('max_length')} characters"
    if kind in ("url_parsing", "url_scheme"):
        return f"{label} must be a valid URL"
    if kind == "value_error":
        return str(ctx.get("error", error["msg"]))
    return error["msg"]


def field_errors(errors: list[dict]) -> dict[str, str]:
    """Map pydantic/FastAPI error dicts to {field path: message}. First message per field wins."""
    result: dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(loc)
        result.setdefault(field or "body", _humanize(field, error))
    return result


def parse_input(model: type[ModelT], raw: Mapping[str, Any]) -> ModelT:
    """Validate a raw field mapping into `model` or raise FieldValidationError."""
    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        raise FieldValidationError(field_errors(e.errors()))
