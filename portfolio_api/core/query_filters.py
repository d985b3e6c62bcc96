"""Query Filters — declarative filter and sort specs passed to the resource store.

Invariants:
    - Filters name columns by attribute name; the store resolves them against the model
    - A list of filters is conjunctive: each one narrows the result set
    - TextSearch is the only disjunctive filter (OR across its own columns)
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Equals:
    column: str
    value: Any


@dataclass(frozen=True)
class NotEquals:
    column: str
    value: Any


@dataclass(frozen=True)
class ILike:
    """Case-insensitive substring match on a single column."""
    column: str
    term: str


@dataclass(frozen=True)
class ArrayContains:
    """Row's array column contains every value in `values`."""
    column: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class TextSearch:
    """Case-insensitive substring match OR-ed across `columns`.

    `array_columns` additionally match rows whose array column contains the
    term as an exact element.
    """
    term: str
    columns: tuple[str, ...]
    array_columns: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Sort:
    column: str
    descending: bool = True


Filter = Equals | NotEquals | ILike | ArrayContains | TextSearch


def natural_key_filters(key: dict[str, Any], exclude_id: int | None = None) -> list[Filter]:
    """Exact-match filters for a natural key, optionally excluding one record id."""
    filters: list[Filter] = [Equals(column, value) for column, value in key.items()]
    if exclude_id is not None:
        filters.append(NotEquals("id", exclude_id))
    return filters
