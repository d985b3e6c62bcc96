"""SQL Resource Store — SQLAlchemy implementation of the ResourceStore protocol.

Invariants:
    - Filters are AND-ed; TextSearch ORs its own columns
    - list() returns (page rows, exact total) computed from the same WHERE clause
    - Every write is one committed transaction followed by a refresh (derived columns loaded)
    - Unique-constraint violations raise ConflictError; other DB failures raise BackendError
    - Unknown ids raise ResourceNotFoundError

Design Decisions:
    - Array containment uses JSONB @> on Postgres and a quoted-element LIKE elsewhere,
      so the same filter runs against the aiosqlite test database
    - Ties in the sort column are broken by id (stable pages)
"""

import json
import logging
from typing import Any, Sequence

from sqlalchemy import String, and_, cast, func, or_, select, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.errors import BackendError, ConflictError, ResourceNotFoundError
from portfolio_api.core.query_filters import (
    ArrayContains, Equals, Filter, ILike, NotEquals, Sort, TextSearch,
)

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION = "23505"


def _label(model: type) -> str:
    return getattr(model, "resource_label", model.__name__)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION:
        return True
    text = str(orig).lower()
    return "unique" in text or "duplicate key" in text


class SqlResourceStore:
    """ResourceStore over an AsyncSession; one instance per request."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ─── Reads ──────────────────────────────────────────────────

    async def list(
        self,
        model: type,
        filters: Sequence[Filter],
        sort: Sort | None,
        offset: int,
        limit: int,
    ) -> tuple[list[Any], int]:
        conditions = [self._condition(model, f) for f in filters]
        count_stmt = select(func.count()).select_from(model).where(*conditions)
        query = select(model).where(*conditions)
        if sort is not None:
            column = getattr(model, sort.column)
            if sort.descending:
                query = query.order_by(column.desc(), model.id.desc())
            else:
                query = query.order_by(column.asc(), model.id.asc())
        query = query.offset(offset).limit(limit)
        try:
            total = (await self.session.execute(count_stmt)).scalar_one()
            rows = (await self.session.execute(query)).scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                f"List {_label(model)} failed: {e}",
                extra={"resource": _label(model), "operation": "list"},
            )
            raise BackendError(
                f"Failed to fetch {_label(model).lower()}s", str(e), "list",
            )
        return list(rows), total

    async def get_by_id(self, model: type, record_id: int) -> Any:
        try:
            row = await self.session.get(model, record_id)
        except SQLAlchemyError as e:
            raise BackendError(
                f"Failed to fetch {_label(model).lower()}", str(e), "get",
            )
        if row is None:
            raise ResourceNotFoundError(_label(model), record_id)
        return row

    # ─── Writes ─────────────────────────────────────────────────

    async def insert(self, model: type, record: dict[str, Any]) -> Any:
        row = model(**record)
        self.session.add(row)
        await self._commit(model, "create")
        await self.session.refresh(row)
        return row

    async def update(self, model: type, record_id: int, partial: dict[str, Any]) -> Any:
        row = await self.get_by_id(model, record_id)
        for key, value in partial.items():
            setattr(row, key, value)
        await self._commit(model, "update")
        await self.session.refresh(row)
        return row

    async def delete(self, model: type, record_id: int) -> None:
        row = await self.get_by_id(model, record_id)
        await self.session.delete(row)
        await self._commit(model, "delete")

    async def _commit(self, model: type, verb: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if _is_unique_violation(e):
                raise ConflictError(
                    getattr(model, "conflict_message", f"{_label(model)} already exists"),
                )
            raise BackendError(
                f"Failed to {verb} {_label(model).lower()}", str(e.orig), verb,
            )
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"{verb} {_label(model)} failed: {e}",
                extra={"resource": _label(model), "operation": verb},
            )
            raise BackendError(
                f"Failed to {verb} {_label(model).lower()}", str(e), verb,
            )

    # ─── Filter translation ─────────────────────────────────────

    def _condition(self, model: type, flt: Filter):
        if isinstance(flt, Equals):
            column = getattr(model, flt.column)
            return column.is_(None) if flt.value is None else column == flt.value
        if isinstance(flt, NotEquals):
            return getattr(model, flt.column) != flt.value
        if isinstance(flt, ILike):
            return self._ilike(getattr(model, flt.column), flt.term)
        if isinstance(flt, ArrayContains):
            return self._array_contains(getattr(model, flt.column), flt.values)
        if isinstance(flt, TextSearch):
            clauses = [self._ilike(getattr(model, c), flt.term) for c in flt.columns]
            clauses += [
                self._array_contains(getattr(model, c), (flt.term,))
                for c in flt.array_columns
            ]
            return or_(*clauses)
        raise TypeError(f"Unsupported filter: {flt!r}")

    @staticmethod
    def _ilike(column, term: str):
        return column.ilike(f"%{_escape_like(term)}%", escape="\\")

    def _array_contains(self, column, values: Sequence[str]):
        if self.session.get_bind().dialect.name == "postgresql":
            return type_coerce(column, JSONB).contains(list(values))
        return and_(*[
            cast(column, String).like(
                f"%{_escape_like(json.dumps(value))}%", escape="\\",
            )
            for value in values
        ])
