"""Database Sessions — async engine, per-request sessions and the readiness probe.

Invariants:
    - A session that sees an exception is rolled back before it is closed
    - SQLAlchemy errors escaping a request surface as BackendError (core/errors.py),
      carrying the driver message for diagnostics
    - SQLite URLs (tests, local runs) get no pool sizing; Postgres gets a pre-pinged,
      recycled pool sized from settings

Design Decisions:
    - One module-level db_manager, created by the app lifespan and disposed on shutdown
    - expire_on_commit=False: rows stay readable after commit for response serialization
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from portfolio_api.config import Settings
from portfolio_api.core.errors import BackendError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError/OperationalError are DBAPIError subclasses.
_ERROR_TABLE: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Database connection failed", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def translate_db_error(exc: SQLAlchemyError) -> BackendError:
    """Map a SQLAlchemy exception onto the domain BackendError."""
    for exc_type, message, operation in _ERROR_TABLE:
        if isinstance(exc, exc_type):
            detail = getattr(exc, "orig", None) or exc
            return BackendError(message, str(detail), operation)
    return BackendError("Database operation failed", str(exc), "unknown")


class DatabaseSessionManager:
    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **options)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseSessionManager":
        return cls(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = translate_db_error(e)
            logger.error(
                f"{error.message}: {e}",
                extra={"error_code": error.code, "operation": error.context.operation},
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a trivial query round-trips (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(settings: Settings) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager.from_settings(settings)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
