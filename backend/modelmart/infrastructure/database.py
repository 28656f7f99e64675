"""Database Session Managers — one async connection pool per store with lifecycle state.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - ensure_connected() is idempotent and safe under concurrent callers:
      tables are created at most once per manager
    - Connection state lives on the manager, never in a process-wide flag

Design Decisions:
    - Managers initialized on startup by init_stores: FastAPI lifespan owns the
      lifecycle (ADR: no global import side effects)
    - create_all on first connect instead of migrations: the schema is two tables
      and migration tooling is out of scope
    - expire_on_commit=False: records are returned detached to the service layer
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from modelmart.core.errors import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async sessions, pooling, rollback and connect-once state for one store."""

    def __init__(
        self,
        database_url: str,
        metadata: MetaData,
        name: str = "records",
        pool_size: int = 20,
        max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        # SQLite pools reject sizing arguments
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.metadata = metadata
        self.name = name
        self._connected = False
        self._connect_lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._connected

    async def ensure_connected(self) -> None:
        """Open the pool and create this store's tables. No-op once connected."""
        if self._connected:
            return
        async with self._connect_lock:
            if self._connected:
                return
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(self.metadata.create_all)
            except SQLAlchemyError as e:
                logger.error(f"{self.name} store connection failed: {e}")
                raise DatabaseError("Connection or operational error", "connect")
            self._connected = True
            logger.info(f"{self.name} store connected")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scoped to one store call; rolled back on any SQLAlchemy error."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _classify(e)
            logger.error(
                f"{self.name} store {operation} failed: {e}",
                extra={"store": self.name},
            )
            raise DatabaseError(message, operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check store connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"{self.name} store health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
        self._connected = False


# Singletons (initialized on startup)
records_db: DatabaseSessionManager | None = None
ledger_db: DatabaseSessionManager | None = None


def init_stores(
    database_url: str, ledger_database_url: str, **kwargs,
) -> None:
    """Create one manager per store. Tables are created lazily on first use."""
    from modelmart.db.base import Base, LedgerBase
    import modelmart.models  # noqa: F401  populate both metadatas

    global records_db, ledger_db
    records_db = DatabaseSessionManager(
        database_url, Base.metadata, name="records", **kwargs,
    )
    ledger_db = DatabaseSessionManager(
        ledger_database_url, LedgerBase.metadata, name="ledger", **kwargs,
    )


async def dispose_stores() -> None:
    for manager in (records_db, ledger_db):
        if manager is not None:
            await manager.dispose()


# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_ERROR_KINDS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _classify(error: SQLAlchemyError) -> tuple[str, str]:
    for kind, message, operation in _ERROR_KINDS:
        if isinstance(error, kind):
            return message, operation
    return "Database operation failed", "unknown"
