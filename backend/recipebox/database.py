"""
RecipeBox Backend: Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, schema creation and the
       FastAPI session dependency.
How:   A `Database` object owns one engine and one session factory. The app
       factory creates it and stores it on `app.state.database`; the
       `get_db_session` dependency reads it from there, so every app
       instance (and every test) gets its own isolated store.
Who:   Route handlers (via Depends), main.py lifespan, seed.py, Alembic.

SQLite specifics:
    Foreign keys are disabled in SQLite unless `PRAGMA foreign_keys=ON` is
    issued on each connection. The cascade from users to recipes and the
    restrict from categories to recipes depend on it, so a connect listener
    turns it on for every new DBAPI connection.
"""

import logging
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import DateTime, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    used by `Database.create_schema()` and by Alembic autogenerate.
    """
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp stored as UTC.

    SQLite keeps DATETIME values as text without an offset, so rows read back
    are naive. Values are normalized to UTC on the way in and tagged as UTC
    on the way out, which keeps a freshly created row and a re-read row
    identical on every backend.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    @staticmethod
    def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        # naive values are already UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return self._as_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        return self._as_utc(value)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the engine and session factory for one application instance.

    Attributes:
        url:              The database URL this instance was built with
        engine:           AsyncEngine (connection pool)
        session_factory:  async_sessionmaker producing AsyncSession objects
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo)

        if make_url(url).get_backend_name() == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """
        Create all tables that do not exist yet.

        Importing the models package registers every table on Base.metadata.
        """
        import recipebox.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready (%s)", make_url(self.url).render_as_string(hide_password=True))

    async def ping(self) -> bool:
        """Run SELECT 1; used by the health check."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's session factory
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises for the global handlers

    Example usage in a route:
        @router.get("/recipes")
        async def list_recipes(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
