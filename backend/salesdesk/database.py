"""
SalesDesk Backend — Database Session Management
================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` owns one async engine (and therefore one connection pool)
       plus a session factory. create_app() builds it from Settings and
       stores it on `app.state`; `get_db_session` hands each request its own
       session that commits on success and rolls back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.

Connection Pooling Strategy (PostgreSQL):
    pool_size / max_overflow:  bounded pool shared by all requests
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour

SQLite (tests):
    Pool sizing does not apply. In-memory URLs use a StaticPool so every
    session sees the same database. Foreign keys are switched on for each
    connection, and transaction control is taken away from the sqlite3
    driver so SAVEPOINTs (bulk delete) behave like they do on PostgreSQL.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from salesdesk.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata; Alembic and the test suite's
    create_all() both read from it.
    """
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith(":"))


def _install_sqlite_hooks(engine: AsyncEngine) -> None:
    """
    Make SQLite enforce foreign keys and let SQLAlchemy emit BEGIN itself.

    Without the PRAGMA, SQLite silently accepts sales that reference missing
    companies. Without taking over BEGIN, the sqlite3 driver's implicit
    transactions break ROLLBACK TO SAVEPOINT.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """
    One engine, one pool, one session factory.

    Constructed explicitly (never at import time) so the app and each test
    can own an isolated instance.
    """

    def __init__(self, url: str, engine: AsyncEngine):
        self.url = url
        self.engine = engine
        # expire_on_commit=False: rows stay readable after the per-request commit
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.database_url
        echo = settings.log_level == "DEBUG"

        if url.startswith("sqlite"):
            options = {"echo": echo}
            if _is_memory_sqlite(url):
                options["poolclass"] = StaticPool
            engine = create_async_engine(url, **options)
            _install_sqlite_hooks(engine)
        else:
            engine = create_async_engine(
                url,
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
                echo=echo,
            )
        return cls(url, engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Scoped session: commit on success, rollback on any error, always close.

        The connection goes back to the pool when the block exits, even if
        commit or rollback themselves fail.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by /health."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def create_all(self) -> None:
        """Create every table from the ORM metadata (tests and local SQLite only)."""
        # Import for side effect: registers all models on Base.metadata
        from salesdesk import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close every pooled connection. Called on application shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    What:    Borrows the app's Database from `request.app.state` and yields a
             scoped session from it.
    Why:     Each request gets isolated state and a guaranteed release of
             its pooled connection; exceptions raised by the route roll the
             transaction back before the error handler answers.
    Scope:   Declare it with scope="function" so the commit happens when the
             route returns, before the response is sent. With the default
             request scope the client could see "created" for a write that
             has not committed yet.

    Example usage in a route:
        @router.get("/company")
        async def list_companies(
            db: AsyncSession = Depends(get_db_session, scope="function"),
        ):
            ...
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not configured on the application")
    async with database.session() as session:
        yield session
