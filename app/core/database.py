"""Async database engine, session factory and per-company locking."""

import asyncio
import weakref
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core.config import get_settings

settings = get_settings()


def _engine_options(url) -> dict:
    # SQLite uses a static/null pool that rejects sizing arguments
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {"pool_size": settings.db_pool_size, "max_overflow": settings.db_max_overflow}


engine = create_async_engine(
    settings.sqlalchemy_url,
    echo=False,
    **_engine_options(settings.sqlalchemy_url),
)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create all tables. No migration tooling is shipped."""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


# ── Per-company serialisation ─────────────────────────────────

_local_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


@asynccontextmanager
async def company_lock(session: AsyncSession, company_id: str) -> AsyncIterator[None]:
    """Serialise writes that depend on a company's current user count.

    On PostgreSQL this takes a transaction-scoped advisory lock, released on
    commit or rollback, so it holds across worker processes. Other backends
    fall back to an in-process lock keyed by company id.
    """
    if session.get_bind().dialect.name == "postgresql":
        await session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:key))"),
            {"key": company_id},
        )
        yield
        return

    lock = _local_locks.get(company_id)
    if lock is None:
        lock = asyncio.Lock()
        _local_locks[company_id] = lock
    async with lock:
        yield
