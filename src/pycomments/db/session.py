"""
Async database engine and sessions for PyComments.

One engine per process; request handlers get a session through get_db.
"""

import ssl
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from pycomments.core.config import settings
from pycomments.core.logging import get_logger

logger = get_logger(__name__)

# Query parameters libpq understands but asyncpg rejects
LIBPQ_ONLY_PARAMS = ("sslmode", "channel_binding", "application_name", "options")


def _split_asyncpg_url(database_url: str) -> tuple[str, dict[str, Any]]:
    """Move libpq-only query parameters out of the URL into connect_args."""
    url = make_url(database_url)
    sslmode = url.query.get("sslmode")
    connect_args: dict[str, Any] = {}

    if sslmode == "require":
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = context
    elif sslmode in ("verify-ca", "verify-full"):
        connect_args["ssl"] = ssl.create_default_context()
    elif sslmode == "prefer":
        connect_args["ssl"] = "prefer"

    url = url.difference_update_query(LIBPQ_ONLY_PARAMS)
    return url.render_as_string(hide_password=False), connect_args


def create_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create the async engine.

    Server databases get a pre-pinged connection pool. Tests use NullPool
    so no connection outlives an event loop.
    """
    database_url = database_url or settings.database_url
    engine_kwargs: dict[str, Any] = {
        "echo": settings.debug and settings.environment == "development",
    }

    if "+asyncpg" in database_url:
        database_url, connect_args = _split_asyncpg_url(database_url)
        if connect_args:
            engine_kwargs["connect_args"] = connect_args

    if settings.environment == "test":
        engine_kwargs["poolclass"] = NullPool
    elif not database_url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_pre_ping=True,
        )

    return create_async_engine(database_url, **engine_kwargs)


engine = create_engine()

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session, committing on success and rolling back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Check the database is reachable at startup."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database is unreachable", extra={"environment": settings.environment})
        raise
    logger.info("Database connection established")


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
