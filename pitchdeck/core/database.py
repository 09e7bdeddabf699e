from collections.abc import AsyncGenerator
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from pitchdeck.core.config import settings

logger = structlog.get_logger()


def engine_options(url: str) -> dict[str, Any]:
    """Pool and timeout options for the configured backend.

    PostgreSQL (asyncpg) gets a bounded pool with server-side statement
    timeouts; other backends (SQLite for local runs) use driver defaults.
    """
    if make_url(url).get_backend_name() != "postgresql":
        return {"echo": settings.APP_DEBUG}
    return {
        "echo": settings.APP_DEBUG,
        "pool_size": 10,
        "max_overflow": 10,
        "pool_pre_ping": True,            # Drop stale connections before use
        "pool_recycle": 1800,             # Recycle connections every 30 min
        "pool_timeout": 30,
        "connect_args": {
            "server_settings": {
                "statement_timeout": "30000",                    # 30s max per SQL statement
                "idle_in_transaction_session_timeout": "60000",
            },
            "command_timeout": 30,
        },
    }


engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Request-scoped session. Commits when the handler returns, rolls back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database() -> dict[str, str]:
    """Health probe: run a trivial query on a fresh connection."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        logger.warning("database_health_check_failed", error=str(exc))
        return {"status": "unhealthy", "error": str(exc)}
    return {"status": "healthy"}


async def dispose_engine() -> None:
    await engine.dispose()
    logger.info("database_engine_disposed")
