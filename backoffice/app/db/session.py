"""
Database engine and session factory.

PostgreSQL (asyncpg) in deployment; a SQLite URL is accepted for local
runs, in which case the pool and isolation options that SQLite does not
understand are left out.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from backoffice.app.core.config import settings


def engine_options(database_url: str) -> Dict[str, Any]:
    """Keyword arguments for `create_async_engine` for the given URL."""
    options: Dict[str, Any] = {"echo": settings.db_echo}
    if database_url.startswith("sqlite"):
        return options

    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        isolation_level=settings.db_isolation_level,
    )
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

# Ledger units commit explicitly; results must stay readable after commit
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()


async def get_db():
    """One session per request. `BalanceEngine.atomic` owns commit and rollback."""
    async with AsyncSessionLocal() as session:
        yield session
