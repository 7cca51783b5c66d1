"""
Database session management for the local SQLite store.

Provides engine creation, session factory, and table initialisation.
"""

from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from ..core.config import config
from ..core.logging import get_logger

logger = get_logger(__name__)

# Async session factory - global state
async_engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the global session factory.

    Returns the cached AsyncSessionLocal if available, otherwise raises RuntimeError.
    Use init_db() to initialize the session factory first.
    """
    if AsyncSessionLocal is None:
        raise RuntimeError("Database session factory not initialized. Call init_db() first.")

    return AsyncSessionLocal


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def _register_functions(dbapi_connection, connection_record) -> None:
    # SQLite lower() and LIKE only fold ASCII letters
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def create_local_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """Create an async engine for the local store."""
    database_url = database_url or config.LOCAL_DATABASE_URL
    if database_url.startswith("sqlite:///"):
        database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

    kwargs = {"echo": config.DATABASE_ECHO if echo is None else echo}
    if ":memory:" in database_url:
        # One shared connection, otherwise every session sees an empty database
        kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})

    engine = create_async_engine(database_url, **kwargs)
    event.listen(engine.sync_engine, "connect", _register_functions)
    logger.info(f"Created async engine: {database_url}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables defined in the models."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")


async def init_db(database_url: Optional[str] = None) -> None:
    """Initialize database engine, session factory and tables."""
    global async_engine, AsyncSessionLocal

    try:
        # Only create engine if not already initialized
        if async_engine is None:
            async_engine = create_local_engine(database_url)
            AsyncSessionLocal = create_session_factory(async_engine)
            await create_tables(async_engine)
            logger.info("Database engine and session factory initialized")
        else:
            logger.info("Database already initialized, skipping")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        async_engine = None
        AsyncSessionLocal = None
        raise


async def close_db() -> None:
    """Close database engine."""
    global async_engine, AsyncSessionLocal

    if async_engine:
        try:
            await async_engine.dispose()
        except Exception as e:
            logger.warning(f"Error disposing database engine: {e}")
        finally:
            async_engine = None
            AsyncSessionLocal = None
            logger.info("Database engine closed")
