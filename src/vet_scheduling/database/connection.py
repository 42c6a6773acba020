"""
Database connection utilities for the vet-scheduling package.

This module provides async SQLAlchemy engine configuration for PostgreSQL
(asyncpg) in deployment and SQLite (aiosqlite) in local runs and tests.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, StaticPool

from ..utils.config import ConfigError, DatabaseURLValidator, SchedulingSettings

logger = logging.getLogger(__name__)


def create_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    echo: bool = False,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine with proper configuration.

    SQLite URLs ignore the pool sizing arguments: in-memory databases share a
    single connection through StaticPool, file databases use NullPool.

    Args:
        database_url: Database connection URL
        pool_size: Number of connections to maintain in the pool
        max_overflow: Maximum number of connections that can overflow the pool
        pool_timeout: Timeout for getting connection from pool
        pool_recycle: Time in seconds to recycle connections
        pool_pre_ping: Whether to validate connections before use
        echo: Whether to echo SQL statements
        use_null_pool: Whether to use NullPool (useful for testing)
        connect_args: Additional connection arguments

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ValueError: If database URL is invalid
    """
    async_url = DatabaseURLValidator.to_async_url(database_url)
    try:
        parsed = DatabaseURLValidator.validate_url(async_url)
    except ConfigError as e:
        raise ValueError(f"Invalid database URL: {e}")

    engine_kwargs: Dict[str, Any] = {"echo": echo}

    if parsed["is_sqlite"]:
        engine_kwargs["connect_args"] = {"check_same_thread": False, **(connect_args or {})}
        if ":memory:" in async_url or parsed["database"] == "":
            engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs["poolclass"] = NullPool
    else:
        if connect_args:
            engine_kwargs["connect_args"] = connect_args

        if use_null_pool:
            engine_kwargs["poolclass"] = NullPool
        else:
            engine_kwargs.update(
                {
                    "poolclass": AsyncAdaptedQueuePool,
                    "pool_size": pool_size,
                    "max_overflow": max_overflow,
                    "pool_timeout": pool_timeout,
                    "pool_recycle": pool_recycle,
                    "pool_pre_ping": pool_pre_ping,
                }
            )

    engine = create_async_engine(async_url, **engine_kwargs)
    logger.info(
        f"Created async database engine for {parsed['scheme']} "
        f"({parsed['hostname'] or parsed['database'] or 'memory'})"
    )
    return engine


def create_engine_from_settings(settings: SchedulingSettings) -> AsyncEngine:
    """Create the application engine from scheduling settings."""
    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        echo=settings.db_echo,
    )


async def check_connection(engine: AsyncEngine) -> bool:
    """
    Check that the database answers a trivial query.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False


async def close_engine(engine: AsyncEngine) -> None:
    """
    Properly close the database engine and all connections.

    Args:
        engine: SQLAlchemy async engine to close
    """
    await engine.dispose()
    logger.info("Database engine closed successfully")
