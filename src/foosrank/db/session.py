# src/foosrank/db/session.py

"""Database engine and session management.

The engine is created by the application lifespan and stored on
``app.state``; nothing here holds a connection at import time.
"""
import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from foosrank import config

logger = logging.getLogger(__name__)


def create_engine(url: str | None = None) -> AsyncEngine:
    """Create the async engine with appropriate configuration.

    SQLite doesn't support connection pooling, so we only configure
    pool settings for other databases like PostgreSQL.
    """
    url = url or config.DATABASE_URL

    # SQLite doesn't support connection pooling
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=config.DB_ECHO)

    # PostgreSQL and other databases get full pool configuration
    return create_async_engine(
        url,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=config.DB_POOL_RECYCLE,
        echo=config.DB_ECHO,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a configured session factory bound to the engine.

    autoflush=False: Changes are not flushed until explicitly requested.
    expire_on_commit=False: Objects remain accessible after commit.
    """
    return async_sessionmaker(
        bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session.

    Automatically handles rollback on exceptions and ensures
    the session is properly closed.
    """
    session_factory: async_sessionmaker[AsyncSession] = (
        request.app.state.session_factory
    )
    async with session_factory() as session:
        try:
            yield session
        except Exception as e:
            logger.error("Database session error, rolling back: %s", e)
            await session.rollback()
            raise
