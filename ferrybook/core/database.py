"""
Database configuration and session management
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
import logging
from contextlib import asynccontextmanager

from ferrybook.config import settings

logger = logging.getLogger(__name__)


def create_engine_from_settings(database_url: str = None) -> AsyncEngine:
    """
    Build the async engine, pooled for servers and unpooled for SQLite/testing
    """
    url = database_url or settings.DATABASE_URL
    if settings.is_testing or url.startswith("sqlite"):
        # NullPool doesn't accept pool parameters
        return create_async_engine(
            url,
            echo=settings.DB_ECHO,
            poolclass=NullPool,
        )
    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


# Create async engine
engine: AsyncEngine = create_engine_from_settings()

# Create async session factory
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Create declarative base
Base = declarative_base()


async def init_db():
    """
    Initialize database connections and create missing tables
    """
    # Import models so every table is registered on Base.metadata
    import ferrybook.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db():
    """
    Close database connections
    """
    await engine.dispose()
    logger.info("Database connections closed")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session
    Services own their commit/rollback boundaries
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


class DatabaseManager:
    """
    Transaction helpers shared by the service layer
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def transaction(self, session: AsyncSession):
        """
        Commit on clean exit, roll back on any exception.

        Works with sessions that have already autobegun, which is the
        normal state of a request session once the caller was loaded.
        """
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            self.logger.debug(f"Transaction rolled back: {type(e).__name__}: {e}")
            raise


# Create global database manager
db_manager = DatabaseManager()
