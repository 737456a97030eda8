"""
Database Configuration

Async SQLAlchemy engine, session factory and the FastAPI session dependency.
"""

import logging
from collections.abc import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from schoolauth.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


engine: AsyncEngine | None = None
async_session_maker: async_sessionmaker[AsyncSession] | None = None


async def init_db(settings: Settings) -> None:
    """
    Create the engine and session factory, then check connectivity.

    Call this on application startup. The schema itself is managed by Alembic.
    """
    global engine, async_session_maker

    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )
    async_session_maker = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Yield a database session for the duration of a request.

    Usage in FastAPI:
        @router.post("/signup")
        async def signup(db: AsyncSession = Depends(get_db)):
            ...
    """
    if async_session_maker is None:
        raise RuntimeError("Database is not initialized. Call init_db() on startup.")

    async with async_session_maker() as session:
        yield session


async def close_db() -> None:
    """Dispose of the engine and its connection pool."""
    global engine, async_session_maker

    if engine is not None:
        await engine.dispose()
        engine = None
        async_session_maker = None
        logger.info("Database engine disposed")
