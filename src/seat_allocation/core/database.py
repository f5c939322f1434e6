"""
Database configuration and async session management
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from seat_allocation.core.config import settings

# Create declarative base for models
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False, **engine_kwargs) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    PostgreSQL (asyncpg) gets a sized connection pool; SQLite (aiosqlite) is
    used by the test suite and keeps the driver defaults.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo, future=True, **engine_kwargs)

    return create_async_engine(
        database_url,
        echo=echo,
        future=True,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        **engine_kwargs,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,  # Allocation records are returned after commit
        autoflush=False,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a database session per request/task.

    Usage:
        async for db in get_db():
            await allocation_service.allocate_seat(db, team_id, volunteer_id)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind: AsyncEngine = None):
    """
    Create all tables.
    Only for development and tests - use migrations in production.
    """
    bind = bind or engine
    async with bind.begin() as conn:
        # Import all models to register them with Base
        from seat_allocation.models import (  # noqa: F401
            Block, Room, Seat, SeatAllocation, ParticipantCheckIn
        )

        await conn.run_sync(Base.metadata.create_all)


async def drop_db(bind: AsyncEngine = None):
    """
    Drop all tables.
    WARNING: Use only in development/testing!
    """
    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
