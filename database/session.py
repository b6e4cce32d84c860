"""
Async SQLAlchemy engine and session factory.

PostgreSQL (asyncpg) in production; ``sqlite+aiosqlite`` URLs are accepted
for tests and local runs.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from database.models import Base


def build_engine(database_url: str) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across sessions
        return create_async_engine(
            database_url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
