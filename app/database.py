"""Database configuration and session management for the MVC layout."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.config.settings import Settings

# Import models so they are attached to Base.metadata before table creation
from app.models import Base
from app.models import school  # noqa: F401

logger = logging.getLogger(__name__)


def _create_engine(settings: Settings) -> AsyncEngine:
    """Create an async engine with environment-appropriate pooling."""

    url = settings.database.url
    engine_options: dict[str, Any] = {
        "echo": settings.debug,
        "future": True,
    }

    if url.startswith("sqlite"):
        engine_options["connect_args"] = {"check_same_thread": False}
    else:
        engine_options["pool_pre_ping"] = True

    if settings.database.serverless or settings.debug:
        # Disable pooling when working with serverless databases (or in debug).
        engine_options["poolclass"] = NullPool

    return create_async_engine(url, **engine_options)


class Database:
    """Engine and session factory built once at application startup."""

    def __init__(self, settings: Settings) -> None:
        self.engine: AsyncEngine = _create_engine(settings)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """Async context manager that yields a configured SQLAlchemy session."""

        async with self.session_factory() as session:
            yield session

    async def init_models(self) -> None:
        """Create database tables if they do not exist."""

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Ensured database tables in default schema.")

    async def dispose(self) -> None:
        """Dispose of the engine and release pooled connections."""

        await self.engine.dispose()


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session from the app's database."""

    database: Database = request.app.state.database
    async with database.session_scope() as session:
        yield session


__all__ = ["Database", "get_session"]
