"""Database handle and session management."""

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

from connexa.config.settings import Settings

# Import models so they are attached to Base.metadata before table creation
from connexa.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and session factory for the lifetime of the app.

    Created at startup and disposed at shutdown; request handlers reach it
    through ``app.state.database`` rather than a module-level pool.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pooled: bool = True,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_timeout: float = 2.0,
    ) -> None:
        engine_options: dict[str, Any] = {
            "echo": echo,
            "future": True,
            "pool_pre_ping": True,
        }
        if pooled:
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
            )
        else:
            engine_options["poolclass"] = NullPool

        self.engine: AsyncEngine = create_async_engine(url, **engine_options)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        # Disable pooling when working with serverless databases (or in debug).
        config = settings.database
        return cls(
            config.url,
            echo=settings.debug,
            pooled=not (config.serverless or settings.debug),
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout_seconds,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Async context manager that yields a SQLAlchemy session."""

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
    """FastAPI dependency yielding a session from the application's database."""

    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


__all__ = ["Database", "get_session"]
