"""
Async database session management using SQLAlchemy 2.0.

The engine and session factory live on an explicit ``Database`` handle that
the application lifespan creates and stores on ``app.state``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from uom_service.core.config import Settings
from uom_service.core.errors import ConflictError


class Database:
    """Owns the connection pool and hands out sessions."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls.from_url(
            str(settings.database_url),
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
            pool_pre_ping=True,  # Verify connections before use
            echo=settings.debug,
        )

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> "Database":
        return cls(create_async_engine(url, **engine_kwargs))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Standalone session for scripts and background work.

        Commits when the block exits cleanly, rolls back otherwise.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Release every pooled connection."""
        await self.engine.dispose()


async def flush_or_conflict(session: AsyncSession, message: str) -> None:
    """
    Flush pending changes, translating constraint violations into ConflictError.

    Unique indexes back the service-level pre-checks; a concurrent writer that
    slips past a pre-check surfaces here as an IntegrityError.
    """
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError(message) from exc


def get_database(request: Request) -> Database:
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized. The application lifespan has not run.")
    return database


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Yields a session for the duration of the request and ensures
    proper cleanup regardless of success or failure.
    """
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Type alias for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
