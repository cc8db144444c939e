from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
from fastapi import Request
import logging
from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from backoffice.core.config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Created when the application starts and disposed when it shuts down; request
    handlers reach it through ``get_db`` instead of a module-level engine.
    """

    def __init__(self, url: str, engine: AsyncEngine):
        self.url = url
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        db_url = settings.async_database_url
        engine_kwargs = {"echo": settings.SQL_ECHO}
        if not db_url.startswith("sqlite"):
            # Pool tuning only applies to server databases
            engine_kwargs.update(
                pool_pre_ping=True,  # Verify connections before using them
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
            )
        logger.info("Creating async database engine")
        return cls(db_url, create_async_engine(db_url, **engine_kwargs))

    async def connect(self) -> None:
        """
        Verify the database is reachable.
        """
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection initialized successfully")

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """
        Close database connection pool.
        """
        await self.engine.dispose()
        logger.info("Database connection pool closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions outside of request handlers.
        """
        session = self.session_factory()
        try:
            yield session
        finally:
            await session.close()


def get_database(request: Request) -> Database:
    database: Optional[Database] = getattr(request.app.state, "db", None)
    if database is None:
        raise RuntimeError("Database has not been initialized for this application")
    return database


# Dependency to use in FastAPI endpoints
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides an async database session.
    """
    async with get_database(request).session() as session:
        yield session
