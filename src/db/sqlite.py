"""
Database connection and session management.
Uses async SQLAlchemy (aiosqlite by default) for non-blocking operations.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import settings
from src.db.models import Base


class Database:
    """Async database manager."""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.db_url
        self.echo = settings.debug if echo is None else echo
        self._engine = None
        self._session_factory = None

    async def init(self) -> None:
        """Initialize database engine and create tables."""
        if self._engine is not None:
            return

        # Ensure data directory exists
        if self.url.startswith("sqlite") and ":memory:" not in self.url:
            path_part = self.url.split("///", 1)[-1]
            Path(path_part).parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(
            self.url,
            echo=self.echo,
            future=True,
        )

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        # Create all tables
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Close database connections."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session; commits on success, rolls back on error."""
        if not self._session_factory:
            await self.init()

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Global database instance
db = Database()
