from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from typing import AsyncGenerator, Optional
from datetime import datetime, timezone
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time, used for column defaults"""
    return datetime.now(timezone.utc)


class DatabaseManager:
    """
    Process-wide handle on the async engine and session factory.

    The engine is created lazily on first use (or explicitly via ``init``)
    and released by ``dispose``; the FastAPI lifespan drives both.
    """

    def __init__(self, url: Optional[str] = None):
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    def init(self, url: Optional[str] = None, **engine_kwargs) -> AsyncEngine:
        if self._engine is not None:
            return self._engine

        self._url = url or self._url or settings.DATABASE_URL
        engine_kwargs.setdefault("echo", settings.DATABASE_ECHO)
        engine_kwargs.setdefault("pool_pre_ping", True)

        self._engine = create_async_engine(self._url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )
        logger.info(f"Database engine initialised ({self._engine.url.drivername})")
        return self._engine

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self.init()
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            self.init()
        return self._session_factory

    async def create_all(self) -> None:
        """Create all tables (for development - no migrations are shipped)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session"""
    async with db_manager.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
