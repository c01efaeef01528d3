"""
Async database session manager following kkb_fastapi pattern.

Usage:
    Database.init(async_db_url, engine_kw=engine_kw)

    async with Database() as session:
        ...
"""
import logging

from sqlalchemy.engine.url import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.database.session_manager.exceptions import (
    DatabaseNotInitialized,
    DatabaseTransactionError,
)

logger = logging.getLogger(__name__)


class Database:
    """
    Singleton-style holder for the async engine and session maker.

    Each ``async with Database()`` block yields one AsyncSession. The session
    is committed when the block exits cleanly and rolled back otherwise.
    """

    _async_engine: AsyncEngine | None = None
    _async_session_maker: async_sessionmaker | None = None

    def __init__(self):
        self._session: AsyncSession | None = None

    @classmethod
    def init(cls, async_db_url: URL | str, engine_kw: dict | None = None):
        """Create the engine and session maker for the given URL."""
        cls._async_engine = create_async_engine(async_db_url, **(engine_kw or {}))
        cls._async_session_maker = async_sessionmaker(
            bind=cls._async_engine, expire_on_commit=False, class_=AsyncSession
        )
        logger.debug(f"Database initialized for {cls._async_engine.url.drivername}")

    @classmethod
    async def dispose(cls):
        """Dispose the engine and forget the session maker."""
        if cls._async_engine is not None:
            await cls._async_engine.dispose()
        cls._async_engine = None
        cls._async_session_maker = None

    async def __aenter__(self) -> AsyncSession:
        if self._async_session_maker is None:
            raise DatabaseNotInitialized()
        self._session = self._async_session_maker()
        return self._session

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None:
                await self._session.rollback()
            else:
                await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Database transaction failed: {e}")
            raise DatabaseTransactionError(str(e)) from e
        finally:
            await self._session.close()
            self._session = None
