import asyncio
from typing import AsyncGenerator, Optional
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from devevent.core.config import settings
from devevent.core.errors import DatabaseUnavailableError
from devevent.core.logging import logger

Base = declarative_base()


class DatabaseManager:
    """
    Owns the process-wide async engine.

    The engine is created lazily by the first ``connect()`` call. An
    ``asyncio.Lock`` with a second check inside it guarantees concurrent
    first callers end up sharing one engine. A failed connect leaves the
    manager unconnected; callers see ``DatabaseUnavailableError`` and may
    call again later.
    """

    def __init__(self, url: str, create_tables: bool = False):
        self.url = url
        self.create_tables = create_tables
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _engine_options(self) -> dict:
        if self.url.startswith("sqlite"):
            return {}
        options = {
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,   # Verify connections before using them
            "pool_recycle": 3600,    # Recycle connections after 1 hour
        }
        if self.url.startswith("postgresql+asyncpg"):
            options["connect_args"] = {"timeout": settings.DB_CONNECT_TIMEOUT}
        return options

    async def connect(self) -> AsyncEngine:
        """Create and verify the engine once; later calls return it directly."""
        if self._engine is not None:
            return self._engine

        async with self._lock:
            if self._engine is not None:
                return self._engine

            engine = create_async_engine(self.url, echo=False, **self._engine_options())
            try:
                async with engine.begin() as conn:
                    await conn.execute(text("SELECT 1"))
                    if self.create_tables:
                        await conn.run_sync(Base.metadata.create_all)
            except (OSError, SQLAlchemyError) as e:
                await engine.dispose()
                logger.error(f"Database connection failed: {e}")
                raise DatabaseUnavailableError(str(e)) from e

            self._sessionmaker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
            self._engine = engine
            logger.info("Database engine initialised")
            return engine

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        await self.connect()
        async with self._sessionmaker() as session:
            yield session

    async def dispose(self) -> None:
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
                self._sessionmaker = None
                logger.info("Database engine disposed")


db_manager = DatabaseManager(settings.DATABASE_URL, create_tables=settings.DB_CREATE_TABLES)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in db_manager.session():
        yield session
