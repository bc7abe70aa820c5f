import asyncio
import logging

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import Settings

logger = logging.getLogger(__name__)

# asyncpg raises a bare TimeoutError when the server never answers
CONNECTION_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class Database:
    """
    Owns the async engine (and its connection pool) for one process.

    Built once at startup and handed to request handlers through
    ``app.state.database``. The engine connects lazily on first use.
    """

    def __init__(self, url: str, pool_size: int = 10, connect_timeout: int = 5):
        self.url = url
        engine_kwargs = {"echo": False, "future": True, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"timeout": connect_timeout}
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                pool_timeout=connect_timeout,
                connect_args={"timeout": connect_timeout},
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            connect_timeout=settings.db_connect_timeout,
        )

    async def connect(self, raise_on_error: bool = True) -> bool:
        """Open a first connection to verify the store is reachable."""
        try:
            await self.ping()
        except CONNECTION_ERRORS as e:
            logger.error(f"Database connection error: {e}")
            if raise_on_error:
                raise
            logger.warning("Continuing without a database connection")
            return False
        logger.info(f"Database connected: {self.engine.url.render_as_string(hide_password=True)}")
        return True

    async def ping(self):
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def status(self) -> str:
        try:
            await self.ping()
        except CONNECTION_ERRORS as e:
            logger.warning(f"Database health check failed: {e}")
            return "disconnected"
        return "connected"

    async def create_all(self):
        # Import table models so they are registered on the metadata
        import app.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()
        logger.info("Database connection closed")


# Dependency for getting DB session
async def get_db(request: Request):
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
