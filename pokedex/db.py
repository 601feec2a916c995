import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from pokedex.config import DATABASE_URL
from pokedex.models import Base

logger = logging.getLogger(__name__)


def create_engine(url: str = DATABASE_URL) -> AsyncEngine:
    """
    Create the async engine for the settings database.

    SQLite files get no connection pool: opening one is cheap and pooled
    aiosqlite connections cannot be shared between event loops.
    """
    kwargs = {"echo": False}
    if url.startswith("sqlite"):
        kwargs["poolclass"] = NullPool
    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )


# Global async engine and session factory used by the running service
engine: AsyncEngine = create_engine(DATABASE_URL)
AsyncSessionLocal = create_session_factory(engine)


async def check_connection(db_engine: AsyncEngine) -> str:
    """'connected', or 'error: ...' when the database cannot be reached."""
    try:
        async with db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return "connected"
    except Exception as e:
        return f"error: {e!s}"


async def run_migrations(
    db_engine: AsyncEngine,
    max_retries: int = 10,
    retry_delay: float = 2,
) -> None:
    """
    Simple, idempotent migration function with retry logic.

    - Waits for database to be ready (with exponential backoff)
    - Creates the 'settings' table if it does not exist.
    """
    for attempt in range(max_retries):
        try:
            async with db_engine.begin() as conn:
                # Test connection first
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(Base.metadata.create_all)

            # Success - migrations completed
            return

        except Exception as e:
            if attempt < max_retries - 1:
                wait_time = min(retry_delay * (2 ** attempt), 30)  # Exponential backoff with max 30 seconds
                logger.warning(
                    "Database not ready (attempt %d/%d), retrying in %ss...",
                    attempt + 1, max_retries, wait_time,
                )
                await asyncio.sleep(wait_time)
            else:
                # Last attempt failed
                logger.error("Failed to connect to database after %d attempts: %s", max_retries, e)
                raise
