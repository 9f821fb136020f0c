"""Database session management with transaction utilities.

This module provides:
- AsyncSession factory for dependency injection
- The ``transactional`` scope that every balance mutation batch runs in
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ledger.core.config import settings

logger = logging.getLogger(__name__)

# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency for route handlers.

    Commits whatever is still pending when the handler returns and rolls
    back when it raises. Services that need all-or-nothing semantics open
    their own ``transactional`` scope inside this session.

    Yields:
        AsyncSession: Database session for the request
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transactional(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Explicit transaction scope with automatic commit/rollback.

    Commits on normal exit and rolls back on every other exit path,
    including task cancellation, then re-raises.

    Args:
        db: The database session

    Yields:
        AsyncSession: The database session

    Example:
        ```python
        async with transactional(db):
            for action in actions:
                await apply_action(db, action)
            # All actions commit together or roll back together
        ```
    """
    try:
        yield db
        await db.commit()
        logger.debug("Transaction committed successfully")
    except BaseException as e:
        await db.rollback()
        logger.error(f"Transaction rolled back due to error: {type(e).__name__}: {e}")
        raise
