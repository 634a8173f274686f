"""Async engine and the session factory shared by endpoints and the progression store.

Plan and cycle endpoints get one request-scoped session through `get_db`. The
progression store opens its own short session per call from the same factory,
so a soreness answer or a finished muscle group is committed on its own.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from mesotracker.core.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.async_database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    # Training sessions sit idle between sets; recycle connections the server dropped
    pool_pre_ping=True,
    echo=settings.debug,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: commit when the endpoint returns, roll back if it raises."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
