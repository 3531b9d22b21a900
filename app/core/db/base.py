from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.config import settings
from app.core.logging import get_logger


Base = declarative_base()

logger = get_logger(__name__)

# no connection is opened until the first session uses it
engine = create_async_engine(
    str(settings.postgres.connection_string),
    echo=settings.postgres.echo_sql,
    pool_size=settings.postgres.pool_size,
    pool_pre_ping=True,
)

async_session_maker = async_sessionmaker(
    engine,
    expire_on_commit=False,
)


async def get_session() -> AsyncIterator[AsyncSession]:
    """Request-scoped session: committed when the handler returns, rolled back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error("Session rolled back due to error: %s", e)
            raise


async def dispose_engine() -> None:
    await engine.dispose()
