from typing import AsyncGenerator, Optional

from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from admission_portal.core.config import settings
from admission_portal.core.exceptions import ConfigurationError

DATABASE_NOT_CONFIGURED_MESSAGE = (
    "There is an issue with the database configuration. Set DATABASE_URL and restart the server."
)


def _build_engine(url: Optional[str]) -> Optional[AsyncEngine]:
    if not url:
        return None
    # pool_pre_ping: check connection is alive before use.
    # pool_recycle: discard connections after this many seconds to avoid stale connections.
    return create_async_engine(
        url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_recycle=300,
    )


try:
    engine = _build_engine(settings.database_url)
except (ArgumentError, ImportError):
    engine = None

AsyncSessionLocal = (
    async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    if engine is not None
    else None
)

Base = declarative_base()


def require_sessionmaker() -> async_sessionmaker:
    """Return the configured sessionmaker or refuse with ConfigurationError."""
    if AsyncSessionLocal is None:
        raise ConfigurationError(DATABASE_NOT_CONFIGURED_MESSAGE)
    return AsyncSessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    sessionmaker = require_sessionmaker()
    async with sessionmaker() as session:
        yield session
