"""Async database engine and session configuration."""

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from hotdeal.config import Settings


def build_database_url(settings: Settings):
    """Return the configured database URL, or build a MySQL one from its parts."""
    if settings.database_url:
        return settings.database_url
    return URL.create(
        "mysql+aiomysql",
        username=settings.user or None,
        password=settings.password or None,
        host=settings.host,
        database=settings.database,
        query={"charset": "utf8mb4"},
    )


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for this run."""
    url = build_database_url(settings)

    # SQLite doesn't support pool_size / max_overflow / pool_pre_ping
    is_sqlite = str(url).startswith("sqlite")

    engine_kwargs: dict = {"echo": settings.db_echo}
    if not is_sqlite:
        engine_kwargs.update(pool_size=settings.max_workers, max_overflow=5, pool_pre_ping=True)

    return create_async_engine(url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
