"""Async database engine and session factory."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shiftgap.core.config import settings


def create_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    return create_async_engine(
        url or settings.SQLALCHEMY_DATABASE_URI,
        echo=settings.DATABASE_ECHO,
        pool_pre_ping=settings.DATABASE_POOL_PRE_PING,
        **kwargs,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
