"""
Database Test Configuration and Fixtures

Each test gets a fresh SQLite file with the staffing tables created.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from shiftgap.infrastructure.database import create_engine, create_session_factory
from shiftgap.infrastructure.database import models  # noqa: F401  registers tables


@pytest_asyncio.fixture
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on an isolated, freshly created database."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'staffing.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session

    await engine.dispose()
