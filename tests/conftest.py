"""Shared fixtures."""

import os

os.environ.setdefault("BOT_TOKEN", "123456:TEST")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from momo_split.database.base import Base
from momo_split.services.group_service import GroupService


@pytest_asyncio.fixture
async def session():
    """Fresh in-memory database per test."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def group(session):
    """Group of Alice (1, creator), Bob (2) and Carol (3)."""
    service = GroupService(session)
    group = await service.create_group("Trip", creator_id=1, creator_name="Alice")
    await service.add_member(group.id, 2, "Bob")
    await service.add_member(group.id, 3, "Carol")
    return group


@pytest.fixture
def members():
    return ["A", "B", "C"]
