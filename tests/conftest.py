import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from database.base import Base
from database.models import (
    Client,
    Coach,
    Package,
    Room,
    Studio,
    Tenant,
)


@pytest.fixture
def test_database_url(tmp_path) -> str:
    """Separate database per test; SQLite file unless TEST_DATABASE_URL is set."""
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'studioflow_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def async_engine(test_database_url):
    """Create async engine for tests."""
    engine = create_async_engine(
        test_database_url,
        echo=False,
        poolclass=NullPool,  # Disable pooling for tests
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_maker(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def tenant(db_session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Pulse EMS", timezone="Europe/London")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    tenant = Tenant(name="Other Studio Chain", timezone="Europe/Berlin")
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest_asyncio.fixture
async def studio(db_session: AsyncSession, tenant: Tenant) -> Studio:
    studio = Studio(tenant_id=tenant.id, name="Pulse Downtown", is_active=True)
    db_session.add(studio)
    await db_session.commit()
    return studio


@pytest_asyncio.fixture
async def room(db_session: AsyncSession, tenant: Tenant, studio: Studio) -> Room:
    room = Room(tenant_id=tenant.id, studio_id=studio.id, name="Room 1", is_active=True)
    db_session.add(room)
    await db_session.commit()
    return room


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, tenant: Tenant) -> Client:
    """Client with a linked Telegram chat."""
    client = Client(
        tenant_id=tenant.id,
        name="Anna Schmidt",
        phone="+441234567890",
        gender="female",
        telegram_id=987654321,
    )
    db_session.add(client)
    await db_session.commit()
    return client


@pytest_asyncio.fixture
async def coach(db_session: AsyncSession, tenant: Tenant, studio: Studio) -> Coach:
    """Coach who trains anyone."""
    coach = Coach(
        tenant_id=tenant.id,
        studio_id=studio.id,
        name="Max Weber",
        gender="male",
        preferred_client_gender="any",
        is_active=True,
    )
    db_session.add(coach)
    await db_session.commit()
    return coach


@pytest_asyncio.fixture
async def package(db_session: AsyncSession, tenant: Tenant) -> Package:
    """Ten sessions for 100, valid 30 days."""
    package = Package(
        tenant_id=tenant.id,
        name="10 EMS sessions",
        total_sessions=10,
        price=100,
        validity_days=30,
        is_active=True,
    )
    db_session.add(package)
    await db_session.commit()
    return package
