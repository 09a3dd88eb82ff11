"""Test fixtures for the booking pricing backend."""
from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import dispose_engine, get_sessionmaker
from app.main import app
from app.models import Availability, Provider, Tenant


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def seeded(reset_database: None, db_url: str) -> dict[str, object]:
    """Seed a tenant with one provider and an unpriced group slot."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        tenant = Tenant(name="Test Studio", slug=f"test-{uuid.uuid4().hex[:8]}")
        session.add(tenant)
        await session.flush()

        provider = Provider(
            tenant_id=tenant.id,
            name="Jamie Coach",
            email="jamie@example.com",
        )
        session.add(provider)
        await session.flush()

        availability = Availability(
            provider_id=provider.id,
            date=date(2026, 11, 2),
            start_time="09:00",
            end_time="10:00",
            is_group_session=True,
            max_capacity=12,
        )
        session.add(availability)
        await session.commit()

        return {
            "tenant_id": tenant.id,
            "provider_id": provider.id,
            "availability_id": availability.id,
        }


@pytest_asyncio.fixture()
async def client() -> AsyncIterator[AsyncClient]:
    """Yield an async HTTP client bound to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
