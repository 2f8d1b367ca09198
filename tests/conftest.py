import os
from collections.abc import AsyncGenerator
from datetime import date

# Settings are read at import time; point them at throwaway backends first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CACHE_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "console"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.database import get_db
from app.dependencies import get_cache_manager
from app.main import app
from app.models import doctor_availability, doctors, metadata

# Fixed calendar days used across the suite
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)
SUNDAY = date(2030, 1, 6)

NEW_YORK = (40.7128, -74.0060)
PHILADELPHIA = (39.9526, -75.1652)


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database per test with the full schema."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client; every request gets its own session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_manager] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def doctor_factory(db_session: AsyncSession):
    """Insert a doctor with optional weekly availability rules."""

    async def create(
        availability: list[tuple[int, str, str, bool]] | None = None,
        **overrides,
    ) -> dict:
        values = {
            "name": "Dr. Sarah Johnson",
            "specialty": "Cardiology",
            "experience_years": 15,
            "rating": 4.8,
            "hospital": "City General Hospital",
            "location": "New York, NY",
            "latitude": NEW_YORK[0],
            "longitude": NEW_YORK[1],
            "telemedicine_available": True,
            **overrides,
        }
        result = await db_session.execute(insert(doctors).values(**values).returning(doctors))
        doctor = dict(result.mappings().one())

        for day, start, end, enabled in availability or []:
            await db_session.execute(
                insert(doctor_availability).values(
                    doctor_id=doctor["id"],
                    day_of_week=day,
                    start_time=start,
                    end_time=end,
                    is_available=enabled,
                )
            )

        await db_session.commit()
        return doctor

    return create


@pytest_asyncio.fixture
async def test_doctor(doctor_factory) -> dict:
    """Cardiologist in New York, available Mondays 09:00-17:00."""
    return await doctor_factory(availability=[(1, "09:00", "17:00", True)])


@pytest.fixture
def booking_data(test_doctor: dict) -> dict:
    """Sample booking request for the test doctor."""
    return {
        "patient_id": "patient-123",
        "doctor_id": str(test_doctor["id"]),
        "appointment_date": MONDAY.isoformat(),
        "time_slot": "10:00",
        "appointment_type": "normal",
        "mode": "clinic",
    }
