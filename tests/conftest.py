import os
from collections.abc import AsyncGenerator
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Load environment variables from .env file
load_dotenv()

# Settings are read at import time, so these must be set before the app is imported.
# Tests run against a throwaway SQLite file unless TEST_DATABASE_URL points elsewhere.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FORMAT", "console")

from app.core.redis_client import get_redis_client  # noqa: E402
from app.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import metadata  # noqa: E402
from tests.factories import (  # noqa: E402
    create_doctor_profile,
    create_profile,
    make_auth_headers,
    set_status,
)

if TEST_DATABASE_URL.startswith("postgresql://"):
    TEST_DATABASE_URL = TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

# Use NullPool to avoid event loop issues between tests
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=NullPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a freshly created schema."""
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    # Drop tables after test
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest.fixture
def redis_mock() -> MagicMock:
    """Redis stand-in that never has a cached value."""
    mock = MagicMock()
    mock.get.return_value = None
    return mock


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, redis_mock: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: redis_mock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def patient(db_session: AsyncSession) -> dict:
    """Create a patient profile."""
    return await create_profile(db_session, "patient", "Pat Patient", email="patient@example.com")


@pytest_asyncio.fixture
async def other_patient(db_session: AsyncSession) -> dict:
    """Create a second patient profile."""
    return await create_profile(db_session, "patient", "Olive Other")


@pytest_asyncio.fixture
async def doctor_user(db_session: AsyncSession) -> dict:
    """Create a doctor account."""
    return await create_profile(db_session, "doctor", "Dr. Dana Heart")


@pytest_asyncio.fixture
async def doctor(db_session: AsyncSession, doctor_user: dict) -> dict:
    """Create a verified doctor profile for doctor_user."""
    return await create_doctor_profile(db_session, doctor_user["id"])


@pytest_asyncio.fixture
async def other_doctor_user(db_session: AsyncSession) -> dict:
    """Create a second doctor account."""
    return await create_profile(db_session, "doctor", "Dr. Sam Bones")


@pytest_asyncio.fixture
async def other_doctor(db_session: AsyncSession, other_doctor_user: dict) -> dict:
    """Create a verified doctor profile for other_doctor_user."""
    return await create_doctor_profile(
        db_session, other_doctor_user["id"], specialization="Orthopedics"
    )


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> dict:
    """Create an admin profile."""
    return await create_profile(db_session, "admin", "Ada Admin")


@pytest.fixture
def patient_headers(patient: dict) -> dict:
    return make_auth_headers(patient)


@pytest.fixture
def other_patient_headers(other_patient: dict) -> dict:
    return make_auth_headers(other_patient)


@pytest.fixture
def doctor_headers(doctor_user: dict) -> dict:
    return make_auth_headers(doctor_user)


@pytest.fixture
def other_doctor_headers(other_doctor_user: dict) -> dict:
    return make_auth_headers(other_doctor_user)


@pytest.fixture
def admin_headers(admin: dict) -> dict:
    return make_auth_headers(admin)


@pytest.fixture
def appointment_payload(doctor: dict) -> dict:
    """Request body for booking tomorrow with the verified doctor."""
    return {
        "doctor_id": str(doctor["id"]),
        "appointment_date": (date.today() + timedelta(days=1)).isoformat(),
        "appointment_time": "10:30",
        "reason": "Chest pain during exercise",
    }


@pytest_asyncio.fixture
async def appointment(
    client: AsyncClient, patient_headers: dict, appointment_payload: dict
) -> dict:
    """A pending appointment booked through the API."""
    response = await client.post(
        "/api/appointments", json=appointment_payload, headers=patient_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["appointment"]


@pytest_asyncio.fixture
async def completed_appointment(
    client: AsyncClient, appointment: dict, doctor_headers: dict
) -> dict:
    """An appointment the doctor confirmed and then completed."""
    response = await set_status(client, appointment["id"], "confirmed", doctor_headers)
    assert response.status_code == 200, response.text
    response = await set_status(client, appointment["id"], "completed", doctor_headers)
    assert response.status_code == 200, response.text
    return response.json()["appointment"]
