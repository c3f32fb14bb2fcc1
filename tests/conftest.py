import os

# Settings are read at import time; point them at the test database first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from admission_portal.core import models  # noqa: F401
from admission_portal.db.session import Base, get_db
from admission_portal.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_UDISE = "10150600101"
TEST_PASSWORD = "StrongPass123"


@pytest.fixture()
async def db_engine():
    """In-memory database shared by every connection of one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def school(client: AsyncClient) -> Dict:
    """A signed-up school account."""
    payload = {
        "udise": TEST_UDISE,
        "name": "Rajkiya Uchch Vidyalaya",
        "address": "Main Road, Muzaffarpur",
        "mobile": "9876543210",
        "email": "principal@example.com",
        "password": TEST_PASSWORD,
        "confirm_password": TEST_PASSWORD,
    }
    response = await client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
async def auth_headers(client: AsyncClient, school: Dict) -> Dict[str, str]:
    response = await client.post(
        "/api/v1/auth/login",
        json={"login": school["udise"], "password": TEST_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
