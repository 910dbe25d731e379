"""Test fixtures: a fresh SQLite database and HTTP client per test."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from employee_api.config import Settings
from employee_api.database import Database
from employee_api.main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'employees.db'}")


@pytest_asyncio.fixture
async def database(settings: Settings) -> Database:
    db = Database(settings.database_url)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def client(settings: Settings, database: Database) -> AsyncClient:
    """HTTP client wired to an app backed by the per-test database."""
    app = create_app(settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def broken_client(settings: Settings) -> AsyncClient:
    """Client whose database has no tables, so every storage call fails."""
    db = Database(settings.database_url)
    app = create_app(settings, database=db)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    await db.dispose()


def employee_payload(**overrides) -> dict:
    payload = {
        "employeeId": "E-100",
        "firstName": "Jane",
        "lastName": "Doe",
        "email": "jane.doe@example.com",
        "phoneNumber": "555-0100",
        "dateOfBirth": "1990-01-15",
        "department": "Engineering",
        "position": "Developer",
        "dateOfJoining": "2021-03-01",
        "salary": 72000,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return employee_payload
