import os

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("ENABLE_RESPONSE_COMPRESSION", "false")
os.environ.setdefault("OWNER_DELETE_POLICY", "restrict")

import pytest
from typing import AsyncGenerator, Dict, Set
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from fastapi import FastAPI
from asgi_lifespan import LifespanManager

from backoffice.core.config import settings
from backoffice.core.constants import UserRole
from backoffice.core.database import Database, get_db
from backoffice.core.security import create_access_token
from backoffice.core.storage import S3Storage, get_storage
from backoffice.crud import user as user_crud
from backoffice.db import base  # noqa: F401
from backoffice.db.models import User
from backoffice.schemas.user import UserCreate
from main import app


class FakeStorage(S3Storage):
    """S3Storage that keeps objects in memory."""

    def __init__(self):
        super().__init__(settings)
        self.objects: Dict[str, bytes] = {}
        self.fail_uploads_for: Set[str] = set()

    async def upload_file(self, file_obj, file_key: str, content_type: str = None) -> bool:
        if any(name in file_key for name in self.fail_uploads_for):
            return False
        self.objects[file_key] = file_obj.read()
        return True

    async def delete_file(self, file_key: str) -> bool:
        return self.objects.pop(file_key, None) is not None


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh SQLite database file for each test."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    database = Database(url, create_async_engine(url))
    await database.create_all()
    yield database
    await database.close()

@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session

@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()

@pytest.fixture
async def test_app(database: Database, storage: FakeStorage) -> AsyncGenerator[FastAPI, None]:
    """The application wired to the test database and in-memory storage."""
    async def override_get_db():
        async with database.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    async with LifespanManager(app):
        yield app
    app.dependency_overrides.clear()

@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client

@pytest.fixture
def test_password() -> str:
    """Return a test password."""
    return "test_password123"

@pytest.fixture
def test_user_data(test_password):
    """Return test user data."""
    return {
        "email": "test@example.com",
        "password": test_password,
        "name": "Test User",
    }

@pytest.fixture
async def admin_user(db: AsyncSession, test_password: str) -> User:
    return await user_crud.create_user(
        db,
        UserCreate(name="Admin User", email="admin@example.com", password=test_password),
        role=UserRole.admin,
        is_active=True,
    )

@pytest.fixture
async def regular_user(db: AsyncSession, test_password: str) -> User:
    return await user_crud.create_user(
        db,
        UserCreate(name="Regular User", email="user@example.com", password=test_password),
        is_active=True,
    )

@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    token = create_access_token(admin_user.id, role=admin_user.role.value)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def user_headers(regular_user: User) -> Dict[str, str]:
    token = create_access_token(regular_user.id, role=regular_user.role.value)
    return {"Authorization": f"Bearer {token}"}

@pytest.fixture
def client_data() -> dict:
    return {
        "name": "John",
        "family_name": "Smith",
        "email": "john.smith@example.com",
        "passport_number": "AB1234567",
        "nationality": "British",
        "date_of_birth": "1980-05-17",
        "phone_number": "+66812345678",
        "current_address": "12 Sukhumvit Road, Bangkok",
        "marital_status": "married",
        "father_name": "Robert Smith",
    }

@pytest.fixture
async def created_client(client: AsyncClient, admin_headers: dict, client_data: dict) -> dict:
    response = await client.post("/api/v1/clients", json=client_data, headers=admin_headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
