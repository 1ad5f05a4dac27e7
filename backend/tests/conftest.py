"""
Alpha Tower Backend — Test Configuration (conftest.py)
========================================================

Fixture Hierarchy (all function-scoped):
    ├── hasher: PasswordHasher with the minimum bcrypt cost (fast tests)
    ├── products_repository / users_repository: in-memory stores
    ├── file_service: FileService over a temporary upload directory
    ├── settings: Settings pointing at a temporary SQLite database
    ├── app / test_client: create_app(settings) behind httpx ASGITransport
    └── user / auth_headers: a persisted user and a bearer token for it
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from alpha_tower.config import Settings
from alpha_tower.main import create_app
from alpha_tower.repositories import InMemoryProductsRepository, InMemoryUsersRepository
from alpha_tower.security import PasswordHasher, create_access_token
from alpha_tower.services.file_service import FileService

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def products_repository():
    return InMemoryProductsRepository()


@pytest.fixture
def users_repository():
    return InMemoryUsersRepository()


@pytest.fixture
def file_service(tmp_path):
    return FileService(upload_directory=str(tmp_path / "uploads"), max_size=1024 * 1024)


@pytest.fixture
def settings(tmp_path):
    """
    Settings for one test: file-backed SQLite (shared by every connection
    in the pool), temporary upload directory, cheap bcrypt.
    """
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_directory=str(tmp_path / "uploads"),
        jwt_secret="test-secret",
        hash_rounds=4,
        max_avatar_size=1024 * 1024,
        app_api_url="http://testserver",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    # ASGITransport does not run the lifespan; create the schema directly
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def test_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def password():
    return TEST_PASSWORD


@pytest_asyncio.fixture
async def user(test_client, password):
    """A user created through the public sign-up route."""
    response = await test_client.post(
        "/users",
        json={"name": "Ada", "email": "ada@example.com", "password": password},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(user, settings):
    token = create_access_token(user["id"], settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_image_bytes():
    """Smallest valid PNG header plus padding; content is never decoded."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
