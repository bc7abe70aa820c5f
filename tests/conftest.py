"""
Shared pytest fixtures.

Each test gets its own SQLite database file and its own app instance,
driven in-process through httpx's ASGI transport.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import Settings, get_settings
from app.database import Database
from app.main import create_app

PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        rate_limit="10000 per minute",
    )


@pytest.fixture
async def database(settings):
    database = Database.from_settings(settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def app(settings, database):
    app = create_app(settings)
    # ASGITransport does not run the lifespan, so wire the database directly
    app.state.database = database
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def register(client, name="Alice", email="alice@taskmail.io", password=PASSWORD) -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def alice(client) -> dict:
    """Registered user: ``{"user": ..., "token": ..., "headers": ...}``"""
    data = await register(client)
    data["headers"] = bearer(data["token"])
    return data


@pytest.fixture
async def bob(client) -> dict:
    data = await register(client, name="Bob", email="bob@taskmail.io")
    data["headers"] = bearer(data["token"])
    return data
