"""
Shared fixtures: settings, an in-memory database and an HTTP client.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.jwt import TokenService
from config.settings import Settings
from database.session import build_engine, build_session_factory, create_tables
from database.store import ProfileStore, UserStore
from main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url="sqlite+aiosqlite://",
        bcrypt_rounds=4,
    )


@pytest.fixture
def tokens(settings) -> TokenService:
    return TokenService(settings.jwt_secret, settings.jwt_expiry_seconds)


@pytest_asyncio.fixture
async def session():
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    factory = build_session_factory(engine)
    async with factory() as db_session:
        yield db_session
    await engine.dispose()


@pytest.fixture
def users(session) -> UserStore:
    return UserStore(session)


@pytest.fixture
def profiles(session) -> ProfileStore:
    return ProfileStore(session)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
