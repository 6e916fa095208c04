"""
Shared Test Fixtures
====================

The API is exercised over ``httpx.ASGITransport`` with the database
session, the callers and the AI gateway swapped out through FastAPI
dependency overrides. Redis is reported as unreachable so the cache and
the rate limiter take their fail-open paths.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lifeos.db.session import get_db
from lifeos.dependencies import AuthenticatedUser, get_current_user, get_relay_user
from lifeos.main import app
from lifeos.services.ai_gateway import get_ai_gateway

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
TEST_USER = AuthenticatedUser(user_id=USER_ID, email="tester@example.com")


def make_result(scalars=None, scalar=None, mappings=None) -> MagicMock:
    """Build the object ``await session.execute(...)`` resolves to."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(scalars or [])
    result.scalar_one_or_none.return_value = scalar
    result.scalar.return_value = scalar
    result.mappings.return_value.all.return_value = list(mappings or [])
    return result


def make_session() -> AsyncMock:
    """AsyncSession stand-in; ``execute`` returns empty results by default."""
    session = AsyncMock()
    session.add = MagicMock()
    session.begin_nested = MagicMock()
    session.execute.return_value = make_result()
    return session


@pytest.fixture
def db_session() -> AsyncMock:
    return make_session()


@pytest.fixture
def gateway() -> AsyncMock:
    return AsyncMock()


@pytest.fixture(autouse=True)
def redis_down():
    """Every Redis call fails; cache reads miss and rate limits fail open."""
    unreachable = AsyncMock(side_effect=ConnectionError("Redis unavailable"))
    with patch("lifeos.services.cache.get_redis", unreachable), \
            patch("lifeos.core.rate_limit.get_redis", unreachable):
        yield


@pytest_asyncio.fixture
async def client(db_session, gateway):
    """Authenticated client with the session and gateway overridden."""

    async def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    app.dependency_overrides[get_relay_user] = lambda: TEST_USER
    app.dependency_overrides[get_ai_gateway] = lambda: gateway

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anonymous_client(db_session):
    """Client with real auth dependencies, for 401 checks."""

    async def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
