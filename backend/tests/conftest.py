"""
SalesDesk Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Unit tests (no database):
    ├── mock_db_session: AsyncMock session, begin_nested() usable as a context
    ├── company_payload / item_payload: valid request bodies (camelCase)

    API tests (in-memory SQLite through aiosqlite):
    ├── test_settings: Settings with low bcrypt cost and a known secret
    ├── database: fresh Database with all tables created, disposed afterwards
    ├── app: create_app(test_settings, database)
    ├── app_client: HTTPX AsyncClient over ASGITransport
    └── auth_headers: a valid token for a throwaway user id
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE importing salesdesk: the module-level settings and app read them
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from salesdesk.config import Settings  # noqa: E402
from salesdesk.database import Database  # noqa: E402
from salesdesk.main import create_app  # noqa: E402

TEST_SECRET = "test-secret-not-for-production"


# ══════════════════════════════════════════════════════════════════════════
# Unit-Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Mock AsyncSession for service tests with patched stores.

    begin_nested() returns an async context manager whose __aexit__ returns
    False, so exceptions raised inside the block still propagate.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()

    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=savepoint)
    savepoint.__aexit__ = AsyncMock(return_value=False)
    session.begin_nested = MagicMock(return_value=savepoint)
    return session


@pytest.fixture
def company_payload():
    return {
        "name": "Acme Traders",
        "gstNo": "27ABCDE1234F1Z5",
        "email": "accounts@acme.in",
        "phone": "9876543210",
        "address": "12 Market Road",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411001",
        "status": "active",
    }


@pytest.fixture
def item_payload():
    return {
        "name": "Steel Bolt",
        "hsnCode": "7318",
        "description": "M8 zinc plated",
        "status": "active",
    }


# ══════════════════════════════════════════════════════════════════════════
# API-Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        environment="test",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(test_settings, database):
    return create_app(settings=test_settings, database=database)


@pytest_asyncio.fixture
async def app_client(app):
    """
    HTTPX client talking to the app in-process.

    raise_app_exceptions=False: unhandled errors come back as the 500
    envelope instead of being re-raised into the test.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(app):
    token = app.state.tokens.issue("test-user-id")
    return {"authtoken": token}
