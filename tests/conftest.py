"""
Pytest configuration for the header-session test suite.

This configuration sets up:
- Test discovery paths
- Shared fixtures following the FakeRepository pattern (fakeredis)
- Test markers for categorization
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import fakeredis
import fakeredis.aioredis
import httpx
import pytest
import pytest_asyncio

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config):
    """
    Register custom markers for test categorization.

    - unit: tests for individual components
    - integration: request-level tests through the ASGI app
    - slow: tests waiting for Redis expiry
    """
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for service interactions")
    config.addinivalue_line("markers", "slow: Tests that take a long time to run")


# =============================================================================
# FakeRedis Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def fake_redis():
    """
    Provide a fake Redis client for testing.

    fakeredis provides a fully functional Redis-compatible interface
    without requiring a real Redis instance.
    """
    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis
    await redis.aclose()


@pytest_asyncio.fixture
async def broken_redis():
    """Provide a fake Redis client whose server refuses every command."""
    server = fakeredis.FakeServer()
    server.connected = False
    redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    yield redis
    await redis.aclose()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings():
    """
    Create test settings with safe defaults.

    Debug is on, so admin operations are allowed and debug logs are emitted.
    """
    from header_session.core.config import SessionSettings

    return SessionSettings(ttl=600, debug=True, sid_length=40)


@pytest.fixture
def mock_logger():
    """Logger double recording debug/info/error calls."""
    return MagicMock(spec=["debug", "info", "error"])


# =============================================================================
# Session Layer Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def session_store(fake_redis):
    """Provide a RedisSessionStore over fake Redis."""
    from header_session.sessions.store import RedisSessionStore

    return RedisSessionStore(redis_client=fake_redis, key_prefix="session:")


@pytest_asyncio.fixture
async def session_manager(session_store, test_settings, mock_logger):
    """Provide a SessionManager in debug mode over fake Redis."""
    from header_session.sessions.manager import SessionManager

    return SessionManager(
        store=session_store, settings=test_settings, logger=mock_logger
    )


@pytest_asyncio.fixture
async def broken_manager(broken_redis, test_settings, mock_logger):
    """Provide a SessionManager whose store fails every operation."""
    from header_session.sessions.manager import SessionManager
    from header_session.sessions.store import RedisSessionStore

    store = RedisSessionStore(redis_client=broken_redis, logger=mock_logger)
    return SessionManager(store=store, settings=test_settings, logger=mock_logger)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def app(session_manager):
    """FastAPI application wired to the fake-Redis session manager."""
    from header_session.main import create_app

    return create_app(manager=session_manager)


@pytest_asyncio.fixture
async def client(app):
    """
    Async HTTP client driving the app in-process.

    Runs on the test's event loop, so the fake Redis client is shared safely
    between the app and the assertions.
    """
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
