"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from healthwire.main import Portal
from healthwire.services.navigation_service import Navigator
from healthwire.services.session_manager import SessionManager
from healthwire.services.storage_service import MemoryStorage
from tests.fake_backend import FakeBackend
from tests.helpers import make_token


@pytest.fixture
def valid_token():
    return make_token(3600)


@pytest.fixture
def expired_token():
    return make_token(-3600)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def gateway():
    """Gateway double; every endpoint is an AsyncMock."""
    mock = MagicMock()
    mock.login = AsyncMock()
    mock.verify_mfa = AsyncMock()
    mock.register = AsyncMock()
    mock.get_current_user = AsyncMock()
    mock.get_available_slots = AsyncMock()
    return mock


@pytest.fixture
def session(gateway, storage, navigator):
    """Initialized session manager over an empty storage."""
    manager = SessionManager(gateway, storage, navigator)
    manager.initialize()
    return manager


@pytest.fixture
def sample_client():
    return {
        "id": 5,
        "nom": "Alice Durand",
        "email": "a@b.com",
        "ville": "Lyon",
        "telephone": "0612345678",
    }


@pytest.fixture
def sample_doctor():
    return {
        "id": 12,
        "nom": "Dr. Martin",
        "email": "martin@clinic.fr",
        "ville": "Paris",
        "telephone": "+33612345678",
        "specialite": "Cardiology",
    }


@pytest.fixture
def backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def portal(backend):
    """Portal client wired to the in-process fake backend."""
    app = Portal(
        storage=MemoryStorage(),
        transport=httpx.ASGITransport(app=backend.app),
    )
    await app.startup()
    try:
        yield app
    finally:
        await app.shutdown()
