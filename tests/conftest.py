# tests/conftest.py
from datetime import datetime, timedelta, timezone

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from foodflow.core.config import Settings
from foodflow.core.security import create_token
from foodflow.main import create_app
from foodflow.repos.inmemory import InMemoryRepo

NOW = datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture(scope="session")
def anyio_backend():
    # keep AnyIO on asyncio for the whole test session
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(_env_file=None, storage="memory", jwt_secret="test-secret", log_level="WARNING")


@pytest.fixture
def repo():
    return InMemoryRepo()


@pytest.fixture
async def donor(repo):
    return await repo.create_user("Corner Bakery", "donor@example.com", "donor")


@pytest.fixture
async def recipient(repo):
    return await repo.create_user("Eastside Shelter", "shelter@example.com", "recipient")


@pytest.fixture
def auth(settings):
    def headers(user):
        return {"Authorization": f"Bearer {create_token(user.id, settings)}"}
    return headers


@pytest.fixture
async def test_client(settings, repo):
    app = create_app(settings=settings, repo=repo)
    async with LifespanManager(app):
        transport = ASGITransport(app=app, raise_app_exceptions=True)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


def listing_doc(owner_id, **over):
    """Raw listing document for seeding a repo directly."""
    doc = {
        "owner_id": owner_id,
        "title": "Bread rolls",
        "description": None,
        "category": "Baked",
        "quantity": 5,
        "unit": "bags",
        "expiry_time": NOW + timedelta(hours=6),
        "status": "available",
        "pickup_address": None,
        "pickup_location": None,
        "claimed_by": None,
        "claimed_at": None,
        "created_at": NOW - timedelta(hours=1),
    }
    doc.update(over)
    return doc
