from datetime import datetime, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from blog_backend.config import Settings
from blog_backend.database import DatabaseManager
from blog_backend.main import create_app
from tests.support.helpers import TEST_SECRET, FrozenClock
from tests.support.in_memory_mongo import InMemoryClient


@pytest.fixture
def settings():
    return Settings(
        SECRET_KEY=TEST_SECRET,
        MONGODB_URL="mongodb://localhost:27017",
        MONGODB_DATABASE="blog_test",
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def clock():
    return FrozenClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def mongo():
    return InMemoryClient()


@pytest.fixture
def database(mongo, settings):
    return mongo[settings.MONGODB_DATABASE]


@pytest.fixture
def db_manager(settings, mongo, database):
    """A manager already "connected" to the in-memory client; connect() is a no-op."""
    manager = DatabaseManager(settings)
    manager.client = mongo
    manager.database = database
    manager.transactions_supported = False
    return manager


@pytest_asyncio.fixture
async def indexed_db_manager(db_manager):
    await db_manager.create_indexes()
    return db_manager


@pytest.fixture
def client(settings, db_manager, clock):
    app = create_app(settings, db_manager=db_manager, clock=clock)
    with TestClient(app) as test_client:
        yield test_client
