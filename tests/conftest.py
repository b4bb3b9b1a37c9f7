import os
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from pymongo.errors import PyMongoError

from pyheadlines import Headline, HeadlineSource, HeadlinesRepository, disable_tracing
from pyheadlines.core.connection import _databases, connect, disconnect, ping

MONGO_URI = os.environ.get(
    "PYHEADLINES_TEST_MONGO_URI", "mongodb://localhost:27017/pyheadlines_test"
)


@pytest.fixture(autouse=True)
def reset_tracing():
    """Reset observability state between tests."""
    yield
    disable_tracing()


@pytest.fixture
def source():
    """A HeadlineSource double; configure return values per test."""
    return AsyncMock(spec=HeadlineSource)


@pytest.fixture
def repository(source):
    return HeadlinesRepository(source=source)


@pytest.fixture
def make_headlines():
    def _make(n: int, start: int = 0, **fields) -> list[Headline]:
        return [
            Headline(id=f"h{i:03d}", title=f"Headline {i}", **fields)
            for i in range(start, start + n)
        ]

    return _make


@pytest_asyncio.fixture
async def mongo_connection():
    """Connect to a test MongoDB, skip when none is reachable, drop the DB after."""
    db = await connect(MONGO_URI, serverSelectionTimeoutMS=500)
    try:
        await ping()
    except PyMongoError:
        await disconnect()
        pytest.skip(f"MongoDB not reachable at {MONGO_URI}")
    yield db
    # Reconnect if the test disconnected
    if "default" not in _databases:
        db = await connect(MONGO_URI, serverSelectionTimeoutMS=500)
    for name in await db.list_collection_names():
        await db.drop_collection(name)
    await disconnect()
