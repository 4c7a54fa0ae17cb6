"""
Hidden Gems Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests never need a running MongoDB: service tests use AsyncMock
       collections, endpoint tests use an in-memory collection double.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_collection: AsyncMock standing in for an AsyncCollection
    ├── gem_collection: InMemoryGemCollection with MongoDB-like results
    ├── mock_connection: MongoConnection stand-in whose ping succeeds
    ├── sample_gem_payload: The "Hidden Beach" create payload
    └── test_client: HTTPX AsyncClient wired to a fresh app
"""

import copy
import os
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any app import so the settings singleton never points at a real cluster
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# In-memory collection double
# ══════════════════════════════════════════════════════════════════════════


class _Cursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._documents if length is None else self._documents[:length]


class InMemoryGemCollection:
    """
    The subset of AsyncCollection used by GemService, backed by a dict.

    Supports `_id` equality filters only. update_one reports modified_count 0
    when every `$set` value already matches, like MongoDB does.
    """

    def __init__(self) -> None:
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}

    def find(self, filter: Optional[Dict[str, Any]] = None) -> _Cursor:
        return _Cursor([copy.deepcopy(doc) for doc in self.documents.values()])

    async def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        document = self.documents.get(filter["_id"])
        return copy.deepcopy(document) if document is not None else None

    async def insert_one(self, document: Dict[str, Any]) -> SimpleNamespace:
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = copy.deepcopy(document)
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    async def update_one(self, filter: Dict[str, Any], update: Dict[str, Any]) -> SimpleNamespace:
        document = self.documents.get(filter["_id"])
        if document is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        changes = {k: v for k, v in update["$set"].items() if document.get(k, object()) != v}
        document.update(copy.deepcopy(changes))
        return SimpleNamespace(matched_count=1, modified_count=1 if changes else 0)

    async def delete_one(self, filter: Dict[str, Any]) -> SimpleNamespace:
        removed = self.documents.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1)

    async def count_documents(self, filter: Dict[str, Any], limit: int = 0) -> int:
        return 1 if filter["_id"] in self.documents else 0


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def mock_collection():
    """
    Provides a mock async collection.

    Usage:
        async def test_get(mock_collection):
            mock_collection.find_one.return_value = {"_id": oid, "title": "x"}
            result = await GemService(mock_collection).get_gem(str(oid))
    """
    collection = MagicMock()
    collection.find_one = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.count_documents = AsyncMock()
    return collection


@pytest.fixture
def gem_collection():
    return InMemoryGemCollection()


@pytest.fixture
def mock_connection(gem_collection):
    connection = MagicMock()
    connection.collection = gem_collection
    connection.ping = AsyncMock(return_value=True)
    connection.describe.return_value = {"database": "hidden_gems_test", "collection": "hidden_gems"}
    return connection


@pytest.fixture
def sample_gem_payload():
    return {
        "title": "Hidden Beach",
        "description": "Secluded cove",
        "category": "Nature",
    }


@pytest_asyncio.fixture
async def test_client(mock_connection):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the MongoDB connection is
    swapped in through a dependency override instead.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    from app.database import get_connection
    from app.main import create_app

    app = create_app()
    app.dependency_overrides[get_connection] = lambda: mock_connection
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
