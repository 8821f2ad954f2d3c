"""
Benefícios API: Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests never need a running MongoDB.
How:   Service tests get a MagicMock collection; route tests get an
       in-memory Motor-compatible collection (mongomock-motor) injected
       through FastAPI's dependency overrides.

Fixture Hierarchy (all function-scoped):
    ├── mock_collection: MagicMock shaped like an AsyncIOMotorCollection
    ├── mongo_collection: fresh in-memory `beneficios` collection
    ├── sample_beneficio: a body that passes every validation rule
    └── test_client: HTTPX AsyncClient bound to the app, using mongo_collection
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

# Override settings BEFORE any app imports
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["MONGODB_DATABASE"] = "beneficios_test"
os.environ["LOG_LEVEL"] = "WARNING"


@pytest.fixture
def mock_collection():
    """
    A MagicMock standing in for AsyncIOMotorCollection.

    find() returns a chainable cursor whose to_list() is awaitable; the
    write methods are AsyncMocks.

    Usage:
        mock_collection.find.return_value.to_list.return_value = [doc]
    """
    cursor = MagicMock()
    cursor.limit.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])

    collection = MagicMock()
    collection.find.return_value = cursor
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.delete_one = AsyncMock()
    return collection


@pytest.fixture
def mongo_collection():
    """Fresh in-memory collection per test."""
    client = AsyncMongoMockClient()
    return client["beneficios_test"]["beneficios"]


@pytest.fixture
def sample_beneficio():
    return {
        "nome": "Cesta Básica",
        "endereco": {
            "logradouro": "Rua das Flores, 10",
            "bairro": "Centro",
            "cidade": "Votorantim",
        },
        "pontos": 10,
        "data": "2024-05-01",
        "quantidade": 3,
    }


@pytest_asyncio.fixture
async def test_client(mongo_collection):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not run the lifespan, so no real connection is made;
    the collection dependency is pointed at `mongo_collection` instead.
    """
    from app.database import get_beneficios_collection
    from app.main import app

    app.dependency_overrides[get_beneficios_collection] = lambda: mongo_collection
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
