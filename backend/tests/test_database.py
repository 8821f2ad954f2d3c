"""
Benefícios API: Connection Lifecycle Tests
===========================================

What:  connect_to_mongo / close_mongo_connection / get_beneficios_collection.
How:   AsyncIOMotorClient is patched, so no server is contacted and the
       startup retry loop runs a single attempt.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app import database
from app.config import settings
from app.exceptions import DatabaseError


@pytest.fixture(autouse=True)
def reset_connection():
    yield
    database._client = None
    database._database = None


def _fake_client(ping_side_effect=None):
    client = MagicMock()
    client.admin.command = AsyncMock(side_effect=ping_side_effect)
    return client


class TestCollectionDependency:

    def test_raises_before_connect(self):
        with pytest.raises(DatabaseError) as exc_info:
            database.get_beneficios_collection()
        assert exc_info.value.status_code == 500


class TestConnect:

    @pytest.mark.asyncio
    async def test_success(self):
        client = _fake_client()

        with patch("app.database.AsyncIOMotorClient", return_value=client) as factory:
            await database.connect_to_mongo()

        factory.assert_called_once_with(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
        )
        client.admin.command.assert_awaited_once_with("ping")
        assert database.get_client() is client
        database.get_beneficios_collection()
        client.__getitem__.assert_called_with(settings.mongodb_database)

    @pytest.mark.asyncio
    async def test_unreachable_aborts(self):
        client = _fake_client(ServerSelectionTimeoutError("timed out"))

        with patch("app.database.AsyncIOMotorClient", return_value=client), \
                patch.object(settings, "connect_max_attempts", 1):
            with pytest.raises(DatabaseError) as exc_info:
                await database.connect_to_mongo()

        assert exc_info.value.message == "MongoDB is unreachable"
        client.close.assert_called_once()
        assert database.get_client() is None

    @pytest.mark.asyncio
    async def test_close_resets_state(self):
        client = _fake_client()
        with patch("app.database.AsyncIOMotorClient", return_value=client):
            await database.connect_to_mongo()

        database.close_mongo_connection()

        client.close.assert_called_once()
        assert database.get_client() is None
        with pytest.raises(DatabaseError):
            database.get_beneficios_collection()

    def test_close_without_connect(self):
        database.close_mongo_connection()
        assert database.get_client() is None
