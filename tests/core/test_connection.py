import pytest

from pyheadlines import NotConnected, connect, disconnect, get_database
from pyheadlines.core.connection import _extract_db_name, get_client


class TestConnect:
    async def test_connect_registers_database(self):
        db = await connect("mongodb://localhost:27017/pyheadlines_unit")
        try:
            assert db.name == "pyheadlines_unit"
            assert get_database().name == "pyheadlines_unit"
            assert get_client() is not None
        finally:
            await disconnect()

    async def test_multiple_aliases(self):
        await connect("mongodb://localhost:27017/primary_db")
        await connect("mongodb://localhost:27017/archive_db", alias="archive")
        try:
            assert get_database("archive").name == "archive_db"
            assert get_database("default").name == "primary_db"
        finally:
            await disconnect("archive")
            await disconnect()

    async def test_disconnect_removes_connection(self):
        await connect("mongodb://localhost:27017/pyheadlines_unit")
        await disconnect()
        with pytest.raises(NotConnected):
            get_database()
        with pytest.raises(NotConnected):
            get_client()

    async def test_disconnect_unknown_alias_is_noop(self):
        await disconnect("never-connected")

    def test_get_database_not_connected_raises(self):
        with pytest.raises(NotConnected, match="Call connect\\(\\) first"):
            get_database("missing")

    async def test_invalid_uri_registers_nothing(self):
        with pytest.raises(ValueError):
            await connect("mongodb://localhost:27017", alias="broken")
        with pytest.raises(NotConnected):
            get_database("broken")


class TestExtractDbName:
    def test_simple(self):
        assert _extract_db_name("mongodb://localhost:27017/news") == "news"

    def test_strips_query_string(self):
        assert _extract_db_name("mongodb://h1,h2/news_db?replicaSet=rs0") == "news_db"

    def test_empty_uri(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            _extract_db_name("")

    def test_missing_scheme(self):
        with pytest.raises(ValueError, match="missing scheme"):
            _extract_db_name("localhost/news")

    def test_missing_database(self):
        with pytest.raises(ValueError, match="Cannot extract database name"):
            _extract_db_name("mongodb://localhost:27017")

    def test_trailing_slash(self):
        with pytest.raises(ValueError, match="Cannot extract database name"):
            _extract_db_name("mongodb://localhost:27017/")

    def test_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid database name"):
            _extract_db_name("mongodb://localhost:27017/bad.name")
