"""Tests for the database migration system."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch


def _cursor(row):
    cursor = MagicMock()
    cursor.fetchone = AsyncMock(return_value=row)
    return cursor


class TestMigrationSystem:

    @pytest.fixture
    def mock_connection(self):
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=_cursor((0,)))
        transaction = MagicMock()
        transaction.__aenter__ = AsyncMock(return_value=None)
        transaction.__aexit__ = AsyncMock(return_value=None)
        conn.transaction = MagicMock(return_value=transaction)
        return conn

    @pytest.fixture
    def mock_get_connection(self, mock_connection):
        cm = MagicMock()
        cm.__aenter__ = AsyncMock(return_value=mock_connection)
        cm.__aexit__ = AsyncMock(return_value=None)
        with patch("chousei.db.migrations._get_connection", return_value=cm):
            yield cm

    @pytest.mark.asyncio
    async def test_get_current_version_creates_table(self, mock_get_connection, mock_connection):
        from chousei.db.migrations import get_current_version

        version = await get_current_version()

        create_call = mock_connection.execute.call_args_list[0]
        assert "CREATE TABLE IF NOT EXISTS schema_migrations" in create_call[0][0]
        assert version == 0

    @pytest.mark.asyncio
    async def test_get_current_version_returns_max(self, mock_get_connection, mock_connection):
        mock_connection.execute = AsyncMock(return_value=_cursor((5,)))
        from chousei.db.migrations import get_current_version

        assert await get_current_version() == 5

    @pytest.mark.asyncio
    async def test_apply_migration_skips_if_already_applied(self, mock_get_connection, mock_connection):
        mock_connection.execute = AsyncMock(return_value=_cursor((5,)))
        from chousei.db.migrations import apply_migration

        assert await apply_migration(3, "SELECT 1;", "test") is False
        mock_connection.transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_apply_migration_records_version(self, mock_get_connection, mock_connection):
        mock_connection.execute = AsyncMock(return_value=_cursor((2,)))
        from chousei.db.migrations import apply_migration

        assert await apply_migration(3, "CREATE TABLE t (id INT);", "t") is True
        statements = [c[0][0] for c in mock_connection.execute.call_args_list]
        assert "CREATE TABLE t (id INT);" in statements
        insert = mock_connection.execute.call_args_list[-1]
        assert "INSERT INTO schema_migrations" in insert[0][0]
        assert insert[0][1] == (3, "t")

    def test_migration_files_are_ordered(self):
        from chousei.db.migrations import list_migration_files

        files = list_migration_files()
        assert files[0]["version"] == 1
        assert files[0]["description"] == "initial"
        assert [f["version"] for f in files] == sorted(f["version"] for f in files)

    def test_initial_migration_creates_schedule_tables(self):
        from chousei.db.migrations import list_migration_files

        sql = list_migration_files()[0]["path"].read_text()
        assert "CREATE TABLE IF NOT EXISTS schedule_events" in sql
        assert "CREATE TABLE IF NOT EXISTS respondent_entries" in sql
