"""Tests for database layer functionality."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from task_board.task_management.database import TaskDatabase
from task_board.task_management.exceptions import DatabaseError, PersistenceError


@pytest.fixture
async def database() -> AsyncGenerator[TaskDatabase]:
    """Create in-memory database for testing."""
    db = TaskDatabase(":memory:", wal_mode=False)
    await db.initialize()
    yield db
    await db.close()


@pytest.mark.unit
class TestDatabaseSchemaCreation:
    """Test cases for database schema creation and initialization."""

    @pytest.mark.asyncio
    async def test_schema_creation_creates_kv_table(self, database: TaskDatabase) -> None:
        """Test that schema creation creates the key-value table."""
        async with database._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='kv_store'"
            )
            result = await cursor.fetchone()
            assert result is not None
            assert result[0] == "kv_store"

    @pytest.mark.asyncio
    async def test_schema_version_tracking(self, database: TaskDatabase) -> None:
        """Test that schema version is tracked."""
        assert await database.get_schema_version() == 1

    @pytest.mark.asyncio
    async def test_initialize_twice_is_safe(self, database: TaskDatabase) -> None:
        """Test that re-initializing keeps schema and data."""
        await database.write("tasks", "[]")

        await database.initialize()

        assert await database.get_schema_version() == 1
        assert await database.read("tasks") == "[]"


@pytest.mark.unit
class TestDatabaseConnectionManagement:
    """Test cases for database connection management."""

    @pytest.mark.asyncio
    async def test_database_initialization(self, database: TaskDatabase) -> None:
        """Test database can be initialized."""
        assert database._connection is not None

    @pytest.mark.asyncio
    async def test_close_connection(self) -> None:
        """Test database connection can be closed."""
        db = TaskDatabase(":memory:")
        await db.initialize()
        await db.close()

        assert db._connection is None

    @pytest.mark.asyncio
    async def test_close_without_initialize(self) -> None:
        """Test closing an unopened database is a no-op."""
        db = TaskDatabase(":memory:")
        await db.close()

        assert db._connection is None

    @pytest.mark.asyncio
    async def test_operations_require_initialization(self) -> None:
        """Test that using an unopened database raises DatabaseError."""
        db = TaskDatabase(":memory:")

        with pytest.raises(DatabaseError, match="not initialized"):
            await db.read("tasks")
        with pytest.raises(DatabaseError, match="not initialized"):
            await db.write("tasks", "[]")

    @pytest.mark.asyncio
    async def test_database_error_is_persistence_error(self) -> None:
        """Test that database failures can be caught as PersistenceError."""
        db = TaskDatabase(":memory:")

        with pytest.raises(PersistenceError):
            await db.delete("tasks")


@pytest.mark.unit
class TestKeyValueOperations:
    """Test cases for reading and writing slots."""

    @pytest.mark.asyncio
    async def test_read_missing_key_returns_none(self, database: TaskDatabase) -> None:
        """Test that an absent key reads as None."""
        assert await database.read("tasks") is None

    @pytest.mark.asyncio
    async def test_write_then_read(self, database: TaskDatabase) -> None:
        """Test storing a value under a key."""
        await database.write("tasks", '[{"id": "1"}]')

        assert await database.read("tasks") == '[{"id": "1"}]'

    @pytest.mark.asyncio
    async def test_write_replaces_value(self, database: TaskDatabase) -> None:
        """Test that writes replace the whole slot."""
        await database.write("tasks", "[1]")
        await database.write("tasks", "[2]")

        assert await database.read("tasks") == "[2]"

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, database: TaskDatabase) -> None:
        """Test that slots do not overwrite each other."""
        await database.write("tasks", "[]")
        await database.write("tasks.corrupt", "garbage")

        assert await database.read("tasks") == "[]"
        assert await database.read("tasks.corrupt") == "garbage"

    @pytest.mark.asyncio
    async def test_delete_key(self, database: TaskDatabase) -> None:
        """Test removing a key."""
        await database.write("tasks", "[]")
        await database.delete("tasks")

        assert await database.read("tasks") is None

    @pytest.mark.asyncio
    async def test_delete_missing_key_is_noop(self, database: TaskDatabase) -> None:
        """Test that deleting an absent key does not raise."""
        await database.delete("missing")

        assert await database.read("missing") is None


@pytest.mark.integration
class TestFileDatabase:
    """Test cases for file-backed databases."""

    @pytest.mark.asyncio
    async def test_values_survive_reopen(self, tmp_path: Path) -> None:
        """Test that committed writes are durable across connections."""
        path = str(tmp_path / "tasks.db")

        db = TaskDatabase(path)
        await db.initialize()
        await db.write("tasks", '["persisted"]')
        await db.close()

        reopened = TaskDatabase(path)
        await reopened.initialize()
        try:
            assert await reopened.read("tasks") == '["persisted"]'
        finally:
            await reopened.close()

    @pytest.mark.asyncio
    async def test_parent_directories_are_created(self, tmp_path: Path) -> None:
        """Test that a database path in a new directory is created."""
        path = tmp_path / "nested" / "dir" / "tasks.db"

        db = TaskDatabase(str(path))
        await db.initialize()
        await db.close()

        assert path.exists()

    @pytest.mark.asyncio
    async def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        """Test that WAL journaling is enabled for file databases."""
        db = TaskDatabase(str(tmp_path / "tasks.db"), wal_mode=True)
        await db.initialize()

        async with db._get_connection() as conn:
            cursor = await conn.execute("PRAGMA journal_mode")
            result = await cursor.fetchone()
            assert result[0] == "wal"

        await db.close()

    @pytest.mark.asyncio
    async def test_unopenable_path_raises_database_error(self, tmp_path: Path) -> None:
        """Test that a path that cannot hold a database raises DatabaseError."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        db = TaskDatabase(str(blocker / "tasks.db"))

        with pytest.raises(DatabaseError):
            await db.initialize()
        assert db._connection is None
