"""Database layer for task storage using SQLite."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

import aiosqlite

from task_board.task_management.config import SCHEMA_VERSION
from task_board.task_management.exceptions import DatabaseError, SchemaError
from task_board.task_management.interfaces import KeyValueStorage

logger = logging.getLogger(__name__)


class TaskDatabase(KeyValueStorage):
    """SQLite key-value store holding the serialized task list."""

    def __init__(self, db_path: str, wal_mode: bool = True) -> None:
        """
        Initialize database settings.

        Args:
            db_path: Path to SQLite database file (use ":memory:" for in-memory)
            wal_mode: Enable WAL mode for crash-safe writes
        """
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Initialize database schema and connection."""
        if self._connection is None:
            try:
                if self.db_path != ":memory:":
                    parent = os.path.dirname(os.path.abspath(self.db_path))
                    os.makedirs(parent, exist_ok=True)

                self._connection = await aiosqlite.connect(self.db_path)
                self._connection.row_factory = aiosqlite.Row

                # WAL mode is not supported in :memory:
                if self.wal_mode and self.db_path != ":memory:":
                    await self._connection.execute("PRAGMA journal_mode=WAL")
            except (OSError, aiosqlite.Error) as e:
                await self.close()
                raise DatabaseError(
                    f"Failed to open database {self.db_path}: {e}"
                ) from e

            logger.debug(f"Opened task database at {self.db_path}")

        # Create schema if not exists
        await self._create_schema()

    async def _create_schema(self) -> None:
        """Create database schema and apply pending migrations."""
        try:
            async with self._get_connection() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS schema_version (
                        version INTEGER PRIMARY KEY,
                        applied_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
                    )
                    """
                )

                current_version = await self.get_schema_version()

                if current_version < SCHEMA_VERSION:
                    await self._apply_migrations(conn, current_version)

                await conn.commit()
        except aiosqlite.Error as e:
            raise SchemaError(f"Failed to create database schema: {e}") from e

    async def _apply_migrations(
        self, conn: aiosqlite.Connection, from_version: int
    ) -> None:
        """
        Apply database migrations.

        Args:
            conn: Database connection
            from_version: Current schema version
        """
        if from_version < 1:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
                """
            )

        await conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
        logger.info(f"Migrated task database schema {from_version} -> {SCHEMA_VERSION}")

    @asynccontextmanager
    async def _get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Get database connection context manager.

        Yields:
            Database connection

        Raises:
            DatabaseError: If connection is not initialized
        """
        if self._connection is None:
            raise DatabaseError("Database not initialized")
        yield self._connection

    async def get_schema_version(self) -> int:
        """
        Get current schema version.

        Returns:
            Schema version number
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute("SELECT MAX(version) FROM schema_version")
            result = await cursor.fetchone()
            return result[0] if result and result[0] else 0

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def read(self, key: str) -> str | None:
        """
        Read the value stored under a key.

        Args:
            key: Slot name

        Returns:
            Stored text, or None if the key is absent

        Raises:
            DatabaseError: If the read fails
        """
        async with self._get_connection() as conn:
            try:
                cursor = await conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
            except aiosqlite.Error as e:
                raise DatabaseError(f"Failed to read {key!r}: {e}") from e

            return row["value"] if row is not None else None

    async def write(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key and commit.

        Args:
            key: Slot name
            value: Text to store

        Raises:
            DatabaseError: If the write fails (the transaction is rolled back)
        """
        async with self._get_connection() as conn:
            try:
                await conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, datetime.now().isoformat()),
                )
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                raise DatabaseError(f"Failed to write {key!r}: {e}") from e

    async def delete(self, key: str) -> None:
        """
        Remove a key.

        Args:
            key: Slot name

        Raises:
            DatabaseError: If the delete fails
        """
        async with self._get_connection() as conn:
            try:
                await conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                await conn.commit()
            except aiosqlite.Error as e:
                await conn.rollback()
                raise DatabaseError(f"Failed to delete {key!r}: {e}") from e
