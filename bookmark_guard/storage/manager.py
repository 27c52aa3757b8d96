"""
Storage manager for Bookmark Guard.

This module persists the guard state (lock flag and snapshot) in a DuckDB
key-value table.
"""

import duckdb
import hashlib
import json
import logging
from typing import Any, Dict, Iterable, Optional
from datetime import datetime

from ..errors import StorageError
from .base import BaseStore


class StorageManager(BaseStore):
    """
    Manages the DuckDB database holding the persisted guard state.
    """

    def __init__(self, db_path: str = "bookmark_guard.duckdb", table: str = "guard_state"):
        """
        Initialize the storage manager.

        Args:
            db_path: Path to the DuckDB database file (":memory:" for a scratch store)
            table: Name of the key-value table
        """
        if not table.isidentifier():
            raise ValueError(f"Invalid table name: {table!r}")
        self.db_path = db_path
        self.table = table
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        try:
            self.connection = duckdb.connect(self.db_path)
        except duckdb.Error as e:
            raise StorageError(f"Could not open state database {self.db_path}: {e}")

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        self.initialize_database()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def _require_connection(self):
        if not self.connection:
            raise StorageError("Database connection not established")
        return self.connection

    def initialize_database(self):
        """
        Create the key-value table if it doesn't exist.
        """
        connection = self._require_connection()
        try:
            connection.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    key VARCHAR PRIMARY KEY,
                    value VARCHAR NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
        except duckdb.Error as e:
            raise StorageError(f"Could not initialize state table: {e}")

    async def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key in keys:
            raw = self.get_raw(key)
            if raw is None:
                continue
            try:
                result[key] = json.loads(raw)
            except json.JSONDecodeError as e:
                raise StorageError(f"Stored value for {key!r} is not valid JSON: {e}")
        return result

    async def set(self, mapping: Dict[str, Any]) -> None:
        connection = self._require_connection()
        try:
            rows = [[key, json.dumps(value, ensure_ascii=False), datetime.now()]
                    for key, value in mapping.items()]
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value is not JSON serializable: {e}")

        try:
            connection.begin()
        except duckdb.Error as e:
            raise StorageError(f"Could not start a transaction: {e}")

        try:
            for row in rows:
                connection.execute(f"""
                    INSERT OR REPLACE INTO {self.table} (key, value, updated_at)
                    VALUES (?, ?, ?)
                """, row)
            connection.commit()
        except duckdb.Error as e:
            connection.rollback()
            raise StorageError(f"Could not write keys {sorted(mapping)}: {e}")

        logging.debug(f"Stored keys: {', '.join(sorted(mapping))}")

    def get_raw(self, key: str) -> Optional[str]:
        """
        Return the stored JSON text for key.

        Args:
            key: The key to read

        Returns:
            The JSON text, or None if the key was never written
        """
        connection = self._require_connection()
        try:
            row = connection.execute(f"""
                SELECT value FROM {self.table} WHERE key = ?
            """, [key]).fetchone()
        except duckdb.Error as e:
            raise StorageError(f"Could not read key {key!r}: {e}")
        return row[0] if row else None

    def content_hash(self, key: str) -> Optional[str]:
        """
        Calculate SHA-256 hash of a stored value's JSON text.

        Returns:
            The SHA-256 hash as a hex string, or None if the key is absent
        """
        raw = self.get_raw(key)
        if raw is None:
            return None
        return hashlib.sha256(raw.encode('utf-8')).hexdigest()
