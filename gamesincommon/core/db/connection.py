"""Database connection management.

Handles SQLite connection setup, PRAGMA configuration, the lock that
serializes access to the shared connection, and context manager
protocol.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from gamesincommon.core.errors import StoreUnavailableError

logger = logging.getLogger("gamesincommon.database")

__all__ = ["ConnectionBase"]


class ConnectionBase:
    """Base class providing SQLite connection setup and lifecycle.

    The connection is opened with ``check_same_thread=False`` because the
    filter phase reads and writes it from a worker thread. Every query
    method must hold ``lock`` while it touches ``conn``.

    Calls _ensure_schema() which is provided by SchemaMixin via
    multiple inheritance.
    """

    SCHEMA_VERSION = 1

    conn: sqlite3.Connection
    db_path: Path
    lock: threading.RLock

    def __init__(self, db_path: Path) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file.

        Raises:
            StoreUnavailableError: If the file cannot be opened or the
                schema cannot be created.
        """
        self.db_path = db_path
        self.lock = threading.RLock()

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        except (OSError, sqlite3.Error) as e:
            logger.error("Cannot open filter database %s: %s", db_path, e)
            raise StoreUnavailableError(f"Cannot open filter database {db_path}: {e}") from e

        try:
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA foreign_keys = ON")
            self.conn.execute("PRAGMA journal_mode = WAL")
            self._ensure_schema()
        except sqlite3.Error as e:
            self.conn.close()
            logger.error("Cannot initialize filter database %s: %s", db_path, e)
            raise StoreUnavailableError(f"Cannot initialize filter database {db_path}: {e}") from e

    def commit(self) -> None:
        """Commit current transaction."""
        with self.lock:
            self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        with self.lock:
            self.conn.close()

    def __enter__(self) -> ConnectionBase:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.commit()
        self.close()
