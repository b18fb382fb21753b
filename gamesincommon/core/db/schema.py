"""Database schema creation and filter seeding.

Creates the three cache tables on first open and seeds one ``filters``
row per FilterKind on every open. All inserts ignore conflicts, so
opening the same file repeatedly is idempotent.
"""

from __future__ import annotations

import logging
import sqlite3
import time

from gamesincommon.core.filter_kind import FilterKind

logger = logging.getLogger("gamesincommon.database")

__all__ = ["SchemaMixin"]

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at INTEGER NOT NULL,
    description TEXT
);

CREATE TABLE IF NOT EXISTS games (
    id INTEGER NOT NULL,
    name TEXT,
    checked_at INTEGER,
    PRIMARY KEY (id) ON CONFLICT IGNORE
);

CREATE TABLE IF NOT EXISTS filters (
    id INTEGER NOT NULL,
    keyword TEXT,
    PRIMARY KEY (id) ON CONFLICT IGNORE
);

CREATE TABLE IF NOT EXISTS gamefilters (
    filter_id INTEGER NOT NULL,
    game_id INTEGER NOT NULL,
    PRIMARY KEY (filter_id, game_id) ON CONFLICT IGNORE,
    FOREIGN KEY (game_id) REFERENCES games(id),
    FOREIGN KEY (filter_id) REFERENCES filters(id)
);

CREATE INDEX IF NOT EXISTS idx_gamefilters_game ON gamefilters(game_id);
"""


class SchemaMixin:
    """Mixin providing schema creation and filter seeding.

    Requires ConnectionBase attributes: conn, SCHEMA_VERSION.
    """

    def _ensure_schema(self) -> None:
        """Create the schema if missing, then seed the filter rows."""
        if self._get_schema_version() == 0:
            self._create_schema()
            self._set_schema_version(self.SCHEMA_VERSION)
        self._seed_filters()

    def _get_schema_version(self) -> int:
        """Get current database schema version."""
        try:
            cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
            result = cursor.fetchone()
            return result[0] if result[0] is not None else 0
        except sqlite3.OperationalError:
            return 0

    def _set_schema_version(self, version: int) -> None:
        """Set database schema version."""
        self.conn.execute(
            """
            INSERT OR REPLACE INTO schema_version (version, applied_at, description)
            VALUES (?, ?, ?)
            """,
            (version, int(time.time()), "filter cache schema"),
        )
        self.conn.commit()

    def _create_schema(self) -> None:
        """Create the cache tables."""
        self.conn.executescript(_SCHEMA_SQL)
        self.conn.commit()
        logger.info("New filter database created at %s", self.db_path)

    def _seed_filters(self) -> None:
        """Insert one row per FilterKind; existing rows are left alone."""
        self.conn.executemany(
            "INSERT OR IGNORE INTO filters (id, keyword) VALUES (?, ?)",
            [(kind.ordinal, kind.keyword) for kind in FilterKind],
        )
        self.conn.commit()
        logger.debug("Seeded %d filter kinds", len(FilterKind))
