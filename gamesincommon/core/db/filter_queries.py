"""Seen-marker and game-filter association queries.

A row in ``games`` is the seen marker: the game's detail payload was
scanned at least once. Its ``gamefilters`` rows are the filter kinds
found in that scan, possibly none.
"""

from __future__ import annotations

import logging
import time

from gamesincommon.core.filter_kind import FilterKind
from gamesincommon.core.game import Game

logger = logging.getLogger("gamesincommon.database")

__all__ = ["FilterQueryMixin"]


class FilterQueryMixin:
    """Mixin providing the cache read and write used by FilterResolver.

    Requires ConnectionBase attributes: conn, lock.
    """

    def is_seen(self, app_id: int) -> bool:
        """Checks whether a game has been scanned before.

        Args:
            app_id: Steam app ID.

        Returns:
            True if the game has a seen marker.
        """
        with self.lock:
            cursor = self.conn.execute("SELECT 1 FROM games WHERE id = ?", (app_id,))
            return cursor.fetchone() is not None

    def get_cached_filters(self, app_id: int) -> frozenset[FilterKind] | None:
        """Reads the seen marker and the associations of a game.

        Args:
            app_id: Steam app ID.

        Returns:
            The stored filter kinds (possibly empty) if the game has been
            seen, None if it was never checked.
        """
        with self.lock:
            if self.conn.execute("SELECT 1 FROM games WHERE id = ?", (app_id,)).fetchone() is None:
                return None
            rows = self.conn.execute(
                """
                SELECT f.id FROM gamefilters gf
                JOIN filters f ON gf.filter_id = f.id
                WHERE gf.game_id = ?
                """,
                (app_id,),
            ).fetchall()

        kinds: set[FilterKind] = set()
        for row in rows:
            try:
                kinds.add(FilterKind.from_ordinal(row[0]))
            except ValueError:
                logger.warning("Ignoring unknown filter id %d stored for app %d", row[0], app_id)
        return frozenset(kinds)

    def record_filters(self, game: Game, kinds: frozenset[FilterKind] | set[FilterKind]) -> None:
        """Stores the scan result of a game, replacing earlier associations.

        The seen marker, the removal of old associations and the insert
        of the new ones happen in one transaction.

        Args:
            game: The scanned game.
            kinds: Filter kinds found in its payload.
        """
        checked_at = int(time.time())
        with self.lock, self.conn:
            self.conn.execute(
                "INSERT OR IGNORE INTO games (id, name, checked_at) VALUES (?, ?, ?)",
                (game.app_id, game.name, checked_at),
            )
            self.conn.execute(
                "UPDATE games SET name = ?, checked_at = ? WHERE id = ?",
                (game.name, checked_at, game.app_id),
            )
            self.conn.execute("DELETE FROM gamefilters WHERE game_id = ?", (game.app_id,))
            self.conn.executemany(
                "INSERT OR IGNORE INTO gamefilters (filter_id, game_id) VALUES (?, ?)",
                [(kind.ordinal, game.app_id) for kind in kinds],
            )
        logger.debug("Stored %d filter(s) for app %d", len(kinds), game.app_id)

    def get_checked_count(self) -> int:
        """Number of games with a seen marker.

        Returns:
            Row count of the ``games`` table.
        """
        with self.lock:
            return self.conn.execute("SELECT COUNT(*) FROM games").fetchone()[0]
