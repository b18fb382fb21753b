# gamesincommon/services/filter_resolver.py

"""Per-game filter resolution with cache-before-fetch.

A game's filter kinds are read from the FilterStore when the game has
been checked before. Otherwise, or when a refresh is forced, the detail
payload is downloaded and scanned, and the result replaces whatever the
store held for that game.

The store lock is held only for the cache read and for the cache write.
The download, including any throttle backoff, runs without it.
"""

from __future__ import annotations

import logging

from gamesincommon.core.db import FilterStore
from gamesincommon.core.errors import DetailFetchError
from gamesincommon.core.filter_kind import FilterKind
from gamesincommon.core.game import Game
from gamesincommon.services.rate_limited_fetcher import RateLimitedFetcher

logger = logging.getLogger("gamesincommon.filter_resolver")

__all__ = ["FilterResolver", "scan_payload"]


def scan_payload(payload: bytes) -> frozenset[FilterKind]:
    """Finds the filter kinds whose quoted keyword occurs in a payload.

    Args:
        payload: Raw detail response body.

    Returns:
        Every FilterKind whose ``"keyword"`` token is present.
    """
    text = payload.decode("utf-8", errors="replace")
    return frozenset(kind for kind in FilterKind if kind.quoted in text)


class FilterResolver:
    """Resolves the filter kinds of single games.

    Args:
        store: Open filter cache shared by all resolutions of a run.
        fetcher: Throttle-aware detail fetcher.
    """

    def __init__(self, store: FilterStore, fetcher: RateLimitedFetcher) -> None:
        self._store = store
        self._fetcher = fetcher

    def resolve(self, game: Game, force_refresh: bool = False) -> frozenset[FilterKind] | None:
        """Determines which filter kinds a game exhibits.

        Args:
            game: The game to check.
            force_refresh: Ignore the cache and re-scan the payload.

        Returns:
            The filter kinds of the game (possibly empty), or None if its
            payload could not be fetched.

        Raises:
            OperationCancelled: If the run is cancelled during the fetch.
        """
        if not force_refresh:
            cached = self._store.get_cached_filters(game.app_id)
            if cached is not None:
                logger.info("[SQL] Checked game '%s'", game)
                return cached

        try:
            payload = self._fetcher.fetch_detail(game)
        except DetailFetchError as e:
            logger.error("Could not check game '%s': %s", game, e)
            return None

        found = scan_payload(payload)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "[WEB] Game '%s': %s",
                game,
                ", ".join(kind.keyword for kind in sorted(found, key=lambda k: k.ordinal)) or "no filters",
            )

        self._store.record_filters(game, found)
        logger.info("[WEB] Checked game '%s'", game)
        return found

    def matches(self, game: Game, requested: frozenset[FilterKind], force_refresh: bool = False) -> bool | None:
        """Checks whether a game exhibits every requested filter kind.

        Args:
            game: The game to check.
            requested: Filter kinds the game must all have.
            force_refresh: Ignore the cache and re-scan the payload.

        Returns:
            True or False, or None if the game could not be resolved.
        """
        found = self.resolve(game, force_refresh)
        if found is None:
            return None
        return requested <= found
