# gamesincommon/services/common_games_service.py

"""Fan-out/fan-in coordination of the common games search.

The search runs in two phases:

1. Library fetch: one worker per account loads the owned games in
   parallel. An account whose library cannot be loaded is left out of
   the comparison and reported as a warning.
2. Filter check: the intersection of all libraries is checked against
   the requested filter kinds. Games are queued one task each on a
   single worker, because they share one outbound rate budget and one
   cache connection.

Completed tasks are collected by the calling thread only, so no result
collection is shared between workers. Each phase returns an Outcome;
cancellation via cancel() yields a CANCELLED outcome, never a partial
answer.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Collection, Iterable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path

import requests

from gamesincommon.core.db import FilterStore
from gamesincommon.core.errors import CatalogError, OperationCancelled, StoreUnavailableError
from gamesincommon.core.filter_kind import FilterKind
from gamesincommon.core.game import Account, Game
from gamesincommon.core.outcome import Outcome
from gamesincommon.integrations.catalog_client import CatalogClient
from gamesincommon.services.filter_resolver import FilterResolver
from gamesincommon.services.rate_limited_fetcher import DEFAULT_BACKOFF_SECONDS, RateLimitedFetcher
from gamesincommon.services.set_merger import intersect

logger = logging.getLogger("gamesincommon.common_games_service")

__all__ = ["CommonGamesService"]

# The cache connection and the store endpoint are used by one task at a time.
_FILTER_WORKERS = 1


class CommonGamesService:
    """Finds the games that a group of accounts own in common.

    Args:
        client: Catalog backend for libraries and detail payloads.
        db_path: SQLite file of the filter cache.
        backoff_seconds: Wait after a throttle response.
        force_web_check: Re-scan every game even if it is cached.
        poll_interval: How often a waiting phase checks for cancellation.
    """

    def __init__(
        self,
        client: CatalogClient,
        db_path: Path,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        force_web_check: bool = False,
        poll_interval: float = 0.1,
    ) -> None:
        self._client = client
        self._db_path = db_path
        self.backoff_seconds = backoff_seconds
        self.force_web_check = force_web_check
        self._poll_interval = poll_interval
        self._cancel_event = threading.Event()

    def require_web_check(self, required: bool) -> None:
        """Enables or disables forced web checking for later filter runs.

        Args:
            required: Whether cached filter data must be ignored.
        """
        self.force_web_check = required

    def cancel(self) -> None:
        """Requests cancellation of the running search."""
        self._cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def find_common_games(
        self,
        accounts: list[Account],
        requested: Iterable[FilterKind] = (),
    ) -> Outcome[frozenset[Game]]:
        """Runs library fetch, intersection and filter check.

        Args:
            accounts: Accounts to compare.
            requested: Filter kinds every returned game must have.

        Returns:
            The common games that match all requested filters. FAILED if
            no library could be loaded or the cache is unavailable.
        """
        self._cancel_event.clear()

        fetched = self.fetch_all(accounts)
        if not fetched.ok:
            return Outcome(fetched.status, error=fetched.error, warnings=fetched.warnings)

        common = intersect(fetched.value)
        if common is None:
            return Outcome.failed("No game libraries could be loaded", fetched.warnings)
        logger.info("Search complete: %d game(s) in common", len(common))

        filtered = self.filter_all(common, requested)
        return Outcome(
            filtered.status,
            value=filtered.value,
            error=filtered.error,
            warnings=fetched.warnings + filtered.warnings,
        )

    def fetch_all(self, accounts: list[Account]) -> Outcome[list[frozenset[Game]]]:
        """Loads the libraries of all accounts in parallel.

        Args:
            accounts: Accounts whose libraries are loaded.

        Returns:
            One game set per successfully loaded account. Accounts that
            failed are named in the warnings.
        """
        if not accounts:
            return Outcome.succeeded([])

        libraries: list[frozenset[Game]] = []
        warnings: list[str] = []

        executor = ThreadPoolExecutor(max_workers=len(accounts), thread_name_prefix="library-fetch")
        futures = {executor.submit(self._client.get_owned_games, account): account for account in accounts}
        try:
            for future in self._iter_completed(futures):
                account = futures[future]
                try:
                    games = future.result()
                except (CatalogError, requests.RequestException) as e:
                    logger.error("Could not load games of %s: %s", account, e)
                    warnings.append(f"Games of {account} could not be loaded; account excluded from the comparison")
                    continue
                except Exception:
                    logger.exception("Unexpected error loading games of %s", account)
                    warnings.append(f"Games of {account} could not be loaded; account excluded from the comparison")
                    continue

                libraries.append(frozenset(games))
                logger.info("Added user %s with %d game(s)", account, len(games))
        except OperationCancelled:
            logger.info("Cancelled.")
            return Outcome.cancelled(warnings)
        except KeyboardInterrupt:
            self.cancel()
            raise
        finally:
            # Library requests hold no shared resource, so do not wait for stragglers.
            executor.shutdown(wait=False, cancel_futures=True)

        return Outcome.succeeded(libraries, warnings)

    def filter_all(
        self,
        games: Collection[Game],
        requested: Iterable[FilterKind],
    ) -> Outcome[frozenset[Game]]:
        """Keeps the games that exhibit every requested filter kind.

        Args:
            games: Candidate games.
            requested: Filter kinds every returned game must have.

        Returns:
            The matching games. Games whose filters could not be
            determined are excluded and named in the warnings. FAILED if
            the filter cache cannot be opened.
        """
        requested = frozenset(requested)
        if not requested or not games:
            return Outcome.succeeded(frozenset(games))

        try:
            store = FilterStore(self._db_path)
        except StoreUnavailableError as e:
            return Outcome.failed(str(e))

        fetcher = RateLimitedFetcher(self._client, self._cancel_event, self.backoff_seconds)
        resolver = FilterResolver(store, fetcher)

        matched: set[Game] = set()
        warnings: list[str] = []

        executor = ThreadPoolExecutor(max_workers=_FILTER_WORKERS, thread_name_prefix="filter-check")
        futures = {
            executor.submit(resolver.matches, game, requested, self.force_web_check): game for game in games
        }
        try:
            for future in self._iter_completed(futures):
                game = futures[future]
                try:
                    is_match = future.result()
                except OperationCancelled:
                    continue
                except sqlite3.Error as e:
                    logger.error("Filter cache error for game '%s': %s", game, e)
                    is_match = None
                except Exception:
                    logger.exception("Unexpected error checking game '%s'", game)
                    is_match = None

                if is_match is None:
                    warnings.append(f"Filters of '{game}' could not be checked; game excluded")
                elif is_match:
                    matched.add(game)
        except OperationCancelled:
            logger.info("Cancelled.")
            return Outcome.cancelled(warnings)
        except KeyboardInterrupt:
            self.cancel()
            raise
        finally:
            # The running task stops at its next checkpoint; wait so the store can be closed.
            executor.shutdown(wait=True, cancel_futures=True)
            store.close()

        logger.info("%d of %d game(s) match the requested filters", len(matched), len(games))
        return Outcome.succeeded(frozenset(matched), warnings)

    def _iter_completed(self, futures: Collection[Future]) -> Iterator[Future]:
        """Yields futures as they complete, watching for cancellation.

        Args:
            futures: Submitted tasks of the current phase.

        Yields:
            Each completed future once.

        Raises:
            OperationCancelled: As soon as cancel() has been called.
        """
        pending = set(futures)
        while pending:
            if self._cancel_event.is_set():
                raise OperationCancelled()
            done, pending = wait(pending, timeout=self._poll_interval, return_when=FIRST_COMPLETED)
            yield from done
        if self._cancel_event.is_set():
            raise OperationCancelled()
