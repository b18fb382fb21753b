"""Exception types raised by the catalog client, store and services."""

from __future__ import annotations

__all__ = [
    "AccountResolutionError",
    "CatalogError",
    "DetailFetchError",
    "GamesInCommonError",
    "OperationCancelled",
    "StoreUnavailableError",
]


class GamesInCommonError(Exception):
    """Base class for all application errors."""


class CatalogError(GamesInCommonError):
    """A Steam API call failed or returned unusable data."""


class DetailFetchError(CatalogError):
    """A game's detail payload could not be fetched (not a throttle)."""

    def __init__(self, app_id: int, reason: str) -> None:
        super().__init__(f"Detail fetch failed for app {app_id}: {reason}")
        self.app_id = app_id
        self.reason = reason


class AccountResolutionError(CatalogError):
    """Neither the vanity name nor a numeric SteamID matched an account."""


class StoreUnavailableError(GamesInCommonError):
    """The filter cache database could not be opened or initialized."""


class OperationCancelled(GamesInCommonError):
    """Raised at a cancellation checkpoint inside a worker task."""
