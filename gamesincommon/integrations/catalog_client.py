"""Abstract interface to the game-distribution service.

The services only talk to the store through this class, so tests and
alternative backends can substitute their own implementation. It
carries no business logic: transport and minimal parsing only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import requests

from gamesincommon.core.game import Account, Game

__all__ = ["CatalogClient"]


class CatalogClient(ABC):
    """Abstract base class for catalog backends."""

    @abstractmethod
    def get_owned_games(self, account: Account) -> frozenset[Game]:
        """Fetch every game owned by an account.

        Args:
            account: The account whose library is requested.

        Returns:
            The owned games, keyed by app id.

        Raises:
            CatalogError: If the library cannot be retrieved.
        """

    @abstractmethod
    def open_app_details(self, app_id: int) -> requests.Response:
        """Open a streaming response for a game's detail payload.

        The response is returned as-is, including throttle responses, so
        the caller can decide whether to retry. The caller closes it.

        Args:
            app_id: Steam app ID.

        Returns:
            The unread streaming response.

        Raises:
            requests.RequestException: On connection failure.
        """

    @abstractmethod
    def resolve_vanity_url(self, name: str) -> int | None:
        """Resolve a custom profile name to a SteamID64.

        Args:
            name: Vanity name as typed by the user.

        Returns:
            The SteamID64, or None if no profile uses this name.

        Raises:
            CatalogError: If the lookup itself fails.
        """

    @abstractmethod
    def get_persona_name(self, steam_id: int) -> str | None:
        """Look up the public display name of an account.

        Args:
            steam_id: 64-bit SteamID.

        Returns:
            The persona name, or None if the account does not exist.

        Raises:
            CatalogError: If the lookup itself fails.
        """
