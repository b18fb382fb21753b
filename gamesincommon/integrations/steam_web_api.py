"""Steam Web API client.

Implements CatalogClient on top of the public Steam endpoints:
IPlayerService/GetOwnedGames for libraries, ISteamUser for account
lookups and the store ``appdetails`` endpoint for detail payloads.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from gamesincommon.core.errors import CatalogError
from gamesincommon.core.game import Account, Game
from gamesincommon.integrations.catalog_client import CatalogClient

logger = logging.getLogger("gamesincommon.steam_web_api")

__all__ = ["SteamWebAPI"]

_OWNED_GAMES_URL = "https://api.steampowered.com/IPlayerService/GetOwnedGames/v1/"
_RESOLVE_VANITY_URL = "https://api.steampowered.com/ISteamUser/ResolveVanityURL/v1/"
_PLAYER_SUMMARIES_URL = "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v2/"
_APP_DETAILS_URL = "https://store.steampowered.com/api/appdetails"


class SteamWebAPI(CatalogClient):
    """Steam implementation of CatalogClient.

    Attributes:
        api_key: Steam Web API key for authentication.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, api_key: str, timeout: float = 30.0) -> None:
        """Initializes the SteamWebAPI client.

        Args:
            api_key: Steam Web API key. Must not be empty.
            timeout: Per-request timeout in seconds.

        Raises:
            ValueError: If api_key is empty or whitespace-only.
        """
        if not api_key or not api_key.strip():
            raise ValueError("Steam API key must not be empty")
        self.api_key: str = api_key.strip()
        self.timeout = timeout
        self._session = requests.Session()

    def _call_api(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """Makes a Steam Web API GET request.

        Args:
            url: Full API endpoint URL.
            params: Query parameters; the API key is added here.

        Returns:
            Parsed JSON response dict.

        Raises:
            CatalogError: On network failure, HTTP error or invalid JSON.
        """
        endpoint_name = url.rstrip("/").rsplit("/", 2)[-2]
        try:
            response = self._session.get(url, params={**params, "key": self.api_key}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            # Sanitize error message to avoid leaking the API key in logs
            status = e.response.status_code if e.response is not None else "?"
            raise CatalogError(f"{endpoint_name} failed: HTTP {status}") from e
        except (requests.RequestException, ValueError) as e:
            raise CatalogError(f"{endpoint_name} failed: {type(e).__name__}") from e

        if not isinstance(data, dict):
            raise CatalogError(f"{endpoint_name} returned unexpected payload")
        return data

    def get_owned_games(self, account: Account) -> frozenset[Game]:
        """Fetches owned games via IPlayerService/GetOwnedGames.

        Free games the account has played are included.

        Args:
            account: The account whose library is requested.

        Returns:
            Owned games. Empty if the library is public but empty.

        Raises:
            CatalogError: On API failure or when the profile is private
                (Steam answers with an empty ``response`` object).
        """
        data = self._call_api(
            _OWNED_GAMES_URL,
            {
                "steamid": account.steam_id,
                "include_appinfo": 1,
                "include_played_free_games": 1,
                "format": "json",
            },
        )
        body = data.get("response", {})
        if "game_count" not in body:
            raise CatalogError(f"Library of {account} is not visible (private profile?)")

        games = frozenset(self._parse_game(raw) for raw in body.get("games", []) if raw.get("appid"))
        logger.debug("Loaded %d games for %s", len(games), account)
        return games

    def open_app_details(self, app_id: int) -> requests.Response:
        """Opens a streaming request to the store ``appdetails`` endpoint.

        Args:
            app_id: Steam app ID.

        Returns:
            The unread response; status is not checked here.
        """
        return self._session.get(
            _APP_DETAILS_URL,
            params={"appids": app_id},
            stream=True,
            timeout=self.timeout,
        )

    def resolve_vanity_url(self, name: str) -> int | None:
        """Resolves a vanity name through ISteamUser/ResolveVanityURL.

        Args:
            name: Custom profile name.

        Returns:
            The SteamID64, or None when Steam reports no match.
        """
        data = self._call_api(_RESOLVE_VANITY_URL, {"vanityurl": name})
        body = data.get("response", {})
        if body.get("success") != 1:
            logger.debug("No profile with vanity name '%s'", name)
            return None
        try:
            return int(body["steamid"])
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"ResolveVanityURL returned no steamid for '{name}'") from e

    def get_persona_name(self, steam_id: int) -> str | None:
        """Reads the persona name through ISteamUser/GetPlayerSummaries.

        Args:
            steam_id: 64-bit SteamID.

        Returns:
            The persona name, or None if the account is unknown.
        """
        data = self._call_api(_PLAYER_SUMMARIES_URL, {"steamids": steam_id})
        players = data.get("response", {}).get("players", [])
        if not players:
            return None
        return players[0].get("personaname") or None

    @staticmethod
    def _parse_game(raw: dict[str, Any]) -> Game:
        """Parses one entry of the GetOwnedGames ``games`` list.

        Args:
            raw: Game dict from the API response.

        Returns:
            The Game value.
        """
        app_id = int(raw["appid"])
        return Game(app_id=app_id, name=raw.get("name") or f"App {app_id}")
