from __future__ import annotations

__all__: list[str] = ["CatalogClient", "SteamWebAPI"]

from gamesincommon.integrations.catalog_client import CatalogClient
from gamesincommon.integrations.steam_web_api import SteamWebAPI
