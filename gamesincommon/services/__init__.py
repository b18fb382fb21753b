from __future__ import annotations

from gamesincommon.services.account_service import AccountService
from gamesincommon.services.common_games_service import CommonGamesService
from gamesincommon.services.filter_resolver import FilterResolver, scan_payload
from gamesincommon.services.rate_limited_fetcher import RateLimitedFetcher
from gamesincommon.services.set_merger import intersect

__all__: list[str] = [
    "AccountService",
    "CommonGamesService",
    "FilterResolver",
    "RateLimitedFetcher",
    "intersect",
    "scan_payload",
]
