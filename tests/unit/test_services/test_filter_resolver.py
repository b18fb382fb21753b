"""Tests for cache-before-fetch filter resolution."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest

from gamesincommon.core.db import FilterStore
from gamesincommon.core.errors import DetailFetchError, OperationCancelled
from gamesincommon.core.filter_kind import FilterKind
from gamesincommon.core.game import Game
from gamesincommon.services.filter_resolver import FilterResolver, scan_payload
from gamesincommon.services.rate_limited_fetcher import RateLimitedFetcher

TF2 = Game(440, "Team Fortress 2")


@pytest.fixture
def resolver(store, fake_client, cancel_event) -> FilterResolver:
    return FilterResolver(store, RateLimitedFetcher(fake_client, cancel_event, backoff_seconds=0))


class TestScanPayload:
    """Tests for the quoted keyword scan."""

    def test_finds_quoted_categories(self, details_body) -> None:
        found = scan_payload(details_body(440, "Multi-player", "Steam Trading Cards", "Steam Achievements"))
        assert found == {FilterKind.MULTI_PLAYER, FilterKind.TRADING_CARDS, FilterKind.ACHIEVEMENTS}

    def test_unquoted_keyword_is_ignored(self) -> None:
        assert scan_payload(b'{"about":"collect Steam Trading Cards today"}') == frozenset()

    def test_keyword_inside_longer_token_is_ignored(self) -> None:
        """The Co-op keyword must be a whole quoted token."""
        assert scan_payload(b'["Online Co-op"]') == {FilterKind.ONLINE_CO_OP}

    def test_empty_payload(self) -> None:
        assert scan_payload(b"") == frozenset()

    def test_invalid_utf8_does_not_raise(self) -> None:
        assert scan_payload(b'\xff\xfe"Steam Cloud"') == {FilterKind.CLOUD}


class TestResolve:
    """Tests for FilterResolver.resolve()."""

    def test_unseen_game_fetched_once_then_cached(
        self, resolver, fake_client, make_response, details_body
    ) -> None:
        fake_client.add_details(440, lambda: make_response(200, details_body(440, "Steam Trading Cards")))

        first = resolver.resolve(TF2)
        second = resolver.resolve(TF2)

        assert first == second == {FilterKind.TRADING_CARDS}
        assert fake_client.detail_calls[440] == 1

    def test_game_without_filters_is_cached_too(self, resolver, fake_client, make_response, details_body) -> None:
        fake_client.add_details(440, lambda: make_response(200, details_body(440)))

        assert resolver.resolve(TF2) == frozenset()
        assert resolver.resolve(TF2) == frozenset()
        assert fake_client.detail_calls[440] == 1

    def test_cache_hit_makes_no_request(self, resolver, store: FilterStore, fake_client) -> None:
        store.record_filters(TF2, {FilterKind.WORKSHOP})

        assert resolver.resolve(TF2) == {FilterKind.WORKSHOP}
        assert fake_client.detail_calls == {}

    def test_force_refresh_fetches_and_replaces(
        self, resolver, store: FilterStore, fake_client, make_response, details_body
    ) -> None:
        store.record_filters(TF2, {FilterKind.ACHIEVEMENTS, FilterKind.TRADING_CARDS, FilterKind.CLOUD})
        fake_client.add_details(440, lambda: make_response(200, details_body(440, "Steam Cloud")))

        assert resolver.resolve(TF2, force_refresh=True) == {FilterKind.CLOUD}
        assert fake_client.detail_calls[440] == 1
        assert store.get_cached_filters(440) == {FilterKind.CLOUD}

    def test_force_refresh_always_fetches(self, resolver, fake_client, make_response, details_body) -> None:
        fake_client.add_details(440, lambda: make_response(200, details_body(440, "Co-op")))

        resolver.resolve(TF2, force_refresh=True)
        resolver.resolve(TF2, force_refresh=True)

        assert fake_client.detail_calls[440] == 2

    def test_fetch_failure_returns_none_and_stores_nothing(
        self, resolver, store: FilterStore, fake_client, make_response
    ) -> None:
        fake_client.add_details(440, lambda: make_response(404))

        assert resolver.resolve(TF2) is None
        assert not store.is_seen(440)

    def test_cancellation_propagates(self, store: FilterStore) -> None:
        fetcher = MagicMock(spec=RateLimitedFetcher)
        fetcher.fetch_detail.side_effect = OperationCancelled()

        with pytest.raises(OperationCancelled):
            FilterResolver(store, fetcher).resolve(TF2)
        assert not store.is_seen(440)

    def test_fetch_runs_without_store_lock(self, store: FilterStore) -> None:
        """Another thread can read the cache while a fetch is in progress."""
        acquired: list[bool] = []

        def probe() -> None:
            ok = store.lock.acquire(timeout=1)
            acquired.append(ok)
            if ok:
                store.lock.release()

        def fetch(game: Game) -> bytes:
            thread = threading.Thread(target=probe)
            thread.start()
            thread.join()
            return b'"Steam Workshop"'

        fetcher = MagicMock(spec=RateLimitedFetcher)
        fetcher.fetch_detail.side_effect = fetch

        assert FilterResolver(store, fetcher).resolve(TF2) == {FilterKind.WORKSHOP}
        assert acquired == [True]


class TestMatches:
    """Tests for FilterResolver.matches()."""

    def test_superset_matches(self, resolver, store: FilterStore) -> None:
        store.record_filters(TF2, {FilterKind.ACHIEVEMENTS, FilterKind.TRADING_CARDS})
        assert resolver.matches(TF2, frozenset({FilterKind.TRADING_CARDS})) is True

    def test_missing_kind_does_not_match(self, resolver, store: FilterStore) -> None:
        store.record_filters(TF2, {FilterKind.ACHIEVEMENTS})
        assert resolver.matches(TF2, frozenset({FilterKind.ACHIEVEMENTS, FilterKind.CLOUD})) is False

    def test_unresolved_is_none(self, resolver, store: FilterStore) -> None:
        fetcher = MagicMock(spec=RateLimitedFetcher)
        fetcher.fetch_detail.side_effect = DetailFetchError(440, "HTTP 500")

        assert FilterResolver(store, fetcher).matches(TF2, frozenset({FilterKind.CLOUD})) is None
