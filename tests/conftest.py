# tests/conftest.py
import io
import threading
from pathlib import Path
from typing import Callable, Generator

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from gamesincommon.core.db import FilterStore
from gamesincommon.core.errors import CatalogError
from gamesincommon.core.game import Account, Game
from gamesincommon.integrations.catalog_client import CatalogClient


def build_response(status: int = 200, body: bytes = b"", headers: dict[str, str] | None = None) -> requests.Response:
    """Real requests.Response backed by an in-memory body."""
    response = requests.Response()
    response.status_code = status
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = io.BytesIO(body)
    response.url = "https://store.steampowered.com/api/appdetails"
    return response


def app_details_body(app_id: int, *categories: str) -> bytes:
    """Minimal appdetails JSON listing the given store categories."""
    cats = ",".join(f'{{"id":{i},"description":"{c}"}}' for i, c in enumerate(categories))
    return f'{{"{app_id}":{{"success":true,"data":{{"steam_appid":{app_id},"categories":[{cats}]}}}}}}'.encode()


class FakeCatalogClient(CatalogClient):
    """In-memory CatalogClient recording every detail request."""

    def __init__(self) -> None:
        self.libraries: dict[int, frozenset[Game] | Exception] = {}
        self.details: dict[int, list[Callable[[], requests.Response]]] = {}
        self.vanity: dict[str, int] = {}
        self.personas: dict[int, str] = {}
        self.detail_calls: dict[int, int] = {}
        self.on_owned_games: Callable[[Account], None] | None = None
        self._lock = threading.Lock()

    def add_library(self, steam_id: int, games: list[Game] | Exception) -> Account:
        self.libraries[steam_id] = games if isinstance(games, Exception) else frozenset(games)
        return Account(steam_id=steam_id, display_name=f"user{steam_id}")

    def add_details(self, app_id: int, *responses: Callable[[], requests.Response]) -> None:
        """Queue response factories; the last one is reused once the queue is drained."""
        self.details[app_id] = list(responses)

    def get_owned_games(self, account: Account) -> frozenset[Game]:
        if self.on_owned_games is not None:
            self.on_owned_games(account)
        library = self.libraries.get(account.steam_id)
        if library is None:
            raise CatalogError(f"unknown account {account.steam_id}")
        if isinstance(library, Exception):
            raise library
        return library

    def open_app_details(self, app_id: int) -> requests.Response:
        with self._lock:
            self.detail_calls[app_id] = self.detail_calls.get(app_id, 0) + 1
            queue = self.details[app_id]
            factory = queue.pop(0) if len(queue) > 1 else queue[0]
        return factory()

    def resolve_vanity_url(self, name: str) -> int | None:
        return self.vanity.get(name)

    def get_persona_name(self, steam_id: int) -> str | None:
        return self.personas.get(steam_id)


@pytest.fixture
def fake_client() -> FakeCatalogClient:
    """Empty fake catalog backend."""
    return FakeCatalogClient()


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Location of a not yet created filter database."""
    return tmp_path / "gamedata.db"


@pytest.fixture
def store(db_path) -> Generator[FilterStore, None, None]:
    """Freshly created filter store."""
    db = FilterStore(db_path)
    yield db
    db.close()


@pytest.fixture
def cancel_event() -> threading.Event:
    return threading.Event()


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory for in-memory detail responses."""
    return build_response


@pytest.fixture
def details_body() -> Callable[..., bytes]:
    """Factory for appdetails payloads."""
    return app_details_body
