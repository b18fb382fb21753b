"""Tests for account name resolution."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from gamesincommon.core.errors import AccountResolutionError, CatalogError
from gamesincommon.core.game import Account
from gamesincommon.integrations.catalog_client import CatalogClient
from gamesincommon.services.account_service import AccountService

GABE = 76561197960287930


class TestResolveAccount:
    """Tests for AccountService.resolve_account()."""

    def test_vanity_name(self, fake_client) -> None:
        fake_client.vanity["gabelogannewell"] = GABE
        fake_client.personas[GABE] = "Rabscuttle"

        account = AccountService(fake_client).resolve_account("gabelogannewell")

        assert account == Account(GABE, "Rabscuttle")

    def test_vanity_without_persona_keeps_typed_name(self, fake_client) -> None:
        fake_client.vanity["gabe"] = GABE

        assert AccountService(fake_client).resolve_account(" gabe ") == Account(GABE, "gabe")

    def test_numeric_fallback(self, fake_client) -> None:
        fake_client.personas[GABE] = "Rabscuttle"

        assert AccountService(fake_client).resolve_account(str(GABE)) == Account(GABE, "Rabscuttle")

    def test_numeric_fallback_after_vanity_error(self) -> None:
        client = MagicMock(spec=CatalogClient)
        client.resolve_vanity_url.side_effect = CatalogError("ResolveVanityURL failed: HTTP 503")
        client.get_persona_name.return_value = "Rabscuttle"

        assert AccountService(client).resolve_account(str(GABE)).steam_id == GABE

    def test_unknown_name_raises(self, fake_client) -> None:
        with pytest.raises(AccountResolutionError, match="No Steam account named"):
            AccountService(fake_client).resolve_account("nobody-here")

    def test_unknown_numeric_id_raises(self, fake_client) -> None:
        with pytest.raises(AccountResolutionError):
            AccountService(fake_client).resolve_account("12345")

    def test_vanity_error_is_reported_for_non_numeric_names(self) -> None:
        client = MagicMock(spec=CatalogClient)
        client.resolve_vanity_url.side_effect = CatalogError("ResolveVanityURL failed: HTTP 503")

        with pytest.raises(AccountResolutionError, match="HTTP 503"):
            AccountService(client).resolve_account("gabe")

    def test_empty_name_raises(self, fake_client) -> None:
        with pytest.raises(AccountResolutionError, match="must not be empty"):
            AccountService(fake_client).resolve_account("   ")


class TestResolveAccounts:
    """Tests for AccountService.resolve_accounts()."""

    def test_collects_failures_and_drops_duplicates(self, fake_client) -> None:
        fake_client.vanity["gabe"] = GABE
        fake_client.personas[GABE] = "Rabscuttle"

        accounts, unresolved = AccountService(fake_client).resolve_accounts(["gabe", str(GABE), "ghost"])

        assert accounts == [Account(GABE, "Rabscuttle")]
        assert unresolved == ["ghost"]
