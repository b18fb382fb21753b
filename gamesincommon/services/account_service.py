"""Resolution of user-typed account names into Steam accounts."""

from __future__ import annotations

import logging

from gamesincommon.core.errors import AccountResolutionError, CatalogError
from gamesincommon.core.game import Account
from gamesincommon.integrations.catalog_client import CatalogClient

logger = logging.getLogger("gamesincommon.account_service")

__all__ = ["AccountService"]


class AccountService:
    """Turns vanity names or SteamID64 strings into Account values.

    Args:
        client: Catalog backend used for the lookups.
    """

    def __init__(self, client: CatalogClient) -> None:
        self._client = client

    def resolve_account(self, name: str) -> Account:
        """Resolves a name, falling back to reading it as a SteamID64.

        The vanity lookup is tried first. If it finds nothing or fails
        and the input is numeric, the number is taken as the SteamID64
        and confirmed through a profile lookup.

        Args:
            name: Vanity name or numeric SteamID64.

        Returns:
            The resolved account.

        Raises:
            AccountResolutionError: If neither interpretation yields an
                existing account.
        """
        name = name.strip()
        if not name:
            raise AccountResolutionError("Account name must not be empty")

        first_error: CatalogError | None = None
        try:
            steam_id = self._client.resolve_vanity_url(name)
        except CatalogError as e:
            first_error = e
            steam_id = None

        if steam_id is not None:
            persona = self._lookup_persona(steam_id)
            return Account(steam_id=steam_id, display_name=persona or name)

        if name.isdigit():
            steam_id = int(name)
            try:
                persona = self._client.get_persona_name(steam_id)
            except CatalogError as e:
                raise AccountResolutionError(f"Could not resolve account '{name}': {e}") from e
            if persona is not None:
                return Account(steam_id=steam_id, display_name=persona)

        if first_error is not None:
            raise AccountResolutionError(f"Could not resolve account '{name}': {first_error}") from first_error
        raise AccountResolutionError(f"No Steam account named '{name}'")

    def resolve_accounts(self, names: list[str]) -> tuple[list[Account], list[str]]:
        """Resolves several names, collecting the ones that fail.

        Duplicate accounts are only returned once.

        Args:
            names: Names as typed by the user.

        Returns:
            Tuple of (resolved accounts, names that could not be resolved).
        """
        accounts: list[Account] = []
        unresolved: list[str] = []
        seen: set[int] = set()
        for name in names:
            try:
                account = self.resolve_account(name)
            except AccountResolutionError as e:
                logger.error("%s", e)
                unresolved.append(name)
                continue
            if account.steam_id in seen:
                logger.info("Skipping duplicate account %s", account)
                continue
            seen.add(account.steam_id)
            accounts.append(account)
        return accounts, unresolved

    def _lookup_persona(self, steam_id: int) -> str | None:
        try:
            return self._client.get_persona_name(steam_id)
        except CatalogError as e:
            logger.debug("Persona lookup failed for %d: %s", steam_id, e)
            return None
