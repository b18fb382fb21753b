# gamesincommon/core/game.py

"""Value types for accounts and games.

Game identity is the numeric Steam app id. The display name is carried
along for output only and takes no part in equality or hashing, so two
libraries that report the same app under different names still
intersect.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["Account", "Game"]


@dataclass(frozen=True)
class Account:
    """A resolved Steam account.

    Args:
        steam_id: 64-bit SteamID.
        display_name: Persona name, or the name the user typed.
    """

    steam_id: int
    display_name: str = ""

    def __str__(self) -> str:
        return f"{self.display_name or self.steam_id} ({self.steam_id})"


@dataclass(frozen=True)
class Game:
    """A catalog entry owned by an account.

    Args:
        app_id: Steam application ID.
        name: Display name (not part of identity).
    """

    app_id: int
    name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.name or f"App {self.app_id}"
