# gamesincommon/core/filter_kind.py

"""Filter kinds that a common game can be restricted to.

Each kind maps to a Steam store category label. Detection is a plain
substring search for the quoted label in the raw ``appdetails`` payload,
so a label that happens to appear in a description or a review snippet
produces a false positive, and a renamed store category produces a
false negative.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["FilterKind"]


class FilterKind(Enum):
    """Closed set of supported filter kinds.

    The ordinal is the persistent id in the ``filters`` table and must
    never be reused for a different keyword.

    Attributes:
        ordinal: Stable numeric id stored in the database.
        keyword: Store category label searched for in detail payloads.
    """

    SINGLE_PLAYER = (0, "Single-player")
    MULTI_PLAYER = (1, "Multi-player")
    CO_OP = (2, "Co-op")
    ONLINE_CO_OP = (3, "Online Co-op")
    LOCAL_CO_OP = (4, "Shared/Split Screen")
    ACHIEVEMENTS = (5, "Steam Achievements")
    TRADING_CARDS = (6, "Steam Trading Cards")
    WORKSHOP = (7, "Steam Workshop")
    CLOUD = (8, "Steam Cloud")
    CONTROLLER_SUPPORT = (9, "Full controller support")
    LEADERBOARDS = (10, "Steam Leaderboards")
    LEVEL_EDITOR = (11, "Includes level editor")

    def __init__(self, ordinal: int, keyword: str) -> None:
        self.ordinal = ordinal
        self.keyword = keyword

    @property
    def quoted(self) -> str:
        """The keyword as a JSON string token, e.g. ``"Steam Cloud"``."""
        return f'"{self.keyword}"'

    @classmethod
    def from_ordinal(cls, ordinal: int) -> FilterKind:
        """Looks up a filter kind by its persistent id.

        Args:
            ordinal: Value from the ``filters.id`` column.

        Returns:
            The matching FilterKind.

        Raises:
            ValueError: If no kind has this ordinal.
        """
        for kind in cls:
            if kind.ordinal == ordinal:
                return kind
        raise ValueError(f"Unknown filter ordinal: {ordinal}")

    @classmethod
    def from_name(cls, name: str) -> FilterKind:
        """Parses a user-supplied filter name.

        Accepts member names in any case, with ``-`` or spaces in place
        of underscores ("trading-cards", "Trading Cards"), as well as the
        exact store keyword.

        Args:
            name: Name typed by the user.

        Returns:
            The matching FilterKind.

        Raises:
            ValueError: If the name does not match any kind.
        """
        normalized = name.strip().upper().replace("-", "_").replace(" ", "_")
        if normalized in cls.__members__:
            return cls.__members__[normalized]
        for kind in cls:
            if kind.keyword.lower() == name.strip().lower():
                return kind
        raise ValueError(f"Unknown filter: {name}")
