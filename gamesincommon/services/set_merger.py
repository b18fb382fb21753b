"""Intersection of per-account game libraries."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from gamesincommon.core.game import Game

__all__ = ["intersect"]


def intersect(collections: Sequence[Collection[Game]]) -> frozenset[Game] | None:
    """Keeps the games present in every collection.

    The largest collection seeds the result, which is then intersected
    with every input, itself included. Games compare by app id only.

    Args:
        collections: One game collection per account.

    Returns:
        The common games, or None if there is nothing to intersect.
    """
    if not collections:
        return None

    largest = max(collections, key=len)
    result = set(largest)
    for games in collections:
        result.intersection_update(games)
    return frozenset(result)
