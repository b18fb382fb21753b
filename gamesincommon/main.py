#!/usr/bin/env python3
"""Games In Common - console entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Collection
from pathlib import Path
from typing import TextIO

from gamesincommon.config import config
from gamesincommon.core.filter_kind import FilterKind
from gamesincommon.core.game import Game
from gamesincommon.core.logging import logger, parse_level, setup_logging
from gamesincommon.integrations.steam_web_api import SteamWebAPI
from gamesincommon.services.account_service import AccountService
from gamesincommon.services.common_games_service import CommonGamesService
from gamesincommon.version import __app_name__, __version__

__all__ = ["build_parser", "format_and_display", "main", "read_users"]

_END_OF_INPUT = "FIN"


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="gamesincommon",
        description="List the Steam games that all given accounts own.",
    )
    parser.add_argument(
        "users",
        nargs="*",
        help=f"Vanity names or SteamID64s. Read from stdin until '{_END_OF_INPUT}' if omitted.",
    )
    parser.add_argument(
        "-f",
        "--filter",
        dest="filters",
        action="append",
        default=[],
        metavar="NAME",
        help="Only keep games with this store feature; repeatable. Choices: "
        + ", ".join(kind.name.lower() for kind in FilterKind),
    )
    parser.add_argument(
        "--force-web-check",
        action="store_true",
        default=None,
        help="Ignore cached filter data and query the store for every game.",
    )
    parser.add_argument("--db", type=Path, default=None, help="Path of the filter cache database.")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write debug logs to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--version", action="version", version=f"{__app_name__} {__version__}")
    return parser


def read_users(stream: TextIO, out: TextIO) -> list[str]:
    """Reads account names one per line until the end marker.

    Args:
        stream: Input to read from.
        out: Output for the prompt.

    Returns:
        The non-empty names entered.
    """
    print(f"Enter users one by one, typing '{_END_OF_INPUT}' when complete:", file=out)
    users: list[str] = []
    for line in stream:
        name = line.strip()
        if name == _END_OF_INPUT:
            break
        if name:
            users.append(name)
    return users


def format_and_display(games: Collection[Game], out: TextIO) -> None:
    """Prints game names sorted alphabetically and the final count.

    Args:
        games: Games to list.
        out: Output stream.
    """
    for game in sorted(games, key=lambda g: (str(g).casefold(), g.app_id)):
        print(game, file=out)
    print(f"Total games in common: {len(games)}", file=out)


def main(argv: list[str] | None = None) -> int:
    """Run the console application.

    Args:
        argv: Command line arguments without the program name.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else parse_level(config.LOG_LEVEL)
    setup_logging(level, args.log_file)

    try:
        requested = [FilterKind.from_name(name) for name in args.filters]
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    if not config.STEAM_API_KEY:
        print("No Steam API key configured. Set STEAM_API_KEY in the environment or a .env file.", file=sys.stderr)
        return 2

    client = SteamWebAPI(config.STEAM_API_KEY, timeout=config.REQUEST_TIMEOUT)

    names = args.users or read_users(sys.stdin, sys.stdout)
    accounts, unresolved = AccountService(client).resolve_accounts(names)
    if unresolved:
        print(f"Could not resolve: {', '.join(unresolved)}", file=sys.stderr)
        return 1
    if not accounts:
        print("No accounts given.", file=sys.stderr)
        return 1

    if args.db is None:
        config.ensure_data_dir()
    force_web_check = config.FORCE_WEB_CHECK if args.force_web_check is None else args.force_web_check
    service = CommonGamesService(
        client,
        args.db or config.DB_PATH,
        backoff_seconds=config.THROTTLE_BACKOFF_SECONDS,
        force_web_check=force_web_check,
    )

    try:
        outcome = service.find_common_games(accounts, requested)
    except KeyboardInterrupt:
        service.cancel()
        logger.info("Cancelled.")
        return 130

    for warning in outcome.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    if outcome.is_cancelled:
        print("Cancelled.", file=sys.stderr)
        return 130
    if not outcome.ok:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return 1

    format_and_display(outcome.value, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
