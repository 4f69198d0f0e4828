"""CLI entry point for padelcat.

Provides ``main()`` as the sync entry point for the ``padelcat-sync``
console script, and ``async_main(args)`` which sets up logging, opens the
database and fetcher, runs one command, and prints its result as JSON.

Usage::

    padelcat-sync register Ana Gil ana@x.com secret <site-link> --position right
    padelcat-sync login ana@x.com secret
    padelcat-sync sync-score <site-link>
    padelcat-sync sync-matches
    padelcat-sync matches
    padelcat-sync available <player-id> <match-id>
    padelcat-sync unavailable <player-id> <match-id>
    padelcat-sync choose <match-id> <player-id> <player-id>
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from padelcat.config import SyncConfig
from padelcat.credentials import PasswordHasher
from padelcat.db import Database
from padelcat.exceptions import PadelcatError
from padelcat.http_client import HtmlFetcher
from padelcat.logging_config import setup_logging
from padelcat.models import POSITIONS
from padelcat.players import PlayerService
from padelcat.reconciliation import ReconciliationEngine
from padelcat.repository import MatchRepository, PlayerRepository
from padelcat.storage import HtmlArchive

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the padelcat-sync CLI."""
    parser = argparse.ArgumentParser(
        prog="padelcat-sync",
        description="Keep padel players and matches in sync with the tournament site",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Data directory for DB, page archive, and logs (default: data)",
    )
    parser.add_argument(
        "--roster-url",
        type=str,
        default=None,
        help="Team roster page with player scores",
    )
    parser.add_argument(
        "--schedule-url",
        type=str,
        default=None,
        help="Team schedule page with match cards",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--no-save-html",
        action="store_true",
        help="Do not archive fetched pages",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    register = commands.add_parser("register", help="Register a player and sync their score")
    register.add_argument("name")
    register.add_argument("surname")
    register.add_argument("email")
    register.add_argument("password")
    register.add_argument("link", help="Player URL on the tournament site")
    register.add_argument("--position", choices=POSITIONS, default="both")
    register.add_argument("--admin", action="store_true")

    login = commands.add_parser("login", help="Check a player's credentials")
    login.add_argument("email")
    login.add_argument("password")

    commands.add_parser("players", help="List all players")

    player = commands.add_parser("player", help="Show one player")
    player.add_argument("player_id")

    sync_score = commands.add_parser("sync-score", help="Refresh one player's score")
    sync_score.add_argument("link")

    commands.add_parser("sync-matches", help="Store details of every scheduled match")
    commands.add_parser("matches", help="List scheduled matches with availability")

    for name, help_text in (
        ("available", "Mark a player available for a match"),
        ("unavailable", "Remove a player's availability for a match"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("player_id")
        sub.add_argument("match_id")

    choose = commands.add_parser("choose", help="Set the players chosen for a match")
    choose.add_argument("match_id")
    choose.add_argument("players", nargs="*", help="Chosen player ids (none clears)")

    return parser


def build_config(args: argparse.Namespace) -> SyncConfig:
    """Apply CLI overrides on top of SyncConfig defaults."""
    config = SyncConfig(
        data_dir=args.data_dir,
        db_path=str(Path(args.data_dir) / "padelcat.db"),
        save_html=not args.no_save_html,
    )
    if args.roster_url:
        config.roster_url = args.roster_url
    if args.schedule_url:
        config.schedule_url = args.schedule_url
    if args.timeout is not None:
        config.request_timeout = args.timeout
    return config


async def run_command(
    args: argparse.Namespace,
    service: PlayerService,
    engine: ReconciliationEngine,
):
    """Run the selected command and return a JSON-serializable result."""
    command = args.command

    if command == "register":
        player_id = await service.register_player(
            args.name, args.surname, args.email, args.password,
            args.link, args.position, args.admin,
        )
        return {"id": player_id}
    if command == "login":
        return (await service.authenticate_player(args.email, args.password)).public_dict()
    if command == "players":
        return [p.public_dict() for p in await service.retrieve_players()]
    if command == "player":
        return (await service.get_player_by_id(args.player_id)).public_dict()
    if command == "sync-score":
        return (await engine.sync_player_score(args.link)).public_dict()
    if command == "sync-matches":
        return await engine.sync_matches()
    if command == "matches":
        return [v.public_dict() for v in await engine.list_matches_with_availability()]
    if command == "available":
        return (await engine.add_availability(args.player_id, args.match_id)).model_dump()
    if command == "unavailable":
        return (await engine.remove_availability(args.player_id, args.match_id)).model_dump()
    if command == "choose":
        return (await engine.set_chosen_players(args.players, args.match_id)).model_dump()
    raise ValueError(f"Unknown command {command!r}")


async def async_main(args: argparse.Namespace) -> int:
    """Set up components, run one command, print its result.

    Returns:
        Process exit code: 0 on success, 1 on a padelcat error.
    """
    config = build_config(args)
    log_file = setup_logging(config.data_dir)
    logger.debug("Logging to %s", log_file)

    db = Database(config.db_path)
    db.initialize()
    archive = HtmlArchive(Path(config.data_dir) / "raw") if config.save_html else None

    try:
        async with HtmlFetcher(config) as fetcher:
            engine = ReconciliationEngine(
                fetcher,
                PlayerRepository(db.conn),
                MatchRepository(db.conn),
                config,
                archive=archive,
            )
            service = PlayerService(
                engine.player_repo, engine, PasswordHasher(config.bcrypt_rounds)
            )
            result = await run_command(args, service, engine)
            logger.debug("Fetcher stats: %s", fetcher.stats)
    except PadelcatError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    finally:
        db.close()

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def main() -> None:
    """Sync entry point for the padelcat-sync console script."""
    args = build_parser().parse_args()
    try:
        sys.exit(asyncio.run(async_main(args)))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
