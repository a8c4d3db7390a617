"""Command-line interface for managing the roster and serving the web UI."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

import anyio

from rosterbook.config import RosterSettings, load_settings
from rosterbook.errors import StorageError
from rosterbook.models import PlayerRecord
from rosterbook.roster import RosterStats
from rosterbook.session import RESET_PHRASE, Outcome, RosterSession


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage a local player roster against a target budget")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database path (default: $ROSTERBOOK_DB_PATH or ./rosterbook.sqlite)",
    )
    parser.add_argument(
        "--cap",
        type=int,
        default=None,
        help="Roster size used for per-slot averages (default: $ROSTERBOOK_ROSTER_CAP or 11)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log storage activity to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the web UI")
    serve.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="Port to bind")

    subparsers.add_parser("list", help="Show the roster and budget figures")
    subparsers.add_parser("stats", help="Show budget figures only")

    add = subparsers.add_parser("add", help="Add a player")
    add.add_argument("--name", required=True)
    add.add_argument("--position", required=True, help="Position code, e.g. CF or GK")
    add.add_argument("--style", required=True, help="Playing style")
    add.add_argument("--value", required=True, help="Positive whole number")

    edit = subparsers.add_parser("edit", help="Update the player at a roster row")
    edit.add_argument("index", type=int, help="Zero-based row from `list`")
    edit.add_argument("--name", default=None)
    edit.add_argument("--position", default=None)
    edit.add_argument("--style", default=None)
    edit.add_argument("--value", default=None)

    delete = subparsers.add_parser("delete", help="Delete a player by id")
    delete.add_argument("player_id", type=int)
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    target = subparsers.add_parser("target", help="Set the target budget")
    target.add_argument("value")

    reset = subparsers.add_parser("reset", help="Delete every player and the target")
    reset.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    return parser.parse_args(argv)


def _display(value: int | None) -> str:
    return "-" if value is None else str(value)


def _format_stats(stats: RosterStats, target: int | None, roster_cap: int) -> str:
    return (
        f"Target: {_display(target)}  Total: {stats.total_value}  "
        f"Remaining: {_display(stats.remaining)}  "
        f"Open slots: {stats.remaining_slots}/{roster_cap}  "
        f"Average per slot: {_display(stats.average)}"
    )


def _format_roster(records: Sequence[PlayerRecord]) -> str:
    if not records:
        return "No players added yet."
    lines = [f"{'#':>3}  {'ID':>4}  {'Pos':<4} {'Name':<24} {'Style':<20} {'Value':>7}"]
    for index, record in enumerate(records):
        lines.append(
            f"{index:>3}  {_display(record.id):>4}  {record.position:<4} {record.name:<24} "
            f"{record.playing_style:<20} {_display(record.value):>7}"
        )
    return "\n".join(lines)


def _prompt_yes_no(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


def _prompt_phrase(prompt: str) -> bool:
    answer = input(f"{prompt}\nType {RESET_PHRASE} to confirm: ")
    return answer.strip() == RESET_PHRASE


def _report(outcome: Outcome) -> int:
    stream = sys.stdout if outcome.ok else sys.stderr
    print(outcome.message, file=stream)
    return 0 if outcome.ok else 1


async def _run_command(args: argparse.Namespace, session: RosterSession) -> int:
    try:
        await session.start()
    except StorageError as exc:
        print(f"Roster storage unavailable: {exc}", file=sys.stderr)
        return 2

    try:
        if args.command == "list":
            print(_format_roster(session.records))
            print(_format_stats(session.stats, session.target, session.roster_cap))
            return 0
        if args.command == "stats":
            print(_format_stats(session.stats, session.target, session.roster_cap))
            return 0
        if args.command == "add":
            return _report(
                await session.submit(
                    {
                        "name": args.name,
                        "position": args.position,
                        "playing_style": args.style,
                        "value": args.value,
                    }
                )
            )
        if args.command == "edit":
            started = await session.begin_edit(args.index)
            if not started.ok or started.record is None:
                return _report(started)
            current = started.record
            return _report(
                await session.submit(
                    {
                        "name": args.name if args.name is not None else current.name,
                        "position": args.position if args.position is not None else current.position,
                        "playing_style": args.style if args.style is not None else current.playing_style,
                        "value": args.value if args.value is not None else current.value,
                    }
                )
            )
        if args.command == "delete":
            confirm = (lambda prompt: True) if args.yes else _prompt_yes_no
            return _report(await session.request_delete(args.player_id, confirm))
        if args.command == "target":
            return _report(await session.set_target(args.value))
        if args.command == "reset":
            confirm = (lambda prompt: True) if args.yes else _prompt_phrase
            return _report(await session.request_reset(confirm))
        raise ValueError(f"Unknown command {args.command!r}")
    finally:
        await session.close()


def _serve(settings: RosterSettings, host: str, port: int) -> int:
    import uvicorn

    from rosterbook.api import create_app

    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    try:
        settings = load_settings(db_path=args.db, roster_cap=args.cap)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if args.command == "serve":
        return _serve(settings, args.host, args.port)

    session = RosterSession.from_settings(settings)
    return anyio.run(_run_command, args, session)


if __name__ == "__main__":
    raise SystemExit(main())
