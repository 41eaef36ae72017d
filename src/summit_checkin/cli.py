"""Command-line front end for summit check-ins."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from .config import CheckInSettings, load_env
from .console import CheckInConsole
from .logger import configure_from_env, step, success
from .session import CheckInSession, build_session
from .teams import TeamCatalog

EXIT_OK = 0
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    codes = ", ".join(TeamCatalog.codes())
    parser = argparse.ArgumentParser(
        prog="summit-checkin",
        description="Check attendees in to the summit and track progress toward the goal.",
    )
    parser.add_argument("--name", help="Attendee name for a single non-interactive check-in")
    parser.add_argument("--team", help=f"Team code for --name ({codes})")
    parser.add_argument("--goal", help="Check-in goal (default: CHECKIN_GOAL or 50)")
    parser.add_argument("--state-file", help="Where check-ins are stored (default: CHECKIN_STATE_FILE)")
    parser.add_argument("--ephemeral", action="store_true", help="Keep check-ins in memory only")
    parser.add_argument("--show", action="store_true", help="Show current counts and attendees, then exit")
    parser.add_argument("--export", metavar="PATH", help="Write the current snapshot to PATH")
    parser.add_argument("--clear", action="store_true", help="Delete all stored check-ins")
    parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation with --clear")
    parser.add_argument(
        "--log-profile",
        choices=["quiet", "user", "debug", "verbose"],
        help="Console log verbosity (default: LOG_PROFILE or user)",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> CheckInSettings:
    settings = CheckInSettings.from_env()
    if args.goal is not None:
        settings.goal_raw = args.goal
    if args.state_file:
        settings.state_file = Path(args.state_file)
    settings.ephemeral = bool(args.ephemeral)
    return settings


def _prompt(console: Console, label: str) -> Optional[str]:
    try:
        return console.input(label)
    except (EOFError, KeyboardInterrupt):
        console.print()
        return None


def run_interactive(session: CheckInSession, console: Console) -> int:
    """Prompt for check-ins until a blank name, EOF or Ctrl+C."""
    codes = "/".join(TeamCatalog.codes())
    console.print(f"[dim]Leave the name empty to finish. Team codes: {codes}[/]")
    while True:
        name = _prompt(console, "[bold blue]Name[/]: ")
        if name is None or not name.strip():
            break
        team = _prompt(console, f"[bold blue]Team[/] ({codes}): ")
        if team is None:
            break
        session.submit(name, team.strip())
    success(f"{session.store.state.total} attendee(s) checked in")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    load_env(os.getenv("ENV_FILE", ".env"))
    args = build_parser().parse_args(argv)
    configure_from_env(args.log_profile)

    settings = _settings_from_args(args)
    console = Console()
    view = CheckInConsole(console)

    if args.clear:
        session = build_session(settings)
        if not args.yes:
            answer = _prompt(console, "Delete all stored check-ins? (y/N): ")
            if (answer or "").strip().lower() != "y":
                console.print("Nothing deleted.")
                return EXIT_OK
        session.clear()
        success("Stored check-ins cleared")
        return EXIT_OK

    if args.export:
        session = build_session(settings)
        session.start()
        target = session.export(args.export)
        success(f"Snapshot exported to {target}")
        return EXIT_OK

    if args.name is not None or args.team is not None:
        session = build_session(settings)
        session.start()
        view.attach(session.store)
        outcome = session.submit(args.name or "", args.team or "")
        return EXIT_OK if outcome.ok else EXIT_INVALID

    session = build_session(settings, view=view)
    if not args.show:
        step(f"Summit check-in (goal {settings.goal})")
    session.start()
    if args.show:
        return EXIT_OK
    return run_interactive(session, console)


__all__ = ["build_parser", "main", "run_interactive"]
