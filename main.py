#!/usr/bin/env python3
"""Sweat Pets — a step-powered virtual pet for the terminal."""

from __future__ import annotations

import argparse
import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pet.config import configure_logging, get_data_dir
from pet.engine import CARE_ACTIONS, PetEngine
from pet.errors import ImportDocumentError, PersistenceError
from pet.intake import parse_steps
from pet.store import JsonFileStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sweat Pets — Walk. Level up. Evolve.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Controls (interactive mode):
  Enter        Add the typed steps
  Ctrl+E / O   Export / import data
  Ctrl+R / X   Reset today / reset everything
  Ctrl+Q       Quit

Examples:
  python main.py                        Start the terminal UI
  python main.py --add-steps 4500       Log steps without the UI
  python main.py --export backup.json   Save everything to a file
""",
    )
    parser.add_argument("--data-dir", help="Directory for saved data (default: $SWEAT_PETS_DATA_DIR or ~/.sweat_pets)")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--add-steps", metavar="N", help="Log N steps and print the result")
    actions.add_argument("--care", choices=sorted(CARE_ACTIONS), help="Apply a care action (+10 to one stat)")
    actions.add_argument("--reset-today", action="store_true", help="Reset today's step count")
    actions.add_argument("--status", action="store_true", help="Print the pet's current state")
    actions.add_argument("--export", metavar="PATH", help="Export pet, activity and achievements to PATH")
    actions.add_argument("--import", dest="import_path", metavar="PATH", help="Import data from PATH")
    actions.add_argument("--reset-all", action="store_true", help="Delete all saved data")
    return parser


def is_headless(args: argparse.Namespace) -> bool:
    return any([
        args.add_steps is not None,
        args.care,
        args.reset_today,
        args.status,
        args.export,
        args.import_path,
        args.reset_all,
    ])


def run_command(args: argparse.Namespace, engine: PetEngine, console: Console) -> int:
    """Run one headless action against *engine*.  Returns the process exit code."""
    try:
        engine.load()

        if args.add_steps is not None:
            steps = parse_steps(args.add_steps)
            if steps <= 0:
                console.print(f"[yellow]Not a positive step count: {escape(repr(args.add_steps))}[/]")
                return 2
            result = engine.add_steps(steps)
            console.print(f"Logged [bold]{steps:,}[/] steps.")
            if result is not None:
                if result.leveled_up:
                    console.print(f"[bold magenta]Level up![/] {result.old_level} → {result.new_level}")
                for achievement_id in result.new_achievements:
                    console.print(f"[bold yellow]Achievement unlocked:[/] {achievement_id}")
            print_status(engine, console)

        elif args.care:
            change = engine.care(args.care)
            console.print(f"{CARE_ACTIONS[args.care][1]} {change.stat} +{change.applied:g} → {change.value:g}")

        elif args.reset_today:
            engine.reset_steps_today()
            console.print("Today's steps reset.")

        elif args.status:
            print_status(engine, console)

        elif args.export:
            path = engine.export_to(args.export)
            console.print(f"Exported to [bold]{path}[/]")

        elif args.import_path:
            keys = engine.import_from(args.import_path)
            console.print(f"Imported {', '.join(keys)}.")
            print_status(engine, console)

        elif args.reset_all:
            engine.reset_all()
            console.print("All pet data deleted.")

    except ImportDocumentError as exc:
        console.print("[red]Error importing data:[/]")
        for problem in exc.problems:
            console.print(f"  - {escape(problem)}")
        return 1
    except PersistenceError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        return 1
    return 0


def print_status(engine: PetEngine, console: Console) -> None:
    snap = engine.snapshot()
    table = Table(title=f"Level {snap['level']} · Stage {snap['stage']}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")
    for stat, value in snap["stats"].items():
        table.add_row(stat.capitalize(), f"{value:g}")
    table.add_row("Steps today", f"{snap['steps_today']:,}")
    table.add_row("Total steps", f"{snap['total_steps']:,}")
    if snap["next_level"] is not None:
        table.add_row(f"To level {snap['next_level']}", f"{snap['steps_to_next_level']:,}")
    table.add_row("Achievements", ", ".join(snap["achievements"]) or "—")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    data_dir = get_data_dir(args.data_dir)
    configure_logging(data_dir)

    if is_headless(args):
        engine = PetEngine(JsonFileStore(data_dir))
        return run_command(args, engine, Console())

    from ui.app import SweatPetApp

    app = SweatPetApp(data_dir=data_dir)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
