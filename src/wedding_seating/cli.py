"""Command line interface for the seating planner."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .csv_loader import read_guest_text
from .engine import CommandResult, SeatingEngine
from .export import assignments_frame, table_summary_frame
from .models import DEFAULT_CAPACITY, Guest, Table
from .storage import JsonFileStorage

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wedding seating planner")
    parser.add_argument("--state-dir", type=Path, default=Path(".seating"),
                        help="Directory holding the saved guests and tables.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine activity.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Import a guest list CSV.")
    p.add_argument("path", type=Path)

    p = sub.add_parser("add-guest", help="Add a guest, optionally straight onto a table.")
    p.add_argument("name")
    p.add_argument("--table", help="Table name or id.")

    p = sub.add_parser("add-table", help="Add a table.")
    p.add_argument("--capacity", type=int, default=DEFAULT_CAPACITY)
    p.add_argument("--name")

    p = sub.add_parser("assign", help="Seat a guest at a table.")
    p.add_argument("guest", help="Guest name or id.")
    p.add_argument("table", help="Table name or id.")
    p.add_argument("--seat", type=int, help="1-based seat number; swaps with the occupant.")

    p = sub.add_parser("unassign", help="Send a guest back to the unassigned list.")
    p.add_argument("guest")

    p = sub.add_parser("rename-table", help="Rename a table.")
    p.add_argument("table")
    p.add_argument("name")

    p = sub.add_parser("delete-table", help="Delete a table, unseating its guests.")
    p.add_argument("table")

    p = sub.add_parser("clear-table", help="Unseat every guest at a table.")
    p.add_argument("table")

    sub.add_parser("show", help="Print tables and unassigned guests.")

    p = sub.add_parser("export", help="Write assignments CSV: guest,table,seat.")
    p.add_argument("out", type=Path)
    return parser


def _find_guest(engine: SeatingEngine, key: str) -> Optional[Guest]:
    return engine.get_guest(key) or next((g for g in engine.guests if g.name == key), None)


def _find_table(engine: SeatingEngine, key: str) -> Optional[Table]:
    return engine.get_table(key) or next((t for t in engine.tables if t.name == key), None)


def _show(engine: SeatingEngine) -> None:
    for _, row in table_summary_frame(engine.state).iterrows():
        print(f"[TABLE] {row['table']} {row['seated']}/{row['capacity']}: {row['guests']}")
    unassigned = engine.unassigned_guests()
    print(f"[UNASSIGNED] {len(unassigned)}: {', '.join(g.name for g in unassigned)}")


def run(engine: SeatingEngine, args: argparse.Namespace) -> CommandResult | None:
    """Dispatch one parsed command. Returns ``None`` for read-only commands."""
    cmd = args.command
    if cmd == "show":
        _show(engine)
        return None
    if cmd == "export":
        args.out.parent.mkdir(parents=True, exist_ok=True)
        assignments_frame(engine.state).to_csv(args.out, index=False)
        print(f"Wrote {len(engine.guests)} guests to {args.out}")
        return None
    if cmd == "import":
        return engine.import_guests_from_text(read_guest_text(args.path))
    if cmd == "add-table":
        return engine.create_table(capacity=args.capacity, name=args.name)

    if cmd == "add-guest":
        table_id = None
        if args.table:
            table = _find_table(engine, args.table)
            if table is None:
                raise LookupError(f"Unknown table: {args.table}")
            table_id = table.id
        return engine.create_guest(args.name, table_id=table_id)

    if cmd in ("assign", "unassign"):
        guest = _find_guest(engine, args.guest)
        if guest is None:
            raise LookupError(f"Unknown guest: {args.guest}")
        if cmd == "unassign":
            return engine.unassign_from_table(guest.id)
        table = _find_table(engine, args.table)
        if table is None:
            raise LookupError(f"Unknown table: {args.table}")
        if args.seat is None:
            return engine.assign_to_first_available_seat(guest.id, table.id)
        return engine.assign_to_specific_seat(guest.id, table.id, args.seat - 1)

    table = _find_table(engine, args.table)
    if table is None:
        raise LookupError(f"Unknown table: {args.table}")
    if cmd == "rename-table":
        return engine.rename_table(table.id, args.name)
    if cmd == "delete-table":
        return engine.delete_table(table.id)
    return engine.clear_table(table.id)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``wedding-seating`` and ``python -m wedding_seating.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s  %(levelname)-8s  %(message)s",
        datefmt="%H:%M:%S",
    )

    engine = SeatingEngine.from_storage(JsonFileStorage(args.state_dir))
    try:
        result = run(engine, args)
    except LookupError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    if result is None:
        return 0
    if not result.ok:
        print(f"error: {result.status.value}: {result.error}", file=sys.stderr)
        return 1
    for item in result.created:
        print(f"[CREATED] {item.name} ({item.id})")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
