"""Data models for the seating planner."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple
import math
import uuid


DEFAULT_CAPACITY = 12
TABLE_SHAPES = ("round", "rectangular")


def new_id() -> str:
    return str(uuid.uuid4())


def clean_text(value: object) -> str:
    """Return ``value`` as a trimmed string.

    ``None`` and ``float('nan')`` (what pandas hands back for empty cells)
    become ``""``.
    """
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Guest:
    """A person to be seated."""

    id: str
    name: str
    table_id: Optional[str] = None
    seat_position: Optional[int] = None
    dietary_restrictions: str = ""
    notes: str = ""

    @property
    def is_seated(self) -> bool:
        return self.table_id is not None


@dataclass(frozen=True)
class Table:
    """A capacity-bounded table with a fixed ring of numbered seats."""

    id: str
    name: str
    capacity: int
    x: float = 0.0
    y: float = 0.0
    shape: str = "round"
    guest_ids: Tuple[str, ...] = ()

    @property
    def is_full(self) -> bool:
        return len(self.guest_ids) >= self.capacity

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class SeatingState:
    """Immutable pair of guest and table collections in insertion order."""

    guests: Tuple[Guest, ...] = ()
    tables: Tuple[Table, ...] = ()

    def guest(self, guest_id: str) -> Optional[Guest]:
        return next((g for g in self.guests if g.id == guest_id), None)

    def table(self, table_id: str) -> Optional[Table]:
        return next((t for t in self.tables if t.id == table_id), None)

    def with_guest(self, guest: Guest) -> "SeatingState":
        """Replace the guest with the same id."""
        return replace(self, guests=tuple(guest if g.id == guest.id else g for g in self.guests))

    def with_table(self, table: Table) -> "SeatingState":
        """Replace the table with the same id."""
        return replace(self, tables=tuple(table if t.id == table.id else t for t in self.tables))


def check_invariants(state: SeatingState) -> List[str]:
    """Return a description of every consistency violation in ``state``.

    An empty list means the guest and table collections agree with each
    other: membership is mirrored on both sides, seats are unique and in
    range, and no table is over capacity.
    """
    problems: List[str] = []
    tables: Dict[str, Table] = {t.id: t for t in state.tables}
    members: Dict[str, List[str]] = {}
    for t in state.tables:
        for gid in t.guest_ids:
            members.setdefault(gid, []).append(t.id)
        if len(t.guest_ids) > t.capacity:
            problems.append(f"table {t.name} holds {len(t.guest_ids)} guests, capacity {t.capacity}")
        if len(set(t.guest_ids)) != len(t.guest_ids):
            problems.append(f"table {t.name} lists a guest twice")

    seats: Dict[Tuple[str, int], str] = {}
    for g in state.guests:
        listed = members.get(g.id, [])
        if g.table_id is None:
            if listed:
                problems.append(f"unassigned guest {g.name} listed at {listed}")
            if g.seat_position is not None:
                problems.append(f"unassigned guest {g.name} has seat {g.seat_position}")
            continue
        table = tables.get(g.table_id)
        if table is None:
            problems.append(f"guest {g.name} references missing table {g.table_id}")
            continue
        if listed != [g.table_id]:
            problems.append(f"guest {g.name} seated at {g.table_id} but listed at {listed}")
        if g.seat_position is None:
            problems.append(f"guest {g.name} at {table.name} has no seat")
            continue
        if not 0 <= g.seat_position < table.capacity:
            problems.append(f"guest {g.name} seat {g.seat_position} outside {table.name}")
        key = (g.table_id, g.seat_position)
        if key in seats:
            problems.append(f"seat {g.seat_position} at {table.name} held by {seats[key]} and {g.name}")
        seats[key] = g.name

    known = {g.id for g in state.guests}
    for gid, table_ids in members.items():
        if gid not in known:
            problems.append(f"tables {table_ids} list unknown guest {gid}")
    return problems
