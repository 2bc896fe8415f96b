"""Entity store primitives.

Every function takes a :class:`SeatingState` and returns a new one; nothing
is mutated in place. Business conditions (blank names, unknown ids, no-op
edits) are raised as :class:`SeatingError` subclasses and leave the input
state untouched.

The guest-side ``table_id``/``seat_position`` fields are the source of
truth for seating. :func:`seat_guest` and :func:`unseat_guest` are the only
helpers that change them and they update the table's ``guest_ids`` in the
same step, so the two sides of the relation never drift apart.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple

from .errors import NoOpError, NotFoundError, ValidationError
from .models import TABLE_SHAPES, Guest, SeatingState, Table, clean_text, new_id


# ----------------------------- queries -----------------------------
def get_guest(state: SeatingState, guest_id: str) -> Guest:
    guest = state.guest(guest_id)
    if guest is None:
        raise NotFoundError(f"Unknown guest: {guest_id}")
    return guest


def get_table(state: SeatingState, table_id: str) -> Table:
    table = state.table(table_id)
    if table is None:
        raise NotFoundError(f"Unknown table: {table_id}")
    return table


def unassigned_guests(state: SeatingState) -> List[Guest]:
    return [g for g in state.guests if g.table_id is None]


def guests_at_table(state: SeatingState, table_id: str) -> List[Guest]:
    """Guests seated at ``table_id`` in the table's display order."""
    by_id = {g.id: g for g in state.guests}
    table = get_table(state, table_id)
    return [by_id[gid] for gid in table.guest_ids if gid in by_id]


def occupied_seats(state: SeatingState, table_id: str) -> Dict[int, Guest]:
    """Map seat index to the guest holding it."""
    return {
        g.seat_position: g
        for g in state.guests
        if g.table_id == table_id and g.seat_position is not None
    }


def first_free_seat(state: SeatingState, table: Table) -> Optional[int]:
    """Lowest seat index with no occupant, or ``None`` when every seat is taken."""
    taken: Set[int] = set(occupied_seats(state, table.id))
    for seat in range(table.capacity):
        if seat not in taken:
            return seat
    return None


def search_unassigned(state: SeatingState, query: str) -> List[Guest]:
    """Unassigned guests whose name contains ``query``, ignoring case."""
    pool = unassigned_guests(state)
    needle = (query or "").lower()
    if not needle:
        return pool
    return [g for g in pool if needle in g.name.lower()]


# ----------------------------- relation primitives -----------------------------
def unseat_guest(state: SeatingState, guest_id: str) -> SeatingState:
    """Clear the guest's seat and drop it from its table's ``guest_ids``."""
    guest = get_guest(state, guest_id)
    if guest.table_id is None:
        return state
    table = state.table(guest.table_id)
    state = state.with_guest(replace(guest, table_id=None, seat_position=None))
    if table is not None:
        state = state.with_table(
            replace(table, guest_ids=tuple(gid for gid in table.guest_ids if gid != guest_id))
        )
    return state


def seat_guest(state: SeatingState, guest_id: str, table_id: str, seat: int) -> SeatingState:
    """Put the guest at ``(table_id, seat)``, vacating any previous seat.

    Callers are responsible for making sure the seat is free and the table
    has room.
    """
    state = unseat_guest(state, guest_id)
    guest = get_guest(state, guest_id)
    table = get_table(state, table_id)
    state = state.with_guest(replace(guest, table_id=table_id, seat_position=seat))
    if guest_id not in table.guest_ids:
        state = state.with_table(replace(table, guest_ids=table.guest_ids + (guest_id,)))
    return state


# ----------------------------- guests -----------------------------
def create_guest(
    state: SeatingState, name: str, dietary_restrictions: str = "", notes: str = ""
) -> Tuple[SeatingState, Guest]:
    """Append a new unassigned guest."""
    clean = clean_text(name)
    if not clean:
        raise ValidationError("Guest name must not be empty")
    guest = Guest(
        id=new_id(),
        name=clean,
        dietary_restrictions=clean_text(dietary_restrictions),
        notes=clean_text(notes),
    )
    return replace(state, guests=state.guests + (guest,)), guest


def delete_guest(state: SeatingState, guest_id: str) -> SeatingState:
    state = unseat_guest(state, guest_id)
    return replace(state, guests=tuple(g for g in state.guests if g.id != guest_id))


# ----------------------------- tables -----------------------------
def create_table(
    state: SeatingState,
    capacity: int,
    position: Optional[Tuple[float, float]] = None,
    name: Optional[str] = None,
    shape: str = "round",
) -> Tuple[SeatingState, Table]:
    """Append a new empty table.

    Without an explicit position the table spawns on a diagonal so new
    tables do not stack on top of each other.
    """
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise ValidationError(f"Table capacity must be a positive integer, got {capacity!r}")
    if shape not in TABLE_SHAPES:
        raise ValidationError(f"Unknown table shape: {shape}")
    count = len(state.tables)
    if position is None:
        position = (200 + count * 50, 200 + count * 50)
    label = clean_text(name) or f"Table {count + 1}"
    table = Table(
        id=new_id(),
        name=label,
        capacity=capacity,
        x=float(position[0]),
        y=float(position[1]),
        shape=shape,
    )
    return replace(state, tables=state.tables + (table,)), table


def delete_table(state: SeatingState, table_id: str) -> SeatingState:
    """Remove the table; its guests go back to the unassigned pool."""
    get_table(state, table_id)
    state = _unseat_everyone_at(state, table_id)
    return replace(state, tables=tuple(t for t in state.tables if t.id != table_id))


def rename_table(state: SeatingState, table_id: str, name: str) -> SeatingState:
    table = get_table(state, table_id)
    clean = clean_text(name)
    if not clean or clean == table.name:
        raise NoOpError("Table name unchanged")
    return state.with_table(replace(table, name=clean))


def move_table(state: SeatingState, table_id: str, delta: Tuple[float, float]) -> SeatingState:
    table = get_table(state, table_id)
    dx, dy = delta
    if not dx and not dy:
        raise NoOpError("Table did not move")
    return state.with_table(replace(table, x=table.x + dx, y=table.y + dy))


def clear_table(state: SeatingState, table_id: str) -> SeatingState:
    table = get_table(state, table_id)
    if not table.guest_ids and not any(g.table_id == table_id for g in state.guests):
        raise NoOpError(f"{table.name} is already empty")
    return _unseat_everyone_at(state, table_id)


def _unseat_everyone_at(state: SeatingState, table_id: str) -> SeatingState:
    guests = tuple(
        replace(g, table_id=None, seat_position=None) if g.table_id == table_id else g
        for g in state.guests
    )
    tables = tuple(replace(t, guest_ids=()) if t.id == table_id else t for t in state.tables)
    return replace(state, guests=guests, tables=tables)
