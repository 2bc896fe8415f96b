"""Seat assignment, unassignment and swapping."""
from __future__ import annotations

from dataclasses import replace

from .errors import NoOpError, TableFullError, ValidationError
from .models import SeatingState
from .store import first_free_seat, get_guest, get_table, occupied_seats, seat_guest, unseat_guest


def assign_to_first_available_seat(state: SeatingState, guest_id: str, table_id: str) -> SeatingState:
    """Seat the guest at the lowest free seat index of ``table_id``."""
    guest = get_guest(state, guest_id)
    table = get_table(state, table_id)
    if len(table.guest_ids) >= table.capacity:
        raise TableFullError(f"{table.name} is full")
    seat = first_free_seat(state, table)
    if seat is None:
        raise TableFullError(f"No free seat at {table.name}")
    if guest.table_id == table_id:
        raise NoOpError(f"{guest.name} already sits at {table.name}")
    return seat_guest(state, guest_id, table_id, seat)


def assign_to_specific_seat(state: SeatingState, guest_id: str, table_id: str, seat_number: int) -> SeatingState:
    """Put the guest at an exact seat, swapping with whoever holds it.

    When the seat belongs to someone else, the occupant moves to the mover's
    previous seat. An unassigned mover has no seat to offer, so the occupant
    is sent back to the unassigned pool instead.
    """
    guest = get_guest(state, guest_id)
    table = get_table(state, table_id)
    if isinstance(seat_number, bool) or not isinstance(seat_number, int) or not 0 <= seat_number < table.capacity:
        raise ValidationError(f"Seat {seat_number!r} does not exist at {table.name}")

    occupant = occupied_seats(state, table_id).get(seat_number)
    if occupant is not None and occupant.id == guest_id:
        raise NoOpError(f"{guest.name} already sits there")

    if occupant is None:
        moving_in = guest.table_id != table_id
        if moving_in and len(table.guest_ids) >= table.capacity:
            raise TableFullError(f"{table.name} is full")
        return seat_guest(state, guest_id, table_id, seat_number)

    previous_table, previous_seat = guest.table_id, guest.seat_position
    if previous_table is None or previous_seat is None:
        state = unseat_guest(state, occupant.id)
        return seat_guest(state, guest_id, table_id, seat_number)
    return _swap(state, guest_id, occupant.id)


def unassign_from_table(state: SeatingState, guest_id: str) -> SeatingState:
    """Free the guest's seat. Other seats at the table keep their numbers."""
    guest = get_guest(state, guest_id)
    if guest.table_id is None:
        raise NoOpError(f"{guest.name} is not seated")
    return unseat_guest(state, guest_id)


def _swap(state: SeatingState, a_id: str, b_id: str) -> SeatingState:
    """Exchange the seats of two seated guests in one step.

    Each guest keeps its slot in its old table's ``guest_ids`` order when the
    swap stays at one table; across tables the ids trade places.
    """
    a = get_guest(state, a_id)
    b = get_guest(state, b_id)
    state = state.with_guest(replace(a, table_id=b.table_id, seat_position=b.seat_position))
    state = state.with_guest(replace(b, table_id=a.table_id, seat_position=a.seat_position))
    if a.table_id == b.table_id:
        return state

    def trade(ids, old, new):
        return tuple(new if gid == old else gid for gid in ids)

    table_a = get_table(state, a.table_id)
    table_b = get_table(state, b.table_id)
    state = state.with_table(replace(table_a, guest_ids=trade(table_a.guest_ids, a_id, b_id)))
    return state.with_table(replace(table_b, guest_ids=trade(table_b.guest_ids, b_id, a_id)))
