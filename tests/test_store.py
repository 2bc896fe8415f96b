import pathlib
import sys

import pytest

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_seating import store
from wedding_seating.assignment import assign_to_first_available_seat
from wedding_seating.errors import NoOpError, NotFoundError, ValidationError
from wedding_seating.models import SeatingState, check_invariants


def seated_state():
    state = SeatingState()
    state, table = store.create_table(state, 4)
    state, alice = store.create_guest(state, "Alice")
    state, bob = store.create_guest(state, "Bob")
    state = assign_to_first_available_seat(state, alice.id, table.id)
    state = assign_to_first_available_seat(state, bob.id, table.id)
    return state, table, alice, bob


class TestGuests:
    def test_create_guest_trims_name(self):
        state, guest = store.create_guest(SeatingState(), "  Alice  ")
        assert guest.name == "Alice"
        assert guest.table_id is None and guest.seat_position is None
        assert state.guests == (guest,)

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, name):
        with pytest.raises(ValidationError):
            store.create_guest(SeatingState(), name)

    def test_ids_are_unique(self):
        state, a = store.create_guest(SeatingState(), "Alice")
        state, b = store.create_guest(state, "Alice")
        assert a.id != b.id
        assert len(state.guests) == 2

    def test_delete_seated_guest_frees_table(self):
        state, table, alice, bob = seated_state()
        state = store.delete_guest(state, alice.id)
        assert state.guest(alice.id) is None
        assert state.table(table.id).guest_ids == (bob.id,)
        assert check_invariants(state) == []

    def test_delete_unknown_guest(self):
        with pytest.raises(NotFoundError):
            store.delete_guest(SeatingState(), "nope")


class TestTables:
    def test_create_table_defaults(self):
        state, first = store.create_table(SeatingState(), 8)
        state, second = store.create_table(state, 10)
        assert first.name == "Table 1"
        assert second.name == "Table 2"
        assert first.position == (200.0, 200.0)
        assert second.position == (250.0, 250.0)
        assert second.guest_ids == ()

    def test_explicit_position_and_name(self):
        _, table = store.create_table(SeatingState(), 2, (10, -5), name="Head")
        assert table.position == (10.0, -5.0)
        assert table.name == "Head"

    @pytest.mark.parametrize("capacity", [0, -1, 2.5, "4", True])
    def test_capacity_must_be_positive_int(self, capacity):
        with pytest.raises(ValidationError):
            store.create_table(SeatingState(), capacity)

    def test_no_upper_capacity_bound(self):
        _, table = store.create_table(SeatingState(), 500)
        assert table.capacity == 500

    def test_delete_table_unassigns_guests(self):
        state, table, alice, bob = seated_state()
        state = store.delete_table(state, table.id)
        assert state.tables == ()
        assert len(state.guests) == 2
        assert all(g.table_id is None and g.seat_position is None for g in state.guests)
        assert check_invariants(state) == []

    def test_rename(self):
        state, table = store.create_table(SeatingState(), 2)
        state = store.rename_table(state, table.id, "  Family  ")
        assert state.table(table.id).name == "Family"

    @pytest.mark.parametrize("name", ["", "   ", "Table 1"])
    def test_rename_noop(self, name):
        state, table = store.create_table(SeatingState(), 2)
        with pytest.raises(NoOpError):
            store.rename_table(state, table.id, name)

    def test_move_adds_delta(self):
        state, table = store.create_table(SeatingState(), 2, (0, 0))
        state = store.move_table(state, table.id, (-5000, 12.5))
        assert state.table(table.id).position == (-5000.0, 12.5)

    def test_move_zero_delta_is_noop(self):
        state, table = store.create_table(SeatingState(), 2)
        with pytest.raises(NoOpError):
            store.move_table(state, table.id, (0, 0))

    def test_clear_table(self):
        state, table, alice, bob = seated_state()
        state = store.clear_table(state, table.id)
        assert state.table(table.id).guest_ids == ()
        assert store.unassigned_guests(state) == list(state.guests)
        assert check_invariants(state) == []

    def test_clear_empty_table_is_noop(self):
        state, table = store.create_table(SeatingState(), 2)
        with pytest.raises(NoOpError):
            store.clear_table(state, table.id)

    def test_unknown_table(self):
        for fn, args in [
            (store.delete_table, ()),
            (store.rename_table, ("x",)),
            (store.move_table, ((1, 1),)),
            (store.clear_table, ()),
        ]:
            with pytest.raises(NotFoundError):
                fn(SeatingState(), "missing", *args)


class TestQueries:
    def test_occupied_and_free_seats(self):
        state, table, alice, bob = seated_state()
        seats = store.occupied_seats(state, table.id)
        assert {seat: g.name for seat, g in seats.items()} == {0: "Alice", 1: "Bob"}
        assert store.first_free_seat(state, state.table(table.id)) == 2

    def test_guests_at_table_in_display_order(self):
        state, table, alice, bob = seated_state()
        assert [g.name for g in store.guests_at_table(state, table.id)] == ["Alice", "Bob"]

    def test_search_unassigned_is_case_insensitive(self):
        state, _, _, _ = seated_state()
        state, carol = store.create_guest(state, "Carol King")
        state, _ = store.create_guest(state, "Dave")
        assert store.search_unassigned(state, "KIN") == [carol]
        assert len(store.search_unassigned(state, "")) == 2
        # seated guests never show up
        assert store.search_unassigned(state, "alice") == []
