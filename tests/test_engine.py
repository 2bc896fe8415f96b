"""
Tests for the SeatingEngine command/query façade.
"""
import pathlib
import random
import sys

import pytest

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_seating.engine import SeatingEngine
from wedding_seating.errors import Status
from wedding_seating.models import Guest, Table, check_invariants
from wedding_seating.storage import MemoryStorage, load_state


def engine_with(capacity=2, names=("Alice", "Bob", "Carol")):
    engine = SeatingEngine()
    table = engine.create_table(capacity=capacity).created[0]
    guests = [engine.create_guest(n).created[0] for n in names]
    return engine, table, guests


class TestScenarios:
    def test_carol_claims_occupied_seat(self):
        engine, table, (alice, bob, carol) = engine_with()
        assert engine.assign_to_specific_seat(alice.id, table.id, 0).ok
        assert engine.assign_to_specific_seat(bob.id, table.id, 1).ok
        assert engine.get_table(table.id).is_full

        result = engine.assign_to_specific_seat(carol.id, table.id, 0)
        assert result.status is Status.OK
        assert engine.get_guest(carol.id).seat_position == 0
        assert engine.get_guest(alice.id).table_id is None
        assert [g.name for g in engine.unassigned_guests()] == ["Alice"]
        assert check_invariants(engine.state) == []

    def test_undo_with_empty_history(self):
        engine = SeatingEngine()
        before = engine.state
        result = engine.undo()
        assert result.status is Status.NO_OP
        assert engine.state is before
        assert engine.redo().status is Status.NO_OP

    def test_import_john_doe(self):
        engine = SeatingEngine()
        result = engine.import_guests_from_text("First Name,Last Name\nJohn,Doe")
        assert result.ok
        assert [(g.name, g.table_id) for g in engine.guests] == [("John Doe", None)]
        assert engine.unassigned_guests() == list(engine.guests)

    def test_capacity_bound(self):
        engine, table, (alice, bob, carol) = engine_with()
        engine.assign_to_first_available_seat(alice.id, table.id)
        engine.assign_to_first_available_seat(bob.id, table.id)
        before = engine.state
        depth = engine.history.undo_depth
        result = engine.assign_to_first_available_seat(carol.id, table.id)
        assert result.status is Status.TABLE_FULL
        assert isinstance(result.error, Exception)
        assert engine.state is before
        assert engine.history.undo_depth == depth


class TestResults:
    def test_failures_are_statuses_not_exceptions(self):
        engine = SeatingEngine()
        assert engine.create_guest("   ").status is Status.VALIDATION_ERROR
        assert engine.delete_guest("ghost").status is Status.NOT_FOUND
        assert engine.create_table(capacity=0).status is Status.VALIDATION_ERROR
        assert engine.import_guests_from_text("").status is Status.NO_OP
        assert not engine.can_undo

    def test_result_carries_state(self):
        engine = SeatingEngine()
        result = engine.create_guest("Alice")
        assert result.guests == engine.guests
        assert result.tables == ()
        assert result.created[0].name == "Alice"

    def test_default_capacity(self):
        engine = SeatingEngine(default_capacity=8)
        assert engine.create_table().created[0].capacity == 8

    def test_create_guest_at_table(self):
        engine, table, (alice,) = engine_with(capacity=4, names=("Alice",))
        engine.assign_to_first_available_seat(alice.id, table.id)
        guest = engine.create_guest("Zoe", table_id=table.id).created[0]
        assert (guest.table_id, guest.seat_position) == (table.id, 1)
        assert engine.get_table(table.id).guest_ids == (alice.id, guest.id)
        # one history step for create + seat
        engine.undo()
        assert len(engine.guests) == 1
        assert engine.get_table(table.id).guest_ids == (alice.id,)

    def test_create_guest_at_full_table_stays_unassigned(self):
        engine, table, _ = engine_with(capacity=1, names=("Alice",))
        engine.assign_to_first_available_seat(engine.guests[0].id, table.id)
        result = engine.create_guest("Zoe", table_id=table.id)
        assert result.ok
        assert result.created[0].table_id is None

    def test_seat_map(self):
        engine, table, (alice, _, _) = engine_with(capacity=3)
        engine.assign_to_specific_seat(alice.id, table.id, 2)
        seats = engine.seat_map(table.id)
        assert list(seats) == [0, 1, 2]
        assert seats[2].id == alice.id
        assert seats[0] is None
        assert engine.seat_map("missing") == {}

    def test_search(self):
        engine, _, _ = engine_with()
        assert [g.name for g in engine.search_unassigned("ro")] == ["Carol"]


class TestHistory:
    @pytest.mark.parametrize(
        "command",
        [
            lambda e, t, g: e.assign_to_specific_seat(g[2].id, t.id, 0),
            lambda e, t, g: e.assign_to_first_available_seat(g[2].id, t.id),
            lambda e, t, g: e.unassign_from_table(g[0].id),
            lambda e, t, g: e.delete_guest(g[1].id),
            lambda e, t, g: e.delete_table(t.id),
            lambda e, t, g: e.clear_table(t.id),
            lambda e, t, g: e.rename_table(t.id, "Family"),
            lambda e, t, g: e.move_table(t.id, (15, -5)),
            lambda e, t, g: e.create_table(capacity=6),
            lambda e, t, g: e.create_guest("Dave"),
            lambda e, t, g: e.import_guests_from_text("Dave\nErin"),
        ],
    )
    def test_round_trip(self, command):
        engine, table, guests = engine_with(capacity=3)
        engine.assign_to_specific_seat(guests[0].id, table.id, 0)
        engine.assign_to_specific_seat(guests[1].id, table.id, 1)

        before = engine.state
        assert command(engine, table, guests).ok
        after = engine.state
        assert after != before

        assert engine.undo().ok
        assert engine.state == before
        assert engine.redo().ok
        assert engine.state == after
        assert check_invariants(after) == []

    def test_rejected_command_does_not_checkpoint(self):
        engine, table, _ = engine_with()
        depth = engine.history.undo_depth
        assert not engine.rename_table(table.id, "  ").ok
        assert engine.history.undo_depth == depth

    def test_sixty_operations_keep_fifty(self):
        engine = SeatingEngine()
        for i in range(60):
            assert engine.create_guest(f"Guest {i}").ok
        undone = 0
        while engine.undo().ok:
            undone += 1
        assert undone == 50
        # the oldest ten creations cannot be undone
        assert len(engine.guests) == 10
        assert not engine.can_undo

    def test_new_command_discards_redo(self):
        engine, table, _ = engine_with()
        engine.undo()
        assert engine.can_redo
        engine.create_table(capacity=2)
        assert not engine.can_redo


class TestPersistence:
    def test_commands_save_through_storage(self):
        storage = MemoryStorage()
        engine = SeatingEngine(storage=storage)
        engine.create_guest("Alice")
        assert [g.name for g in load_state(storage).guests] == ["Alice"]
        engine.undo()
        assert load_state(storage).guests == ()

    def test_rejected_commands_do_not_save(self):
        storage = MemoryStorage()
        engine = SeatingEngine(storage=storage)
        engine.create_guest("")
        assert storage.data == {}

    def test_from_storage(self):
        storage = MemoryStorage()
        first = SeatingEngine(storage=storage)
        table = first.create_table(capacity=2).created[0]
        guest = first.create_guest("Alice", table_id=table.id).created[0]

        second = SeatingEngine.from_storage(storage)
        assert second.get_guest(guest.id).seat_position == 0
        assert second.get_table(table.id).guest_ids == (guest.id,)
        assert not second.can_undo


@pytest.mark.parametrize("seed", range(25))
def test_random_operations_preserve_invariants(seed):
    rng = random.Random(seed)
    engine = SeatingEngine(history_limit=10)
    for name in ("A", "B", "C", "D", "E", "F"):
        engine.create_guest(name)
    for cap in (1, 2, 3):
        engine.create_table(capacity=cap)

    def pick_guest():
        return rng.choice(engine.guests).id if engine.guests else "ghost"

    def pick_table():
        return rng.choice(engine.tables).id if engine.tables else "nowhere"

    commands = [
        lambda: engine.create_guest(rng.choice(["G", "H", " "])),
        lambda: engine.delete_guest(pick_guest()),
        lambda: engine.unassign_from_table(pick_guest()),
        lambda: engine.assign_to_first_available_seat(pick_guest(), pick_table()),
        lambda: engine.assign_to_specific_seat(pick_guest(), pick_table(), rng.randrange(-1, 4)),
        lambda: engine.assign_to_specific_seat(pick_guest(), pick_table(), rng.randrange(0, 3)),
        lambda: engine.create_table(capacity=rng.randrange(1, 4)),
        lambda: engine.delete_table(pick_table()),
        lambda: engine.clear_table(pick_table()),
        lambda: engine.move_table(pick_table(), (rng.randint(-5, 5), 0)),
        lambda: engine.import_guests_from_text("First Name,Last Name\nI,J"),
        lambda: engine.undo(),
        lambda: engine.redo(),
    ]
    for _ in range(200):
        before = engine.state
        result = rng.choice(commands)()
        assert check_invariants(engine.state) == [], result
        if not result.ok:
            assert engine.state is before
        for t in engine.tables:
            assert len(t.guest_ids) <= t.capacity


def test_constructor_repairs_inconsistent_collections():
    guests = [Guest("a", "Alice", "t", 0), Guest("b", "Bob", "t", 0), Guest("c", "Cy", "gone", 1)]
    tables = [Table("t", "T", 2, guest_ids=("b",))]
    engine = SeatingEngine(guests, tables)
    assert check_invariants(engine.state) == []
    assert engine.get_table("t").guest_ids == ("a",)
    assert [g.name for g in engine.unassigned_guests()] == ["Bob", "Cy"]
