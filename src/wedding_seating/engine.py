"""Seating engine façade.

:class:`SeatingEngine` owns the guest and table collections and the undo
history. Every command evaluates against the current immutable state; on
success the pre-mutation state is checkpointed and the new state committed.
Business failures come back as a :class:`CommandResult` status with the
state unchanged, never as exceptions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from . import assignment, csv_loader, store
from .errors import NoOpError, SeatingError, Status, TableFullError
from .history import HISTORY_LIMIT, History
from .models import DEFAULT_CAPACITY, Guest, SeatingState, Table
from .storage import load_state, repair_state, save_state

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """New authoritative state plus how the command went."""

    state: SeatingState
    status: Status = Status.OK
    error: Optional[SeatingError] = None
    created: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @property
    def guests(self) -> Tuple[Guest, ...]:
        return self.state.guests

    @property
    def tables(self) -> Tuple[Table, ...]:
        return self.state.tables


class SeatingEngine:
    """Command/query interface over the seating state."""

    def __init__(
        self,
        guests: Iterable[Guest] = (),
        tables: Iterable[Table] = (),
        history_limit: int = HISTORY_LIMIT,
        default_capacity: int = DEFAULT_CAPACITY,
        storage: Any = None,
    ) -> None:
        self._state = repair_state(list(guests), list(tables))
        self.history = History(limit=history_limit)
        self.default_capacity = default_capacity
        # Optional key-value adapter, see storage.py.
        self.storage = storage

    @classmethod
    def from_storage(cls, storage: Any, **kwargs: Any) -> "SeatingEngine":
        state = load_state(storage)
        return cls(state.guests, state.tables, storage=storage, **kwargs)

    # ----------------------------- queries -----------------------------
    @property
    def state(self) -> SeatingState:
        return self._state

    @property
    def guests(self) -> Tuple[Guest, ...]:
        return self._state.guests

    @property
    def tables(self) -> Tuple[Table, ...]:
        return self._state.tables

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def get_guest(self, guest_id: str) -> Optional[Guest]:
        return self._state.guest(guest_id)

    def get_table(self, table_id: str) -> Optional[Table]:
        return self._state.table(table_id)

    def unassigned_guests(self) -> List[Guest]:
        return store.unassigned_guests(self._state)

    def search_unassigned(self, query: str) -> List[Guest]:
        return store.search_unassigned(self._state, query)

    def seat_map(self, table_id: str) -> Dict[int, Optional[Guest]]:
        """Every seat index of the table mapped to its occupant (or ``None``)."""
        table = self._state.table(table_id)
        if table is None:
            return {}
        taken = store.occupied_seats(self._state, table_id)
        return {seat: taken.get(seat) for seat in range(table.capacity)}

    # ----------------------------- commands -----------------------------
    def create_guest(self, name: str, table_id: Optional[str] = None) -> CommandResult:
        """Add a guest; with ``table_id`` also seat it there if the table has room."""

        def op(state: SeatingState):
            state, guest = store.create_guest(state, name)
            if table_id is not None:
                try:
                    state = assignment.assign_to_first_available_seat(state, guest.id, table_id)
                except TableFullError:
                    log.info("Table %s is full, %s stays unassigned", table_id, guest.name)
                guest = state.guest(guest.id)
            return state, (guest,)

        return self._run("create_guest", op)

    def delete_guest(self, guest_id: str) -> CommandResult:
        return self._run("delete_guest", lambda s: store.delete_guest(s, guest_id))

    def unassign_from_table(self, guest_id: str) -> CommandResult:
        return self._run("unassign_from_table", lambda s: assignment.unassign_from_table(s, guest_id))

    def assign_to_first_available_seat(self, guest_id: str, table_id: str) -> CommandResult:
        return self._run(
            "assign_to_first_available_seat",
            lambda s: assignment.assign_to_first_available_seat(s, guest_id, table_id),
        )

    def assign_to_specific_seat(self, guest_id: str, table_id: str, seat_number: int) -> CommandResult:
        return self._run(
            "assign_to_specific_seat",
            lambda s: assignment.assign_to_specific_seat(s, guest_id, table_id, seat_number),
        )

    def create_table(
        self,
        capacity: Optional[int] = None,
        position: Optional[Tuple[float, float]] = None,
        name: Optional[str] = None,
        shape: str = "round",
    ) -> CommandResult:
        size = self.default_capacity if capacity is None else capacity

        def op(state: SeatingState):
            state, table = store.create_table(state, size, position, name=name, shape=shape)
            return state, (table,)

        return self._run("create_table", op)

    def delete_table(self, table_id: str) -> CommandResult:
        return self._run("delete_table", lambda s: store.delete_table(s, table_id))

    def rename_table(self, table_id: str, name: str) -> CommandResult:
        return self._run("rename_table", lambda s: store.rename_table(s, table_id, name))

    def move_table(self, table_id: str, delta: Tuple[float, float]) -> CommandResult:
        return self._run("move_table", lambda s: store.move_table(s, table_id, delta))

    def clear_table(self, table_id: str) -> CommandResult:
        return self._run("clear_table", lambda s: store.clear_table(s, table_id))

    def import_guests_from_text(self, raw_text: str) -> CommandResult:
        def op(state: SeatingState):
            state, created = csv_loader.import_guests(state, raw_text)
            return state, tuple(created)

        return self._run("import_guests_from_text", op)

    def undo(self) -> CommandResult:
        try:
            previous = self.history.undo(self._state)
        except NoOpError as exc:
            return CommandResult(self._state, exc.status, exc)
        return self._commit(previous)

    def redo(self) -> CommandResult:
        try:
            following = self.history.redo()
        except NoOpError as exc:
            return CommandResult(self._state, exc.status, exc)
        return self._commit(following)

    # ----------------------------- internals -----------------------------
    def _run(self, name: str, op: Callable[[SeatingState], Any]) -> CommandResult:
        """Evaluate ``op`` and commit its result behind a history checkpoint."""
        before = self._state
        try:
            outcome = op(before)
        except SeatingError as exc:
            log.info("%s rejected (%s): %s", name, exc.status.value, exc)
            return CommandResult(before, exc.status, exc)

        created: Tuple[Any, ...] = ()
        if isinstance(outcome, tuple):
            outcome, created = outcome
        log.debug("%s applied", name)
        self.history.checkpoint(before)
        return self._commit(outcome, created)

    def _commit(self, state: SeatingState, created: Tuple[Any, ...] = ()) -> CommandResult:
        self._state = state
        if self.storage is not None:
            save_state(self.storage, state)
        return CommandResult(state, Status.OK, None, created)
