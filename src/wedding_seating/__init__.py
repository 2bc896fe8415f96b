"""Wedding seating planner package."""
from .models import Guest, Table, SeatingState, check_invariants
from .errors import (
    Status,
    SeatingError,
    ValidationError,
    NotFoundError,
    TableFullError,
    NoOpError,
)
from .csv_loader import parse_guest_names, import_guests, read_guest_text
from .history import History
from .engine import SeatingEngine, CommandResult
from .storage import JsonFileStorage, MemoryStorage, load_state, save_state

__all__ = [
    "Guest",
    "Table",
    "SeatingState",
    "check_invariants",
    "Status",
    "SeatingError",
    "ValidationError",
    "NotFoundError",
    "TableFullError",
    "NoOpError",
    "parse_guest_names",
    "import_guests",
    "read_guest_text",
    "History",
    "SeatingEngine",
    "CommandResult",
    "JsonFileStorage",
    "MemoryStorage",
    "load_state",
    "save_state",
]
