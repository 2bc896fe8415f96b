"""Persistence adapters.

State is stored as two JSON documents under separate keys, one for guests
and one for tables. Loading is forgiving: a missing or unreadable document
yields an empty collection, and seating that contradicts itself is repaired
by sending the affected guests back to the unassigned pool.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from .models import TABLE_SHAPES, Guest, SeatingState, Table, clean_text, new_id

log = logging.getLogger(__name__)

GUESTS_KEY = "wedding-seating-guests"
TABLES_KEY = "wedding-seating-tables"

# Older exports used camelCase field names.
_ALIASES = {
    "tableId": "table_id",
    "seatPosition": "seat_position",
    "dietaryRestrictions": "dietary_restrictions",
    "guestIds": "guest_ids",
}


class MemoryStorage:
    """Dict backed key-value store."""

    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStorage:
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = self._path(key).with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(self._path(key))


# ----------------------------- encoding -----------------------------
def _normalize(record: Dict[str, Any]) -> Dict[str, Any]:
    return {_ALIASES.get(k, k): v for k, v in record.items()}


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def guest_from_dict(record: Dict[str, Any]) -> Optional[Guest]:
    data = _normalize(record)
    name = clean_text(data.get("name"))
    if not name:
        return None
    table_id = data.get("table_id") or None
    return Guest(
        id=str(data.get("id") or new_id()),
        name=name,
        table_id=str(table_id) if table_id is not None else None,
        seat_position=_optional_int(data.get("seat_position")) if table_id else None,
        dietary_restrictions=clean_text(data.get("dietary_restrictions")),
        notes=clean_text(data.get("notes")),
    )


def table_from_dict(record: Dict[str, Any]) -> Optional[Table]:
    data = _normalize(record)
    capacity = _optional_int(data.get("capacity"))
    if capacity is None or capacity < 1:
        return None
    shape = data.get("shape", "round")
    return Table(
        id=str(data.get("id") or new_id()),
        name=clean_text(data.get("name")) or "Table",
        capacity=capacity,
        x=float(data.get("x", 0) or 0),
        y=float(data.get("y", 0) or 0),
        shape=shape if shape in TABLE_SHAPES else "round",
        guest_ids=tuple(str(gid) for gid in data.get("guest_ids") or ()),
    )


def _decode(raw: Optional[str], key: str, builder) -> List[Any]:
    if raw is None:
        return []
    try:
        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError(f"expected a list, got {type(records).__name__}")
        items = [builder(r) for r in records if isinstance(r, dict)]
    except (ValueError, TypeError, OverflowError) as exc:
        log.warning("Ignoring unreadable %s: %s", key, exc)
        return []
    return [item for item in items if item is not None]


# ----------------------------- repair -----------------------------
def repair_state(guests: List[Guest], tables: List[Table]) -> SeatingState:
    """Rebuild table membership from guest seats, unseating anyone who conflicts.

    Guests keep their seat only when the table exists, the seat is in range
    and free, and the table still has room. Table ``guest_ids`` keep their
    stored order for guests that survive; survivors missing from the list are
    appended.
    """
    by_table = {t.id: t for t in tables}
    seen: Set[str] = set()
    taken: Set[Tuple[str, int]] = set()
    counts: Dict[str, int] = {}
    fixed: List[Guest] = []
    dropped = 0
    for g in guests:
        if g.id in seen:
            dropped += 1
            continue
        seen.add(g.id)
        table = by_table.get(g.table_id) if g.table_id else None
        seat = g.seat_position
        valid = (
            table is not None
            and seat is not None
            and 0 <= seat < table.capacity
            and (table.id, seat) not in taken
            and counts.get(table.id, 0) < table.capacity
        )
        if valid:
            taken.add((table.id, seat))
            counts[table.id] = counts.get(table.id, 0) + 1
            fixed.append(g)
        else:
            if g.table_id is not None or g.seat_position is not None:
                dropped += 1
            fixed.append(Guest(g.id, g.name, None, None, g.dietary_restrictions, g.notes))

    seated: Dict[str, List[str]] = {}
    for g in fixed:
        if g.table_id is not None:
            seated.setdefault(g.table_id, []).append(g.id)
    rebuilt: List[Table] = []
    for t in tables:
        members = seated.get(t.id, [])
        ordered = [gid for gid in dict.fromkeys(t.guest_ids) if gid in members]
        ordered += [gid for gid in members if gid not in ordered]
        if tuple(ordered) != t.guest_ids:
            dropped += 1
        rebuilt.append(Table(t.id, t.name, t.capacity, t.x, t.y, t.shape, tuple(ordered)))
    if dropped:
        log.warning("Repaired %d inconsistent seating records on load", dropped)
    return SeatingState(guests=tuple(fixed), tables=tuple(rebuilt))


# ----------------------------- public API -----------------------------
def _read(storage: Any, key: str) -> Optional[str]:
    try:
        return storage.get(key)
    except (OSError, ValueError) as exc:
        log.warning("Cannot read %s: %s", key, exc)
        return None


def load_state(storage: Any) -> SeatingState:
    """Read both collections, falling back to empty ones on bad data."""
    guests = _decode(_read(storage, GUESTS_KEY), GUESTS_KEY, guest_from_dict)
    tables = _decode(_read(storage, TABLES_KEY), TABLES_KEY, table_from_dict)
    log.debug("Loaded %d guests and %d tables", len(guests), len(tables))
    return repair_state(guests, tables)


def save_state(storage: Any, state: SeatingState) -> None:
    storage.set(GUESTS_KEY, json.dumps([asdict(g) for g in state.guests], indent=2))
    storage.set(TABLES_KEY, json.dumps([asdict(t) for t in state.tables], indent=2))
