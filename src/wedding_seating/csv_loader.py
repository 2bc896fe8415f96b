"""Guest list import.

Two layouts are understood:

* A structured export whose header names ``First Name`` and ``Last Name``
  columns. Each row can carry a primary guest, a partner and up to five
  children, and every non-empty name among them becomes its own guest.
* Anything else: each line's first comma separated field is a full name.

Fields are split on plain commas with double quotes stripped. Short rows are
padded with empty fields, so a row missing trailing columns just produces
fewer guests.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, List, Tuple

import pandas as pd

from .errors import NoOpError
from .models import Guest, SeatingState
from .store import create_guest

log = logging.getLogger(__name__)

MAX_CHILDREN = 5
NAME_SLOTS: List[Tuple[str, str]] = (
    [("first name", "last name"), ("partner first name", "partner last name")]
    + [(f"child {i} first name", f"child {i} last name") for i in range(1, MAX_CHILDREN + 1)]
)


def _split_cells(raw_text: str) -> pd.DataFrame:
    """Split non-blank lines into a frame of cleaned string cells."""
    lines = pd.Series(str(raw_text).lstrip("\ufeff").splitlines(), dtype="object")
    lines = lines[lines.str.strip() != ""]
    if lines.empty:
        return pd.DataFrame()
    cells = lines.str.split(",", expand=True).fillna("")
    cells = cells.apply(lambda col: col.astype(str).str.replace('"', "", regex=False).str.strip())
    return cells.reset_index(drop=True)


def is_structured_header(header_line: str) -> bool:
    text = header_line.lower()
    return "first name" in text and "last name" in text


def _structured_names(cells: pd.DataFrame) -> List[str]:
    labels = [str(h).lower() for h in cells.iloc[0]]
    rows = cells.iloc[1:]
    if rows.empty:
        return []

    def field(label: str) -> pd.Series:
        # First matching header wins; an absent column reads as empty.
        if label in labels:
            return rows[cells.columns[labels.index(label)]]
        return pd.Series("", index=rows.index, dtype="object")

    slots = pd.concat(
        [(field(first) + " " + field(last)).str.strip() for first, last in NAME_SLOTS],
        axis=1,
    )
    # Row-major: every slot of row 1, then row 2, ...
    return [name for name in slots.to_numpy().ravel().tolist() if name]


def parse_guest_names(raw_text: str) -> List[str]:
    """Return guest names in file order."""
    cells = _split_cells(raw_text)
    if cells.empty:
        return []
    first_line = next(line for line in str(raw_text).lstrip("\ufeff").splitlines() if line.strip())
    if is_structured_header(first_line):
        names = _structured_names(cells)
        log.debug("Structured guest list: %d rows, %d names", len(cells) - 1, len(names))
        return names
    names = [name for name in cells[cells.columns[0]].tolist() if name]
    log.debug("Single column guest list: %d names", len(names))
    return names


def import_guests(state: SeatingState, raw_text: str) -> Tuple[SeatingState, List[Guest]]:
    """Append one unassigned guest per parsed name.

    Existing guests and seating are left alone and names are not
    de-duplicated against the current list.
    """
    names = parse_guest_names(raw_text)
    if not names:
        raise NoOpError("No guest names found in import")
    created: List[Guest] = []
    for name in names:
        state, guest = create_guest(state, name)
        created.append(guest)
    return state, created


def read_guest_text(source: Path | str | IO[Any]) -> str:
    """Read a guest list from a path or an open (text or binary) file object."""
    if hasattr(source, "read"):
        if hasattr(source, "seek"):
            source.seek(0)
        data = source.read()
        if isinstance(data, bytes):
            data = data.decode("utf-8-sig")
        return data
    return Path(source).read_text(encoding="utf-8-sig")
