"""Tabular views of the seating state for download and printing."""
from __future__ import annotations

from typing import Dict

import pandas as pd

from .models import SeatingState, Table


def assignments_frame(state: SeatingState) -> pd.DataFrame:
    """One row per guest: ``guest, table, seat``.

    Seats are 1-based for display; unassigned guests have a blank table and
    seat and sort last.
    """
    tables: Dict[str, Table] = {t.id: t for t in state.tables}
    order = {t.id: i for i, t in enumerate(state.tables)}
    rows = []
    for g in state.guests:
        table = tables.get(g.table_id) if g.table_id else None
        rows.append(
            {
                "guest": g.name,
                "table": table.name if table else "",
                "seat": g.seat_position + 1 if table and g.seat_position is not None else pd.NA,
                "_order": order.get(g.table_id, len(order)),
            }
        )
    df = pd.DataFrame(rows, columns=["guest", "table", "seat", "_order"])
    df["seat"] = df["seat"].astype("Int64")
    return (
        df.sort_values(["_order", "seat"], kind="stable", na_position="last")
        .drop(columns="_order")
        .reset_index(drop=True)
    )


def table_summary_frame(state: SeatingState) -> pd.DataFrame:
    """One row per table with its fill level and guest names."""
    names = {g.id: g.name for g in state.guests}
    return pd.DataFrame(
        [
            {
                "table": t.name,
                "seated": len(t.guest_ids),
                "capacity": t.capacity,
                "guests": ", ".join(names[gid] for gid in t.guest_ids if gid in names),
            }
            for t in state.tables
        ],
        columns=["table", "seated", "capacity", "guests"],
    )
