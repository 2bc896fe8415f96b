"""Seating canvas rendering.

Tables sit at their stored canvas position with their seats on a ring
around them. Seat 0 is at the top and numbering runs clockwise.
"""
from __future__ import annotations

import math
from typing import Dict, List, Tuple

import networkx as nx
from pyvis.network import Network

from .models import Guest, SeatingState, Table
from .store import occupied_seats

SEAT_RADIUS = 45
CANVAS_SEAT_RADIUS = 80

PALETTE = [
    "#FFB347", "#77DD77", "#AEC6CF", "#C23B22", "#F49AC2", "#B39EB5",
    "#03C03C", "#779ECB", "#966FD6", "#FFD700", "#FF6961", "#CB99C9",
    "#CFCFC4", "#FDFD96", "#84B6F4", "#FDCAE1",
]
EMPTY_SEAT = "#555555"


def seat_offsets(capacity: int, radius: float = SEAT_RADIUS) -> List[Tuple[float, float]]:
    """Offset of each seat from the table centre."""
    offsets = []
    for seat in range(capacity):
        angle = seat / capacity * 2 * math.pi - math.pi / 2
        offsets.append((math.cos(angle) * radius, math.sin(angle) * radius))
    return offsets


def build_seating_graph(state: SeatingState, seat_radius: float = CANVAS_SEAT_RADIUS) -> nx.Graph:
    """One node per table and per seat, seats joined to their table."""
    G = nx.Graph()
    for i, table in enumerate(state.tables):
        color = PALETTE[i % len(PALETTE)]
        taken = occupied_seats(state, table.id)
        G.add_node(
            table.id,
            label=table.name,
            title=_table_tooltip(table),
            color=color,
            x=table.x,
            y=table.y,
            physics=False,
            shape="circle" if table.shape == "round" else "box",
            kind="table",
        )
        for seat, (dx, dy) in enumerate(seat_offsets(table.capacity, seat_radius)):
            guest = taken.get(seat)
            node = f"{table.id}:{seat}"
            G.add_node(
                node,
                label=guest.name if guest else str(seat + 1),
                title=_seat_tooltip(table, seat, guest),
                color=color if guest else EMPTY_SEAT,
                x=table.x + dx,
                y=table.y + dy,
                physics=False,
                shape="dot",
                size=14 if guest else 8,
                kind="seat",
                guest_id=guest.id if guest else "",
            )
            G.add_edge(table.id, node, color="#444444", width=1)
    return G


def render_seating_canvas(state: SeatingState, height: str = "700px") -> str:
    """Return standalone HTML for the seating canvas."""
    net = Network(height=height, width="100%", bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)  # positions come from the tables
    net.from_nx(build_seating_graph(state))
    html = net.generate_html()
    return html.replace("</body>", _legend_html(state) + "</body>", 1)


def _table_tooltip(table: Table) -> str:
    return (
        f"<b>{table.name}</b><br>"
        f"Seated: {len(table.guest_ids)} / {table.capacity}"
    )


def _seat_tooltip(table: Table, seat: int, guest: Guest | None) -> str:
    who = guest.name if guest else "Empty"
    text = f"{table.name}, seat {seat + 1}: {who}"
    if guest and guest.dietary_restrictions:
        text += f"<br>Diet: {guest.dietary_restrictions}"
    return text


def _legend_html(state: SeatingState) -> str:
    seated = sum(1 for g in state.guests if g.table_id)
    counts: Dict[str, int] = {"tables": len(state.tables), "seated": seated,
                              "unassigned": len(state.guests) - seated}
    css = """
    <style>
    .legend-box{
      position:absolute;right:12px;bottom:12px;
      background:#222;color:#eee;border:1px solid #444;border-radius:8px;
      padding:8px 12px;font-family:system-ui, -apple-system, Segoe UI, Roboto, Arial;font-size:12px;
      z-index:10;
    }
    .legend-swatch{display:inline-block;width:12px;height:12px;margin-right:6px;vertical-align:middle;border:1px solid #444;}
    </style>
    """
    return f"""
    {css}
    <div class="legend-box">
      <div><span class="legend-swatch" style="background:{EMPTY_SEAT}"></span>empty seat</div>
      <div style="margin-top:6px;">node color: table</div>
      <div>tables: {counts['tables']}</div>
      <div>seated: {counts['seated']}</div>
      <div>unassigned: {counts['unassigned']}</div>
    </div>
    """
