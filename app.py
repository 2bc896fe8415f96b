"""Streamlit UI for the wedding seating planner."""
from __future__ import annotations

# Add src to sys.path so wedding_seating can be found
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import streamlit as st
import streamlit.components.v1 as components

from wedding_seating.canvas import render_seating_canvas
from wedding_seating.csv_loader import read_guest_text
from wedding_seating.engine import CommandResult, SeatingEngine
from wedding_seating.export import assignments_frame, table_summary_frame
from wedding_seating.storage import JsonFileStorage

STATE_DIR = os.environ.get("WEDDING_SEATING_STATE_DIR", ".seating")

# -----------------------------
# Helpers
# -----------------------------

def get_engine() -> SeatingEngine:
    """One engine per browser session, loaded from disk on first use."""
    if "engine" not in st.session_state:
        st.session_state["engine"] = SeatingEngine.from_storage(JsonFileStorage(STATE_DIR))
    return st.session_state["engine"]


def report(result: CommandResult, success: str | None = None) -> None:
    """Show a warning for rejected commands, or a success note."""
    if result.ok:
        if success:
            st.toast(success)
        return
    st.warning(f"{result.status.value.replace('_', ' ')}: {result.error}")


def apply(result: CommandResult) -> None:
    """Rerun on success so every widget reflects the new state."""
    if result.ok:
        st.rerun()
    report(result)


engine = get_engine()

# -----------------------------
# Sidebar options
# -----------------------------

st.sidebar.header("Tables")
capacity = st.sidebar.number_input(
    "Table size",
    min_value=1,
    max_value=20,
    value=engine.default_capacity,
    help="Number of seats for newly added tables.",
)
if st.sidebar.button("Add table"):
    report(engine.create_table(capacity=int(capacity)), "Table added")

col_undo, col_redo = st.sidebar.columns(2)
if col_undo.button("Undo", disabled=not engine.can_undo):
    report(engine.undo())
if col_redo.button("Redo", disabled=not engine.can_redo):
    report(engine.redo())

st.sidebar.header("Guests")
with st.sidebar.form("add_guest", clear_on_submit=True):
    new_name = st.text_input("Guest name")
    table_choice = st.selectbox(
        "Seat at table",
        options=[None] + [t.id for t in engine.tables],
        format_func=lambda tid: "Unassigned" if tid is None else engine.get_table(tid).name,
    )
    if st.form_submit_button("Add guest"):
        report(engine.create_guest(new_name, table_id=table_choice), "Guest added")

_guest_file = st.sidebar.file_uploader("Import guest list CSV", type="csv")
if _guest_file is not None and st.sidebar.button("Import guests"):
    try:
        result = engine.import_guests_from_text(read_guest_text(_guest_file))
    except ValueError as e:
        st.sidebar.error(f"Could not read {_guest_file.name}: {e}")
    else:
        report(result, f"Imported {len(result.created)} guests")

# -----------------------------
# Main UI
# -----------------------------

st.title("Wedding Seating Planner")

# Unassigned guests with quick assignment
st.subheader("Unassigned guests")
query = st.text_input("Search guests", "")
unassigned = engine.search_unassigned(query)
if not engine.unassigned_guests():
    st.caption("Everyone has a seat.")
elif not unassigned:
    st.caption("No guests match your search.")
for guest in unassigned:
    c_name, c_table, c_go, c_del = st.columns([3, 3, 1, 1])
    c_name.write(guest.name)
    target = c_table.selectbox(
        "Table",
        options=[t.id for t in engine.tables],
        format_func=lambda tid: engine.get_table(tid).name,
        key=f"target-{guest.id}",
        label_visibility="collapsed",
    )
    if c_go.button("Seat", key=f"seat-{guest.id}", disabled=target is None):
        apply(engine.assign_to_first_available_seat(guest.id, target))
    if c_del.button("Delete", key=f"del-{guest.id}"):
        apply(engine.delete_guest(guest.id))

# Per table seat view
st.subheader("Tables")
for table in engine.tables:
    with st.expander(f"{table.name} ({len(table.guest_ids)}/{table.capacity})"):
        new_table_name = st.text_input("Name", table.name, key=f"name-{table.id}-{table.name}")
        if new_table_name != table.name:
            apply(engine.rename_table(table.id, new_table_name))

        for seat, occupant in engine.seat_map(table.id).items():
            c_seat, c_who, c_act = st.columns([1, 4, 2])
            c_seat.write(f"Seat {seat + 1}")
            choices = [None] + [g.id for g in engine.guests]
            pick = c_who.selectbox(
                f"Seat {seat + 1}",
                options=choices,
                index=choices.index(occupant.id) if occupant else 0,
                format_func=lambda gid: "Empty" if gid is None else engine.get_guest(gid).name,
                key=f"seat-{table.id}-{seat}-{occupant.id if occupant else 'empty'}",
                label_visibility="collapsed",
            )
            if pick is not None and (occupant is None or pick != occupant.id):
                apply(engine.assign_to_specific_seat(pick, table.id, seat))
            if occupant and c_act.button("Remove", key=f"rm-{table.id}-{seat}"):
                apply(engine.unassign_from_table(occupant.id))

        c_clear, c_delete = st.columns(2)
        if c_clear.button("Clear table", key=f"clear-{table.id}"):
            apply(engine.clear_table(table.id))
        confirm = c_delete.checkbox("Confirm delete", key=f"confirm-{table.id}")
        if c_delete.button("Delete table", key=f"drop-{table.id}", disabled=not confirm):
            apply(engine.delete_table(table.id))

# Summary and download
if engine.guests:
    st.subheader("Assignments")
    result_df = assignments_frame(engine.state)
    st.dataframe(result_df, use_container_width=True)
    st.dataframe(table_summary_frame(engine.state), use_container_width=True)
    csv_bytes = result_df.to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download assignments as CSV",
        csv_bytes,
        file_name="assignments.csv",
    )

# Canvas
if engine.tables:
    st.subheader("Seating canvas")
    try:
        html = render_seating_canvas(engine.state)
    except Exception as e:
        st.exception(e)
    else:
        components.html(html, height=720, scrolling=True)
else:
    st.info("Add a table to start seating guests.")

st.caption(f"{len(engine.guests)} guests, {len(engine.tables)} tables. Saved to {STATE_DIR}.")
