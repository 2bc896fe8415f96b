import pathlib
import sys

import pandas as pd

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from wedding_seating.engine import SeatingEngine
from wedding_seating.export import assignments_frame, table_summary_frame


def test_assignments_frame():
    engine = SeatingEngine()
    t1 = engine.create_table(capacity=4, name="Head").created[0]
    t2 = engine.create_table(capacity=4, name="Family").created[0]
    zed, amy, bo = (engine.create_guest(n).created[0] for n in ("Zed", "Amy", "Bo"))
    engine.assign_to_specific_seat(zed.id, t2.id, 0)
    engine.assign_to_specific_seat(amy.id, t1.id, 3)

    df = assignments_frame(engine.state)
    assert list(df.columns) == ["guest", "table", "seat"]
    assert df["guest"].tolist() == ["Amy", "Zed", "Bo"]
    assert df["table"].tolist() == ["Head", "Family", ""]
    assert df["seat"].iloc[0] == 4
    assert pd.isna(df["seat"].iloc[2])


def test_empty_frames():
    state = SeatingEngine().state
    assert assignments_frame(state).empty
    assert table_summary_frame(state).empty


def test_table_summary_frame():
    engine = SeatingEngine()
    t = engine.create_table(capacity=2).created[0]
    for name in ("Amy", "Bo"):
        engine.create_guest(name, table_id=t.id)
    row = table_summary_frame(engine.state).iloc[0]
    assert (row["table"], row["seated"], row["capacity"], row["guests"]) == ("Table 1", 2, 2, "Amy, Bo")
