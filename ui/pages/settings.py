"""Grid Settings page (day labels, start/end hour)."""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs pages
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.models import TimetableSettings
from scheduling.state import END_HOUR_RANGE, MAX_DAYS, START_HOUR_RANGE, apply_settings
from ui.database import crud
from ui.database.db import db_session
from ui.utils.validators import validate_hours, validate_positive_int, validate_unique


def main() -> None:
    st.title("Grid Settings")

    with db_session() as conn:
        state = crud.load_state(conn)

    s = state.settings

    with st.form("settings_form"):
        st.caption("Day names (comma-separated, in display order)")
        day_names_text = st.text_input("Days", value=", ".join(s.days))

        c1, c2 = st.columns(2)
        start_hour = c1.number_input(
            "Start hour",
            min_value=START_HOUR_RANGE[0],
            max_value=START_HOUR_RANGE[1],
            value=int(s.start_hour),
        )
        end_hour = c2.number_input(
            "End hour",
            min_value=END_HOUR_RANGE[0],
            max_value=END_HOUR_RANGE[1],
            value=int(s.end_hour),
        )

        st.info("Changing the grid resizes every availability table and clamps course windows to the new hours.")
        submitted = st.form_submit_button("Save Settings")

    if not submitted:
        return

    parsed_day_names = [x.strip() for x in day_names_text.split(",") if x.strip()]
    ok, msg = validate_unique(parsed_day_names, "Day names")
    if not ok:
        st.error(msg)
        return

    ok, msg = validate_positive_int(len(parsed_day_names), "Number of days", 1, MAX_DAYS)
    if not ok:
        st.error(msg)
        return

    ok, msg = validate_hours(start_hour=int(start_hour), end_hour=int(end_hour))
    if not ok:
        st.error(msg)
        return

    apply_settings(
        state,
        TimetableSettings(days=tuple(parsed_day_names), start_hour=int(start_hour), end_hour=int(end_hour)),
    )
    with db_session() as conn:
        crud.save_state(conn, state)

    st.success("Settings saved.")


if __name__ == "__main__":
    main()
