"""Main Streamlit app entrypoint.

Run:
    streamlit run ui/app.py

"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs this file
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.state import auto_fix, build_sample_state
from ui.database import crud
from ui.database.db import db_session


st.set_page_config(
    page_title="PersonaTable",
    page_icon="🗓️",
    layout="wide",
)


def _inject_css() -> None:
    st.markdown(
        """
        <style>
        .block-container { padding-top: 1.2rem; }
        div[data-testid="stMetric"] { background: #0b1220; border: 1px solid rgba(255,255,255,0.08); padding: 12px; border-radius: 12px; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def main() -> None:
    _inject_css()

    st.sidebar.title("PersonaTable")
    st.sidebar.caption("Weekly timetable placement")

    with db_session() as conn:
        state = crud.load_state(conn)

    st.title("Dashboard")
    st.write(
        "Use the sidebar pages to edit grid settings, instructors and courses, "
        "then generate the weekly timetable."
    )

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Instructors", len(state.instructors))
    c2.metric("Courses", len(state.courses))
    c3.metric("Placed sessions", len(state.schedule.placements))
    c4.metric("Unscheduled", sum(u.remaining for u in state.schedule.unscheduled))

    st.divider()
    a1, a2, a3 = st.columns(3)

    if a1.button("Load sample data"):
        with db_session() as conn:
            crud.save_state(conn, build_sample_state(state.settings))
        st.success("Sample loaded. Try generating now.")
        st.rerun()

    if a2.button("Auto-fix data"):
        with db_session() as conn:
            crud.save_state(conn, auto_fix(state))
        st.success("Validated settings and resized availability grids.")
        st.rerun()

    if a3.button("Reset everything", type="primary"):
        with db_session() as conn:
            crud.clear_all(conn)
        st.success("All data cleared.")
        st.rerun()

    st.subheader("What’s next")
    st.info("Set the grid hours in Settings, add Instructors and Courses, then open Timetable and press Generate.")


if __name__ == "__main__":
    main()
