"""Instructor Management page.

Streamlit pages are auto-discovered when running `streamlit run ui/app.py`.

"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pandas as pd
import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs pages
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.availability import blocked_slots, make_default_availability, normalize_availability
from scheduling.models import Availability, Instructor, TimetableSettings
from ui.database import crud
from ui.database.db import db_session
from ui.utils.id_generator import generate_instructor_id
from ui.utils.validators import require_non_empty, validate_id


def availability_to_df(settings: TimetableSettings, availability: Availability) -> pd.DataFrame:
    """Editable grid: rows=hours, one bool column per day."""

    rows = []
    for h in range(settings.hours_count):
        row = {"Time": f"{settings.start_hour + h:02d}:00"}
        for d, day in enumerate(settings.days):
            row[day] = bool(availability[d][h]) if d < len(availability) and h < len(availability[d]) else True
        rows.append(row)
    return pd.DataFrame(rows, columns=["Time"] + list(settings.days))


def df_to_availability(settings: TimetableSettings, df: pd.DataFrame) -> Availability:
    days: List[tuple] = []
    for day in settings.days:
        col = df[day].tolist() if day in df.columns else []
        days.append(tuple(bool(v) for v in col))
    return tuple(days)


def main() -> None:
    st.title("Instructors")

    with db_session() as conn:
        settings = crud.get_settings(conn)
        instructors = crud.list_instructors(conn)

    tab_add, tab_view = st.tabs(["Add / Update", "View / Delete"])

    with tab_add:
        options = ["(New instructor)"] + [i.instructor_id for i in instructors]
        edit_id = st.selectbox("Select Instructor ID", options=options)

        initial = None
        if edit_id != "(New instructor)":
            initial = next((i for i in instructors if i.instructor_id == edit_id), None)

        if "instructor_id" not in st.session_state:
            with db_session() as conn:
                st.session_state["instructor_id"] = generate_instructor_id(conn)

        with st.form("instructor_form", clear_on_submit=False):
            c1, c2 = st.columns([1, 2])
            instructor_id = c1.text_input(
                "Instructor ID",
                value=(initial.instructor_id if initial else st.session_state.get("instructor_id", "")),
                disabled=bool(initial),
            )
            name = c2.text_input("Name", value=(initial.name if initial else ""), placeholder="e.g., Dr. Amina Yusuf")

            st.markdown("### Availability")
            st.caption("Untick the hours this instructor cannot teach.")
            current = (
                normalize_availability(initial, settings).availability
                if initial
                else make_default_availability(settings)
            )
            edited = st.data_editor(
                availability_to_df(settings, current),
                disabled=["Time"],
                hide_index=True,
                use_container_width=True,
                key=f"avail_{edit_id}",
            )

            submitted = st.form_submit_button("Save Instructor")

        if submitted:
            ok, msg = validate_id(instructor_id, "Instructor ID")
            if not ok:
                st.error(msg)
                st.stop()

            ok, msg = require_non_empty(name, "Name")
            if not ok:
                st.error(msg)
                st.stop()

            inst = normalize_availability(
                Instructor(
                    instructor_id=instructor_id.strip(),
                    name=name.strip(),
                    availability=df_to_availability(settings, edited),
                ),
                settings,
            )
            with db_session() as conn:
                crud.upsert_instructor(conn, inst)
                st.session_state["instructor_id"] = generate_instructor_id(conn)
            st.success("Instructor saved.")

    with tab_view:
        if not instructors:
            st.info("No instructors yet.")
            return

        df = pd.DataFrame(
            [
                {"instructor_id": i.instructor_id, "name": i.name, "blocked_hours": blocked_slots(i)}
                for i in instructors
            ]
        )
        st.dataframe(df, use_container_width=True)

        st.divider()
        st.subheader("Delete instructor")
        st.caption("Courses taught by a deleted instructor become unassigned.")
        to_delete = st.selectbox("Select Instructor ID", options=[i.instructor_id for i in instructors])
        if st.button("Delete", type="primary"):
            with db_session() as conn:
                crud.delete_instructor(conn, to_delete)
            st.success(f"Deleted {to_delete}")
            st.rerun()


if __name__ == "__main__":
    main()
