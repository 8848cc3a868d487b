"""Course Management page."""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.state import DURATION_RANGE, SESSIONS_RANGE, sanitize_course
from ui.database import crud
from ui.database.db import db_session
from ui.utils.id_generator import generate_course_id
from ui.utils.validators import require_non_empty, validate_course_window, validate_id, validate_positive_int


UNASSIGNED = "(Unassigned)"


def main() -> None:
    st.title("Courses")

    with db_session() as conn:
        settings = crud.get_settings(conn)
        instructors = crud.list_instructors(conn)
        courses = crud.list_courses(conn)

    inst_names = {i.instructor_id: i.name for i in instructors}
    inst_options = [UNASSIGNED] + [i.instructor_id for i in instructors]

    tab_add, tab_view = st.tabs(["Add / Update", "View / Delete"])

    with tab_add:
        options = ["(New course)"] + [c.course_id for c in courses]
        edit_id = st.selectbox("Select Course ID", options=options)

        initial = None
        if edit_id != "(New course)":
            initial = next((c for c in courses if c.course_id == edit_id), None)

        if "course_id" not in st.session_state:
            with db_session() as conn:
                st.session_state["course_id"] = generate_course_id(conn)

        with st.form("course_form", clear_on_submit=False):
            c1, c2, c3 = st.columns([1, 1, 2])
            course_id = c1.text_input(
                "Course ID",
                value=(initial.course_id if initial else st.session_state.get("course_id", "")),
                disabled=bool(initial),
            )
            code = c2.text_input("Code", value=(initial.code if initial else ""), placeholder="e.g., CSC201")
            title = c3.text_input("Title", value=(initial.title if initial else ""))

            current_inst = initial.instructor_id if initial and initial.instructor_id in inst_names else UNASSIGNED
            instructor_choice = st.selectbox(
                "Instructor",
                options=inst_options,
                index=inst_options.index(current_inst),
                format_func=lambda x: inst_names.get(x, x),
            )

            c4, c5 = st.columns(2)
            sessions = c4.number_input(
                "Sessions per week",
                min_value=SESSIONS_RANGE[0],
                max_value=SESSIONS_RANGE[1],
                value=int(initial.sessions_per_week if initial else 2),
            )
            duration = c5.number_input(
                "Duration (hours)",
                min_value=DURATION_RANGE[0],
                max_value=DURATION_RANGE[1],
                value=int(initial.duration if initial else 1),
            )

            c6, c7 = st.columns(2)
            earliest = c6.number_input(
                "Earliest start",
                min_value=int(settings.start_hour),
                max_value=int(settings.end_hour) - 1,
                value=int(initial.earliest_hour if initial else settings.start_hour),
            )
            latest = c7.number_input(
                "Latest end",
                min_value=int(settings.start_hour) + 1,
                max_value=int(settings.end_hour),
                value=int(initial.latest_hour if initial else settings.end_hour),
            )

            preferred = st.multiselect(
                "Preferred days (empty = no preference)",
                options=list(settings.days),
                default=[d for d in (initial.preferred_days if initial else ()) if d in settings.days],
            )
            notes = st.text_area("Notes", value=(initial.notes if initial else ""))

            submitted = st.form_submit_button("Save Course")

        if submitted:
            ok, msg = validate_id(course_id, "Course ID")
            if not ok:
                st.error(msg)
                st.stop()

            ok, msg = require_non_empty(code, "Code")
            if not ok:
                st.error(msg)
                st.stop()

            ok, msg = validate_positive_int(int(sessions), "Sessions per week", *SESSIONS_RANGE)
            if not ok:
                st.error(msg)
                st.stop()

            ok, msg = validate_course_window(
                earliest_hour=int(earliest),
                latest_hour=int(latest),
                duration=int(duration),
                start_hour=settings.start_hour,
                end_hour=settings.end_hour,
            )
            if not ok:
                st.error(msg)
                st.stop()

            course = sanitize_course(
                {
                    "course_id": course_id.strip(),
                    "code": code,
                    "title": title,
                    "instructor_id": "" if instructor_choice == UNASSIGNED else instructor_choice,
                    "sessions_per_week": int(sessions),
                    "duration": int(duration),
                    "earliest_hour": int(earliest),
                    "latest_hour": int(latest),
                    "preferred_days": preferred,
                    "notes": notes,
                },
                settings,
                inst_names.keys(),
            )
            with db_session() as conn:
                crud.upsert_course(conn, course)
                st.session_state["course_id"] = generate_course_id(conn)
            st.success("Course saved.")

    with tab_view:
        if not courses:
            st.info("No courses yet.")
            return

        df = pd.DataFrame(
            [
                {
                    "course_id": c.course_id,
                    "code": c.code,
                    "title": c.title,
                    "instructor": inst_names.get(c.instructor_id, c.instructor_id or ""),
                    "sessions": c.sessions_per_week,
                    "duration": c.duration,
                    "window": f"{c.earliest_hour:02d}:00-{c.latest_hour:02d}:00",
                    "preferred_days": ", ".join(c.preferred_days),
                }
                for c in courses
            ]
        )
        st.dataframe(df, use_container_width=True)

        st.divider()
        st.subheader("Delete course")
        to_delete = st.selectbox("Select Course ID", options=[c.course_id for c in courses])
        if st.button("Delete", type="primary"):
            with db_session() as conn:
                crud.delete_course(conn, to_delete)
            st.success(f"Deleted {to_delete}")
            st.rerun()


if __name__ == "__main__":
    main()
