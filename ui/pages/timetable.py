"""Weekly Timetable page.

Generates the timetable from the data in the SQLite DB with the greedy
scheduler and shows:
- Metrics
- Grid view (all sessions or one instructor)
- Unscheduled sessions with reasons
- Scheduling order preview (tightness)
- CSV / XLSX / JSON export and JSON import

"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.models import AppState
from scheduling.scoring import sort_by_tightness, tightness
from scheduling.state import clear_schedule, run_scheduler
from scheduling.state_io import dumps_state, loads_state
from scheduling.weekly_scheduler import compute_metrics
from ui.database import crud
from ui.database.db import db_session
from ui.utils.schedule_cache import compute_state_input_hash, is_schedule_stale
from utils.timetable_export import (
    ImageExportOptions,
    df_to_markdown,
    df_to_png_bytes,
    schedule_csv_bytes,
    timetable_grid_df,
    timetable_workbook_bytes,
    unscheduled_df,
)


ALL_INSTRUCTORS = "(All)"


def _load_state_from_db() -> AppState:
    with db_session() as conn:
        return crud.load_state(conn)


def _generate_and_store(state: AppState) -> AppState:
    """Run the scheduler and persist the new schedule with its input hash."""

    run_scheduler(state)
    with db_session() as conn:
        crud.replace_schedule(conn, state.schedule, input_hash=compute_state_input_hash(state))
    return state


def _order_preview_df(state: AppState) -> pd.DataFrame:
    rows = []
    for i, c in enumerate(sort_by_tightness(state.courses.values(), state.settings), start=1):
        rows.append(
            {
                "#": i,
                "code": c.code,
                "title": c.title,
                "tightness": tightness(c, state.settings),
                "weekly_load": c.weekly_load,
            }
        )
    return pd.DataFrame(rows)


def main() -> None:
    st.title("Weekly Timetable")

    state = _load_state_from_db()

    with db_session() as conn:
        meta = crud.get_schedule_meta(conn)

    if not state.courses:
        st.info("Add courses first (or load the sample data from the dashboard).")

    c1, c2, _ = st.columns([1, 1, 3])
    if c1.button("Generate", type="primary", disabled=not state.courses):
        _generate_and_store(state)
        if state.schedule.unscheduled:
            st.warning(f"Placed {len(state.schedule.placements)} sessions; some could not be scheduled.")
        else:
            st.success(f"Placed {len(state.schedule.placements)} sessions ({state.schedule.placed_hours} hour(s)).")
        meta = {"input_hash": compute_state_input_hash(state)}

    if c2.button("Clear timetable"):
        clear_schedule(state)
        with db_session() as conn:
            crud.clear_schedule(conn)
        st.success("Timetable cleared (data kept).")

    if is_schedule_stale(state, meta.get("input_hash")):
        st.warning("Courses, instructors or settings changed since this timetable was generated.")

    metrics = compute_metrics(state.settings, state.courses, state.schedule)
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Placed sessions", int(metrics["placed_sessions"]))
    m2.metric("Placed hours", int(metrics["placed_hours"]))
    m3.metric("Unscheduled sessions", int(metrics["unscheduled_sessions"]))
    m4.metric("Grid utilization", f"{metrics['grid_utilization']:.0%}")

    tab_grid, tab_unsched, tab_order, tab_io = st.tabs(["Grid", "Unscheduled", "Scheduling order", "Import / Export"])

    with tab_grid:
        names = {iid: i.name for iid, i in state.instructors.items()}
        who = st.selectbox(
            "Instructor",
            options=[ALL_INSTRUCTORS] + list(names.keys()),
            format_func=lambda x: names.get(x, x),
        )
        grid_df = timetable_grid_df(state, instructor_id=None if who == ALL_INSTRUCTORS else who)
        st.dataframe(grid_df, use_container_width=True, hide_index=True)

        with st.expander("Copy as Markdown"):
            st.code(df_to_markdown(grid_df), language="markdown")

        st.download_button(
            "Download grid (PNG)",
            data=df_to_png_bytes(grid_df, options=ImageExportOptions(title="Timetable")),
            file_name="timetable.png",
            mime="image/png",
        )

    with tab_unsched:
        udf = unscheduled_df(state)
        if udf.empty:
            st.success("Every session is placed.")
        else:
            st.dataframe(udf, use_container_width=True, hide_index=True)

    with tab_order:
        st.caption("Courses are placed most-constrained first, then by weekly load, then by code.")
        st.dataframe(_order_preview_df(state), use_container_width=True, hide_index=True)

    with tab_io:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        st.download_button(
            "Download sessions (CSV)",
            data=schedule_csv_bytes(state),
            file_name=f"personatable_schedule_{stamp}.csv",
            mime="text/csv",
        )
        st.download_button(
            "Download workbook (XLSX)",
            data=timetable_workbook_bytes(state),
            file_name=f"timetable_export_{stamp}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        st.download_button(
            "Download data (JSON)",
            data=dumps_state(state).encode("utf-8"),
            file_name=f"personatable_{stamp}.json",
            mime="application/json",
        )

        st.divider()
        uploaded = st.file_uploader("Import JSON", type=["json"])
        if uploaded is not None and st.button("Replace current data with this file"):
            try:
                imported = loads_state(uploaded.getvalue().decode("utf-8"))
            except (UnicodeDecodeError, ValueError):
                st.error("Invalid JSON or unsupported format.")
            else:
                with db_session() as conn:
                    crud.save_state(conn, imported)
                st.success("JSON imported successfully.")
                st.rerun()


if __name__ == "__main__":
    main()
