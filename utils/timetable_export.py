from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from scheduling.models import AppState
from scheduling.weekly_scheduler import format_timetable


SCHEDULE_COLUMNS = ["CourseCode", "CourseTitle", "Instructor", "Day", "Start", "End", "DurationHours"]


def _hh(hour: int) -> str:
    return f"{int(hour):02d}:00"


def schedule_rows_df(state: AppState) -> pd.DataFrame:
    """One row per placement, in placement order."""

    rows = []
    for p in state.schedule.placements:
        course = state.get_course(p.course_id)
        inst = state.get_instructor(p.instructor_id)
        rows.append(
            {
                "CourseCode": course.code if course else "",
                "CourseTitle": course.title if course else "",
                "Instructor": inst.name if inst else "",
                "Day": p.day,
                "Start": _hh(p.start_hour),
                "End": _hh(p.end_hour),
                "DurationHours": int(p.duration),
            }
        )
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def schedule_csv_bytes(state: AppState) -> bytes:
    return schedule_rows_df(state).to_csv(index=False).encode("utf-8")


def timetable_grid_df(state: AppState, *, instructor_id: Optional[str] = None) -> pd.DataFrame:
    """Spreadsheet-style preview: rows=hours, one column per day.

    A session shows 'CODE (Instructor)' on its first hour and '▸' below it.
    """

    s = state.settings
    table = format_timetable(s, state.courses, state.instructors, state.schedule, instructor_id=instructor_id)

    # format_timetable is days x hours; the preview reads top-down by hour
    rows = [[table[d][h] for d in range(len(s.days))] for h in range(s.hours_count)]
    df = pd.DataFrame(rows, columns=list(s.days))
    df.insert(0, "Time", [_hh(s.start_hour + h) for h in range(s.hours_count)])
    return df


def unscheduled_df(state: AppState) -> pd.DataFrame:
    rows = []
    for u in state.schedule.unscheduled:
        course = state.get_course(u.course_id)
        rows.append(
            {
                "CourseCode": course.code if course else u.course_id,
                "CourseTitle": course.title if course else "",
                "Remaining": int(u.remaining),
                "Reason": u.reason,
            }
        )
    return pd.DataFrame(rows, columns=["CourseCode", "CourseTitle", "Remaining", "Reason"])


def _safe_sheet_name(name: str) -> str:
    """Excel sheet names: max 31 chars, cannot contain: `: \\ / ? * [ ]`."""

    bad = [":", "\\", "/", "?", "*", "[", "]"]
    out = str(name or "Sheet")
    for b in bad:
        out = out.replace(b, "-")
    out = out.strip() or "Sheet"
    return out[:31]


def timetable_workbook_bytes(state: AppState) -> bytes:
    """Build an Excel workbook with the grid, the session list, unscheduled
    sessions and one grid per instructor.
    """

    # Pandas uses openpyxl to write .xlsx by default.
    out = io.BytesIO()

    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        timetable_grid_df(state).to_excel(writer, sheet_name="Timetable", index=False)
        schedule_rows_df(state).to_excel(writer, sheet_name="Sessions", index=False)
        unscheduled_df(state).to_excel(writer, sheet_name="Unscheduled", index=False)

        for iid, inst in state.instructors.items():
            df = timetable_grid_df(state, instructor_id=iid)
            df.to_excel(writer, sheet_name=_safe_sheet_name(f"{iid} {inst.name}"), index=False)

    return out.getvalue()


@dataclass(frozen=True)
class ImageExportOptions:
    title: Optional[str] = None
    font_size: int = 10
    cell_height: float = 0.35
    cell_width: float = 1.2


def df_to_markdown(df: pd.DataFrame) -> str:
    """Convert DataFrame to a GitHub-flavored Markdown table."""

    # pandas to_markdown needs tabulate; a small renderer is enough here.
    cols = list(df.columns)
    rows = df.astype(str).values.tolist()

    def esc(s: str) -> str:
        return str(s).replace("\n", " ").replace("|", "\\|")

    header = "| " + " | ".join(esc(c) for c in cols) + " |"
    sep = "| " + " | ".join(["---"] * len(cols)) + " |"
    body = ["| " + " | ".join(esc(v) for v in r) + " |" for r in rows]
    return "\n".join([header, sep] + body) + "\n"


def df_to_png_bytes(df: pd.DataFrame, *, options: ImageExportOptions = ImageExportOptions()) -> bytes:
    """Render a DataFrame as a PNG image (bytes).

    Uses matplotlib's table artist.
    """

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    nrows, ncols = df.shape

    fig_w = max(6.0, float(options.cell_width) * (ncols + 1))
    fig_h = max(2.0, float(options.cell_height) * (nrows + 2))

    fig, ax = plt.subplots(figsize=(fig_w, fig_h))
    ax.axis("off")

    if options.title:
        ax.set_title(options.title, fontsize=options.font_size + 2, pad=12)

    tbl = ax.table(
        cellText=df.values,
        colLabels=list(df.columns),
        cellLoc="center",
        loc="center",
    )

    tbl.auto_set_font_size(False)
    tbl.set_fontsize(options.font_size)
    tbl.scale(1.0, 1.4)

    for (r, c), cell in tbl.get_celld().items():
        cell.set_linewidth(0.6)
        if r == 0:
            cell.set_facecolor("#f0f2f6")
            cell.set_text_props(weight="bold")

    buf = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=200, bbox_inches="tight")
    plt.close(fig)
    return buf.getvalue()
