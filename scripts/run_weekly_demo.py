"""Demo runner: generate a weekly timetable from the sample data or a JSON file.

Usage:
    python scripts/run_weekly_demo.py [state.json]

"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure project root is on PYTHONPATH when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.state import build_sample_state, run_scheduler
from scheduling.state_io import load_state_from_json
from scheduling.weekly_scheduler import compute_metrics
from utils.timetable_export import schedule_rows_df, timetable_grid_df, unscheduled_df


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) > 1:
        state = load_state_from_json(sys.argv[1])
    else:
        state = build_sample_state()

    run_scheduler(state)

    print("\n=== Timetable ===")
    print(timetable_grid_df(state).to_string(index=False))

    print("\n=== Sessions ===")
    print(schedule_rows_df(state).to_string(index=False))

    udf = unscheduled_df(state)
    if not udf.empty:
        print("\n=== Unscheduled ===")
        print(udf.to_string(index=False))

    print("\n=== Metrics ===")
    for k, v in compute_metrics(state.settings, state.courses, state.schedule).items():
        print(f"{k}: {v}")


if __name__ == "__main__":
    main()
