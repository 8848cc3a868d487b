from __future__ import annotations

import hashlib
import json
from typing import Any, Dict

from scheduling.models import AppState


def _stable_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_state_input_hash(state: AppState) -> str:
    """Compute a stable hash of everything a scheduling run reads.

    Same settings + instructors + courses => same hash. The stored schedule is
    stale when its hash differs from the current one.
    """

    s = state.settings
    payload: Dict[str, Any] = {
        "settings": {"days": list(s.days), "start_hour": int(s.start_hour), "end_hour": int(s.end_hour)},
        "instructors": [],
        "courses": [],
    }

    for iid, inst in sorted(state.instructors.items()):
        payload["instructors"].append(
            {
                "instructor_id": iid,
                "availability": [[bool(v) for v in row] for row in inst.availability],
            }
        )

    # course order breaks ties between equal codes, so it is part of the input
    for cid, c in state.courses.items():
        payload["courses"].append(
            {
                "course_id": cid,
                "code": c.code,
                "instructor_id": c.instructor_id or "",
                "sessions_per_week": int(c.sessions_per_week),
                "duration": int(c.duration),
                "earliest_hour": int(c.earliest_hour),
                "latest_hour": int(c.latest_hour),
                "preferred_days": sorted(c.preferred_days),
            }
        )

    return hashlib.sha256(_stable_json(payload).encode("utf-8")).hexdigest()


def is_schedule_stale(state: AppState, stored_hash: str | None) -> bool:
    if not state.schedule.placements and not state.schedule.unscheduled:
        return False
    return stored_hash != compute_state_input_hash(state)
