import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.models import TimetableSettings
from ui.pages.instructors import availability_to_df, df_to_availability


def test_availability_editor_grid_reads_by_hour():
    settings = TimetableSettings(days=("Mon", "Tue"), start_hour=9, end_hour=12)
    availability = ((True, False, True), (True, True, False))

    df = availability_to_df(settings, availability)

    assert list(df.columns) == ["Time", "Mon", "Tue"]
    assert list(df["Time"]) == ["09:00", "10:00", "11:00"]
    assert list(df["Mon"]) == [True, False, True]
    assert df_to_availability(settings, df) == availability


def test_short_availability_shows_as_available():
    settings = TimetableSettings(days=("Mon", "Tue"), start_hour=9, end_hour=11)

    df = availability_to_df(settings, ((False,),))

    assert list(df["Mon"]) == [False, True]
    assert list(df["Tue"]) == [True, True]
