from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import Routine, normalize_days, time_of_day_rank, weekday_of  # noqa: E402
from schedule import (  # noqa: E402
    date_key,
    days_in_month,
    first_weekday,
    is_done,
    month_context,
    resolve_day,
    routines_due,
    shift_month,
)


def _routine(rid: str, days, time_of_day: str = "allday") -> Routine:
    return Routine(id=rid, name=rid.title(), days=tuple(days), time_of_day=time_of_day)


def test_weekday_of_is_sunday_based():
    assert weekday_of(date(2024, 3, 3)) == 0  # Sunday
    assert weekday_of(date(2024, 3, 4)) == 1  # Monday
    assert weekday_of(date(2024, 3, 9)) == 6  # Saturday


def test_month_facts_match_host_calendar_including_leap_years():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 3) == 31
    assert first_weekday(2024, 2) == 4  # Thursday
    assert first_weekday(2023, 2) == 3  # Wednesday
    assert first_weekday(2024, 5) == 3  # Wednesday
    for year in (1999, 2000, 2023, 2024, 2100):
        for month in range(1, 13):
            assert first_weekday(year, month) == (date(year, month, 1).weekday() + 1) % 7


def test_month_context_today_only_inside_displayed_month():
    ctx = month_context(2024, 3, today=date(2024, 3, 15))
    assert ctx.today_day == 15
    assert ctx.first_weekday == 5
    assert ctx.days_in_month == 31
    assert month_context(2024, 4, today=date(2024, 3, 15)).today_day is None
    assert month_context(2023, 3, today=date(2024, 3, 15)).today_day is None


def test_date_key_is_zero_padded():
    assert date_key(2024, 3, 5) == "2024-03-05"
    assert date_key(987, 11, 30) == "0987-11-30"


def test_shift_month_wraps_years():
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 6, 0) == (2024, 6)
    assert shift_month(2024, 3, -15) == (2022, 12)


def test_malformed_schedule_becomes_empty():
    assert normalize_days(None) == ()
    assert normalize_days("1,2,3") == ()
    assert normalize_days({"days": [1]}) == ()
    assert normalize_days([3, 1, 3, 9, -1, "2", True, 0]) == (0, 1, 3)

    routine = Routine.from_doc({"id": "x", "name": "Broken", "days": "weekdays"})
    assert routine.days == ()
    assert routine.times_per_week == 0
    assert all(not resolve_day([routine], wd).inline for wd in range(7))


def test_non_string_fields_in_stored_doc_fall_back_to_defaults():
    broken = Routine.from_doc(
        {"id": "b", "name": ["x"], "icon": 7, "color": None, "days": [1], "timeOfDay": ["morning"]}
    )
    assert broken.time_of_day == "allday"
    assert broken.name == ""
    assert broken.icon == "⭐"
    assert broken.color == "#7c6ff7"

    other = _routine("other", [1], "evening")
    early = _routine("early", [1], "morning")
    resolved = resolve_day([other, broken, early], 1)
    assert [r.id for r in resolved.inline] == ["early", "b", "other"]
    assert time_of_day_rank(["morning"]) == time_of_day_rank("allday")
    assert time_of_day_rank({"tag": "night"}) == time_of_day_rank("allday")


def test_everyday_routines_go_to_roll_up_track():
    daily = _routine("daily", range(7))
    gym = _routine("gym", [1, 3, 5], "morning")
    resolved = resolve_day([daily, gym], 1)
    assert [r.id for r in resolved.inline] == ["gym"]
    assert [r.id for r in resolved.everyday] == ["daily"]
    assert daily.is_everyday and not gym.is_everyday

    sunday = resolve_day([daily, gym], 0)
    assert sunday.inline == []
    assert [r.id for r in sunday.everyday] == ["daily"]


def test_inline_routines_sorted_by_time_of_day_with_stable_ties():
    routines = [
        _routine("read", [2], "night"),
        _routine("stretch", [2], "evening"),
        _routine("teeth", [2], "morning"),
        _routine("water", [2]),
        _routine("mystery", [2], "brunch"),
        _routine("run", [2], "morning"),
    ]
    resolved = resolve_day(routines, 2)
    assert [r.id for r in resolved.inline] == [
        "teeth",
        "run",
        "water",
        "mystery",
        "stretch",
        "read",
    ]


def test_unknown_time_of_day_ranks_with_allday():
    assert time_of_day_rank("brunch") == time_of_day_rank("allday")
    assert time_of_day_rank(None) == time_of_day_rank("allday")
    assert time_of_day_rank("morning") < time_of_day_rank("allday") < time_of_day_rank("evening")
    assert time_of_day_rank("evening") < time_of_day_rank("night")


def test_resolver_is_idempotent():
    routines = [_routine(f"r{i}", [4], tag) for i, tag in enumerate(["night", "allday", "morning"] * 3)]
    first = resolve_day(routines, 4)
    second = resolve_day(routines, 4)
    assert [r.id for r in first.inline] == [r.id for r in second.inline]


def test_empty_collection_resolves_to_nothing():
    for weekday in range(7):
        resolved = resolve_day([], weekday)
        assert resolved.inline == [] and resolved.everyday == []
        assert routines_due([], weekday) == []


def test_overlay_defaults_to_false():
    completions = {"2024-03-05": {"a": True, "b": False}, "2024-03-06": None}
    assert is_done(completions, "2024-03-05", "a") is True
    assert is_done(completions, "2024-03-05", "b") is False
    assert is_done(completions, "2024-03-05", "c") is False
    assert is_done(completions, "2024-03-07", "a") is False
    assert is_done(completions, "2024-03-06", "a") is False
    assert is_done({}, "2024-03-05", "a") is False
