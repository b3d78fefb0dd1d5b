from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from grid import build_grid, everyday_rows, legend_entries, month_label, trailing_blank_count  # noqa: E402
from models import Routine  # noqa: E402


def _routine(rid: str, days, time_of_day: str = "allday", **extra) -> Routine:
    return Routine(id=rid, name=rid.title(), days=tuple(days), time_of_day=time_of_day, **extra)


def test_blank_padding_always_fills_whole_weeks():
    for year in (2015, 2023, 2024, 2025):
        for month in range(1, 13):
            grid = build_grid(year, month, [], {}, today=date(2000, 1, 1))
            assert (grid.leading_blanks + len(grid.cells) + grid.trailing_blanks) % 7 == 0
            assert grid.leading_blanks == (date(year, month, 1).weekday() + 1) % 7
            assert 0 <= grid.trailing_blanks < 7
            assert all(len(row) == 7 for row in grid.rows())


def test_trailing_blank_formula():
    assert trailing_blank_count(0, 28) == 0
    assert trailing_blank_count(5, 31) == 6
    assert trailing_blank_count(6, 30) == 6
    assert trailing_blank_count(3, 31) == 1


def test_february_2015_has_no_blanks():
    grid = build_grid(2015, 2, [], {}, today=date(2000, 1, 1))
    assert grid.leading_blanks == 0
    assert grid.trailing_blanks == 0
    assert len(grid.rows()) == 4


def test_cells_carry_dates_weekdays_and_today():
    grid = build_grid(2024, 2, [], {}, today=date(2024, 2, 29))
    assert len(grid.cells) == 29
    assert grid.cells[0].date == "2024-02-01"
    assert grid.cells[0].weekday == 4
    assert grid.cells[-1].date == "2024-02-29"
    assert [c.day for c in grid.cells if c.is_today] == [29]

    other = build_grid(2024, 1, [], {}, today=date(2024, 2, 29))
    assert not any(c.is_today for c in other.cells)


def test_rows_place_blanks_as_none():
    grid = build_grid(2024, 3, [], {}, today=date(2000, 1, 1))
    rows = grid.rows()
    assert rows[0][:5] == [None] * 5
    assert rows[0][5].day == 1
    assert rows[-1][0].day == 31
    assert rows[-1][1:] == [None] * 6


def test_cells_overlay_completions_on_resolved_routines():
    gym = _routine("gym", [2], "evening")
    teeth = _routine("teeth", [2], "morning")
    water = _routine("water", range(7))
    completions = {"2024-03-05": {"gym": True, "water": True}}
    grid = build_grid(2024, 3, [gym, teeth, water], completions, today=date(2000, 1, 1))

    tuesday = grid.cells[4]
    assert tuesday.date == "2024-03-05"
    assert [(c.routine.id, c.done) for c in tuesday.inline] == [("teeth", False), ("gym", True)]
    assert [(c.routine.id, c.done) for c in tuesday.everyday] == [("water", True)]

    wednesday = grid.cells[5]
    assert wednesday.inline == []
    assert [(c.routine.id, c.done) for c in wednesday.everyday] == [("water", False)]


def test_grid_is_deterministic_for_fixed_inputs():
    routines = [_routine("a", [1, 2]), _routine("b", [2], "night")]
    completions = {"2024-03-12": {"a": True}}
    today = date(2024, 3, 12)
    assert build_grid(2024, 3, routines, completions, today) == build_grid(2024, 3, routines, completions, today)


def test_legend_lists_weekly_count_and_days():
    routines = [
        _routine("hydrate", [1, 2, 3, 4, 5], icon="\U0001F4A7", color="#3b82f6"),
        _routine("idle", []),
    ]
    entries = legend_entries(routines)
    assert entries[0].times_per_week == 5
    assert entries[0].day_labels == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    assert entries[0].icon == "\U0001F4A7"
    assert entries[0].color == "#3b82f6"
    assert entries[1].times_per_week == 0
    assert entries[1].day_labels == []
    assert entries[0].caption == "\U0001F4A7 Hydrate (5x/wk: Mon, Tue, Wed, Thu, Fri)"
    assert entries[1].caption == "\u2b50 Idle (0x/wk)"


def test_everyday_rows_use_today_only_in_current_month():
    water = _routine("water", range(7))
    gym = _routine("gym", [1])
    completions = {"2024-03-12": {"water": True}}

    rows = everyday_rows(2024, 3, [water, gym], completions, today=date(2024, 3, 12))
    assert [(r.routine.id, r.date, r.done_today) for r in rows] == [("water", "2024-03-12", True)]

    rows = everyday_rows(2024, 4, [water, gym], completions, today=date(2024, 3, 12))
    assert [(r.routine.id, r.date, r.done_today) for r in rows] == [("water", None, False)]


def test_month_label():
    assert month_label(2024, 3) == "March 2024"
    assert month_label(2023, 12) == "December 2023"
