"""Calendar grid descriptors consumed by the calendar screen."""

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from models import WEEK, Routine
from schedule import CompletionMap, date_key, is_done, month_context, resolve_day


@dataclass(frozen=True)
class RoutineCheck:
    routine: Routine
    done: bool


@dataclass(frozen=True)
class DayCell:
    day: int
    date: str
    weekday: int
    is_today: bool
    inline: List[RoutineCheck] = field(default_factory=list)
    everyday: List[RoutineCheck] = field(default_factory=list)


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    leading_blanks: int
    cells: List[DayCell]
    trailing_blanks: int

    def rows(self) -> List[List[Optional[DayCell]]]:
        """Seven-column rows; blanks are None."""
        slots: List[Optional[DayCell]] = [None] * self.leading_blanks
        slots.extend(self.cells)
        slots.extend([None] * self.trailing_blanks)
        return [slots[i:i + 7] for i in range(0, len(slots), 7)]


@dataclass(frozen=True)
class LegendEntry:
    routine_id: str
    name: str
    icon: str
    color: str
    times_per_week: int
    day_labels: List[str]

    @property
    def caption(self) -> str:
        if not self.day_labels:
            return f"{self.icon} {self.name} (0x/wk)"
        return f"{self.icon} {self.name} ({self.times_per_week}x/wk: {', '.join(self.day_labels)})"


@dataclass(frozen=True)
class EverydayRow:
    routine: Routine
    date: Optional[str]  # today's key, None when the month is not the current one
    done_today: bool


def trailing_blank_count(leading: int, day_count: int) -> int:
    return (7 - (leading + day_count) % 7) % 7


def build_grid(
    year: int,
    month: int,
    routines: Sequence[Routine],
    completions: CompletionMap,
    today: Optional[date] = None,
) -> MonthGrid:
    ctx = month_context(year, month, today)
    cells = []
    for day in range(1, ctx.days_in_month + 1):
        key = date_key(year, month, day)
        weekday = (ctx.first_weekday + day - 1) % 7
        resolved = resolve_day(routines, weekday)
        cells.append(
            DayCell(
                day=day,
                date=key,
                weekday=weekday,
                is_today=ctx.today_day == day,
                inline=[RoutineCheck(r, is_done(completions, key, r.id)) for r in resolved.inline],
                everyday=[RoutineCheck(r, is_done(completions, key, r.id)) for r in resolved.everyday],
            )
        )
    return MonthGrid(
        year=year,
        month=month,
        leading_blanks=ctx.first_weekday,
        cells=cells,
        trailing_blanks=trailing_blank_count(ctx.first_weekday, ctx.days_in_month),
    )


def legend_entries(routines: Sequence[Routine]) -> List[LegendEntry]:
    return [
        LegendEntry(
            routine_id=r.id,
            name=r.name,
            icon=r.icon,
            color=r.color,
            times_per_week=r.times_per_week,
            day_labels=[WEEK[d] for d in r.days],
        )
        for r in routines
    ]


def everyday_rows(
    year: int,
    month: int,
    routines: Sequence[Routine],
    completions: CompletionMap,
    today: Optional[date] = None,
) -> List[EverydayRow]:
    """Roll-up track: everyday routines with today's state when today is in view."""
    ctx = month_context(year, month, today)
    key = date_key(year, month, ctx.today_day) if ctx.today_day else None
    rows = []
    for r in routines:
        if not r.is_everyday:
            continue
        done = is_done(completions, key, r.id) if key else False
        rows.append(EverydayRow(routine=r, date=key, done_today=done))
    return rows


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"
