"""Month context, per-day schedule resolution and the completion overlay."""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from models import Routine, time_of_day_rank, weekday_of

CompletionMap = Dict[str, Dict[str, bool]]


@dataclass(frozen=True)
class MonthContext:
    year: int
    month: int  # 1..12
    first_weekday: int  # Sunday=0
    days_in_month: int
    today_day: Optional[int]  # day number of today when it falls in this month


@dataclass(frozen=True)
class DaySchedule:
    inline: List[Routine]
    everyday: List[Routine]


def date_key(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def first_weekday(year: int, month: int) -> int:
    return weekday_of(date(year, month, 1))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_context(year: int, month: int, today: Optional[date] = None) -> MonthContext:
    """Derive the month facts; today defaults to the host clock at call time."""
    if today is None:
        today = date.today()
    today_day = today.day if (today.year, today.month) == (year, month) else None
    return MonthContext(
        year=year,
        month=month,
        first_weekday=first_weekday(year, month),
        days_in_month=days_in_month(year, month),
        today_day=today_day,
    )


def shift_month(year: int, month: int, delta: int):
    """Move (year, month) by delta months, wrapping across years."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def routines_due(routines: Sequence[Routine], weekday: int) -> List[Routine]:
    return [r for r in routines if r.is_due_on(weekday)]


def resolve_day(routines: Sequence[Routine], weekday: int) -> DaySchedule:
    """
    Split the routines due on `weekday` into the inline track and the
    everyday roll-up track. Inline routines are ordered by time of day;
    sorted() is stable so ties keep collection order.
    """
    due = routines_due(routines, weekday)
    inline = sorted(
        (r for r in due if not r.is_everyday),
        key=lambda r: time_of_day_rank(r.time_of_day),
    )
    everyday = [r for r in due if r.is_everyday]
    return DaySchedule(inline=inline, everyday=everyday)


def is_done(completions: CompletionMap, date_str: str, routine_id: str) -> bool:
    """Overlay lookup; anything missing reads as not done."""
    day = completions.get(date_str) if completions else None
    if not isinstance(day, dict):
        return False
    return bool(day.get(routine_id, False))
