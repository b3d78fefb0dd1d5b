"""Weekly progress buckets and the quest-path milestones built on them."""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from models import Routine
from schedule import CompletionMap, date_key, days_in_month, first_weekday, is_done, routines_due


# =========================
# Weekly buckets
# =========================

@dataclass(frozen=True)
class WeekBucket:
    week_number: int  # 1-based
    start_day: int
    end_day: int  # inclusive
    expected: int
    completed: int

    @property
    def has_work(self) -> bool:
        return self.expected > 0

    @property
    def is_complete(self) -> bool:
        return self.expected > 0 and self.completed >= self.expected

    @property
    def day_count(self) -> int:
        return self.end_day - self.start_day + 1

    @property
    def percent_complete(self) -> float:
        if self.expected == 0:
            return 100.0
        return round(self.completed / self.expected * 100.0, 2)

    @property
    def status(self) -> str:
        if self.expected == 0:
            return "rest"
        if self.completed >= self.expected:
            return "completed"
        if self.completed <= 0:
            return "not_started"
        return "in_progress"


def week_spans(year: int, month: int) -> List[Tuple[int, int]]:
    """
    Partition a month into (start_day, end_day) runs. The first run ends on
    the first Saturday, so it is partial unless the 1st is a Sunday; the
    rest are 7-day runs with the last one clamped to the month length.
    """
    total = days_in_month(year, month)
    offset = first_weekday(year, month)
    spans = []
    start = 1
    if offset > 0:
        end = min(7 - offset, total)
        spans.append((start, end))
        start = end + 1
    while start <= total:
        end = min(start + 6, total)
        spans.append((start, end))
        start = end + 1
    return spans


def count_span(
    year: int,
    month: int,
    start: int,
    end: int,
    routines: Sequence[Routine],
    completions: CompletionMap,
) -> Tuple[int, int]:
    """Return (expected, completed) obligations for days start..end."""
    offset = first_weekday(year, month)
    expected = 0
    completed = 0
    for day in range(start, end + 1):
        key = date_key(year, month, day)
        weekday = (offset + day - 1) % 7
        for r in routines_due(routines, weekday):
            expected += 1
            if is_done(completions, key, r.id):
                completed += 1
    return expected, completed


def weekly_progress(
    year: int,
    month: int,
    routines: Sequence[Routine],
    completions: CompletionMap,
) -> List[WeekBucket]:
    buckets = []
    for number, (start, end) in enumerate(week_spans(year, month), start=1):
        expected, completed = count_span(year, month, start, end, routines, completions)
        buckets.append(
            WeekBucket(
                week_number=number,
                start_day=start,
                end_day=end,
                expected=expected,
                completed=completed,
            )
        )
    return buckets


# =========================
# Milestones
# =========================

@dataclass(frozen=True)
class Milestones:
    total_weeks: int
    completed_weeks_count: int
    weeks_with_work_count: int
    progress_ratio: float
    reward_earned: bool
    completed_week_numbers: Tuple[int, ...]


def evaluate_milestones(buckets: Sequence[WeekBucket]) -> Milestones:
    """
    A week counts only when every obligation in it is done; there is no
    partial credit. The reward needs at least one week with work, so an
    empty month never earns it.
    """
    completed = [b.week_number for b in buckets if b.is_complete]
    with_work = sum(1 for b in buckets if b.has_work)
    total = len(buckets)
    ratio = len(completed) / total if total else 0.0
    return Milestones(
        total_weeks=total,
        completed_weeks_count=len(completed),
        weeks_with_work_count=with_work,
        progress_ratio=ratio,
        reward_earned=with_work > 0 and len(completed) == with_work,
        completed_week_numbers=tuple(completed),
    )
