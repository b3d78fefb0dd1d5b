from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

# Sunday=0 .. Saturday=6, the numbering stored in routine documents
WEEK = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
ALL_DAYS = tuple(range(7))

TIME_OF_DAY_ORDER = {"morning": 0, "allday": 1, "evening": 2, "night": 3}
DEFAULT_TIME_OF_DAY = "allday"


def weekday_of(d: date) -> int:
    """Sunday-based weekday index for a date."""
    return (d.weekday() + 1) % 7


def time_of_day_rank(tag) -> int:
    # unknown tags sit with allday, between morning and evening
    if not isinstance(tag, str):
        tag = DEFAULT_TIME_OF_DAY
    return TIME_OF_DAY_ORDER.get(tag, TIME_OF_DAY_ORDER[DEFAULT_TIME_OF_DAY])


def normalize_days(raw) -> Tuple[int, ...]:
    """Coerce a stored schedule into a sorted tuple of unique weekdays."""
    if not isinstance(raw, (list, tuple)):
        return ()
    days = set()
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int):
            continue
        if 0 <= value <= 6:
            days.add(value)
    return tuple(sorted(days))


def _text(value, default: str = "") -> str:
    # documents come from the store unchecked; anything but a string falls back
    return value if isinstance(value, str) and value else default


@dataclass(frozen=True)
class Routine:
    id: str
    name: str
    color: str = "#7c6ff7"
    icon: str = "⭐"
    description: str = ""
    days: Tuple[int, ...] = field(default_factory=tuple)
    time_of_day: str = DEFAULT_TIME_OF_DAY

    @classmethod
    def from_doc(cls, doc: dict) -> "Routine":
        return cls(
            id=str(doc.get("id", "")),
            name=_text(doc.get("name")),
            color=_text(doc.get("color"), "#7c6ff7"),
            icon=_text(doc.get("icon"), "⭐"),
            description=_text(doc.get("description")),
            days=normalize_days(doc.get("days")),
            time_of_day=_text(doc.get("timeOfDay"), DEFAULT_TIME_OF_DAY),
        )

    def to_doc(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "description": self.description,
            "days": list(self.days),
            "timeOfDay": self.time_of_day,
        }

    @property
    def is_everyday(self) -> bool:
        return len(self.days) == 7

    @property
    def times_per_week(self) -> int:
        return len(self.days)

    def is_due_on(self, weekday: int) -> bool:
        return weekday in self.days


@dataclass(frozen=True)
class Completion:
    date: str
    routine_id: str
    done: bool
    updated_at: Optional[str] = None

    @property
    def doc_id(self) -> str:
        return completion_doc_id(self.date, self.routine_id)

    def to_doc(self) -> dict:
        return {
            "date": self.date,
            "routineId": self.routine_id,
            "done": self.done,
            "updatedAt": self.updated_at,
        }


def completion_doc_id(date_str: str, routine_id: str) -> str:
    """One completion document per (date, routine); repeated toggles overwrite it."""
    return f"{date_str}_{routine_id}"
