"""
Habit data models: Habit and its sparse per-day TimeEntry log.
Dataclasses for asdict() compatibility; the storage format uses camelCase keys.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_HABIT_GOAL = 30


def parse_int(value: Any) -> Optional[int]:
    """Best-effort integer parse; None when the value is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class HabitType(str, Enum):
    COURSE = "course"
    BOOK = "book"


@dataclass
class TimeEntry:
    """One day's recorded effort for one habit."""
    completed: bool = True
    minutes: Optional[int] = None  # None = completed, duration unspecified

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"completed": self.completed}
        if self.minutes is not None:
            data["minutes"] = self.minutes
        return data

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TimeEntry":
        raw = d.get("minutes")
        # strings are not minutes; NaN/Infinity from json.loads parse to None
        minutes = parse_int(raw) if isinstance(raw, (int, float)) else None
        if minutes is not None and minutes <= 0:
            minutes = None
        return cls(completed=bool(d.get("completed", False)), minutes=minutes)


@dataclass
class Habit:
    """
    A tracked course or book.
    Only days with a completed entry are present in day_entries.
    """
    id: str
    name: str
    type: HabitType
    day_entries: Dict[str, TimeEntry] = field(default_factory=dict)
    created_at: Optional[str] = None
    daily_goal: int = DEFAULT_HABIT_GOAL

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = datetime.now().isoformat()

    def entry_for(self, day: str) -> Optional[TimeEntry]:
        return self.day_entries.get(day)

    def is_completed_on(self, day: str) -> bool:
        entry = self.entry_for(day)
        return bool(entry and entry.completed)

    def minutes_on(self, day: str) -> int:
        entry = self.entry_for(day)
        if not entry or not entry.completed:
            return 0
        return entry.minutes or 0


def habit_to_dict(h: Habit) -> Dict[str, Any]:
    return {
        "id": h.id,
        "name": h.name,
        "type": h.type.value,
        "dayEntries": {day: entry.to_dict() for day, entry in h.day_entries.items()},
        "createdAt": h.created_at,
        "dailyGoal": h.daily_goal,
    }


def dict_to_habit(d: Dict[str, Any]) -> Habit:
    """Build a Habit from a current-shape record. Raises KeyError/ValueError on broken records."""
    entries = {}
    raw_entries = d.get("dayEntries")
    if not isinstance(raw_entries, dict):
        raw_entries = {}
    for day, raw in raw_entries.items():
        if not isinstance(raw, dict):
            continue
        entry = TimeEntry.from_dict(raw)
        # keep the day map sparse
        if entry.completed:
            entries[str(day)] = entry

    habit_id = str(d["id"]).strip()
    name = str(d["name"]).strip()
    if not habit_id or not name:
        raise ValueError("habit record needs a non-empty id and name")

    daily_goal = parse_int(d.get("dailyGoal"))
    if daily_goal is None or daily_goal <= 0:
        daily_goal = DEFAULT_HABIT_GOAL

    return Habit(
        id=habit_id,
        name=name,
        type=HabitType(d.get("type", HabitType.COURSE.value)),
        day_entries=entries,
        created_at=d.get("createdAt"),
        daily_goal=daily_goal,
    )
