"""
Habit record schema migration.

Older records kept a flat `completedDays` list instead of the `dayEntries`
map and had no `dailyGoal`. Records are classified once at load time and
every downstream consumer sees the current shape only.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Union

from tracker.models import DEFAULT_HABIT_GOAL, parse_int

LEGACY_DAYS_KEY = "completedDays"
DAY_ENTRIES_KEY = "dayEntries"


@dataclass(frozen=True)
class LegacyHabitRecord:
    """Record carrying `completedDays` and no `dayEntries`."""
    raw: Dict[str, Any]


@dataclass(frozen=True)
class CurrentHabitRecord:
    """Record already using `dayEntries` (possibly still missing `dailyGoal`)."""
    raw: Dict[str, Any]


HabitRecord = Union[LegacyHabitRecord, CurrentHabitRecord]


def classify_record(raw: Dict[str, Any]) -> HabitRecord:
    if LEGACY_DAYS_KEY in raw and DAY_ENTRIES_KEY not in raw:
        return LegacyHabitRecord(raw)
    return CurrentHabitRecord(raw)


def _legacy_to_current(raw: Dict[str, Any]) -> Dict[str, Any]:
    migrated = {k: v for k, v in raw.items() if k != LEGACY_DAYS_KEY}
    days = raw.get(LEGACY_DAYS_KEY) or []
    migrated[DAY_ENTRIES_KEY] = {str(day): {"completed": True} for day in days}
    return migrated


def migrate_record(record: Union[HabitRecord, Dict[str, Any]], default_goal: int = DEFAULT_HABIT_GOAL) -> Dict[str, Any]:
    """
    Map a legacy or current record to a current-shape dict.

    Pure: the input is never modified. Running it on its own output is a no-op.
    """
    if isinstance(record, dict):
        record = classify_record(record)

    if isinstance(record, LegacyHabitRecord):
        migrated = _legacy_to_current(record.raw)
    else:
        # stale completedDays next to dayEntries carries no extra information
        migrated = {k: v for k, v in record.raw.items() if k != LEGACY_DAYS_KEY}

    # absent, null or unparseable goals all count as missing
    if parse_int(migrated.get("dailyGoal")) is None:
        migrated["dailyGoal"] = default_goal
    return migrated


def migrate_records(records: Iterable[Any], default_goal: int = DEFAULT_HABIT_GOAL) -> List[Dict[str, Any]]:
    """Migrate every dict record; non-dict items pass through untouched."""
    return [
        migrate_record(r, default_goal) if isinstance(r, dict) else r
        for r in records
    ]


def needs_migration(raw: Dict[str, Any], default_goal: int = DEFAULT_HABIT_GOAL) -> bool:
    return migrate_record(raw, default_goal) != raw
