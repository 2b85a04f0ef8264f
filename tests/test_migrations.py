import copy

from tracker.migrations import (
    CurrentHabitRecord,
    LegacyHabitRecord,
    classify_record,
    migrate_record,
    migrate_records,
    needs_migration,
)

LEGACY = {
    "id": "1712000000000",
    "name": "SICP",
    "type": "book",
    "completedDays": ["2026-10-01", "2026-10-02"],
    "createdAt": "2026-09-30T08:00:00",
}


def test_classify_legacy_and_current():
    assert isinstance(classify_record(LEGACY), LegacyHabitRecord)
    current = {"id": "x", "name": "y", "type": "course", "dayEntries": {}}
    assert isinstance(classify_record(current), CurrentHabitRecord)


def test_legacy_days_become_completed_entries_without_minutes():
    migrated = migrate_record(LEGACY)
    assert "completedDays" not in migrated
    assert migrated["dayEntries"] == {
        "2026-10-01": {"completed": True},
        "2026-10-02": {"completed": True},
    }
    assert migrated["dailyGoal"] == 30
    assert migrated["name"] == "SICP"


def test_migration_does_not_mutate_input():
    original = copy.deepcopy(LEGACY)
    migrate_record(LEGACY)
    assert LEGACY == original


def test_migration_is_idempotent():
    once = migrate_record(LEGACY)
    twice = migrate_record(once)
    assert twice == once
    assert not needs_migration(once)
    assert needs_migration(LEGACY)


def test_current_record_keeps_existing_goal():
    record = {"id": "a", "name": "b", "type": "course", "dayEntries": {}, "dailyGoal": 45}
    assert migrate_record(record) == record


def test_current_record_missing_goal_gets_default():
    record = {"id": "a", "name": "b", "type": "course", "dayEntries": {"2026-10-01": {"completed": True, "minutes": 5}}}
    migrated = migrate_record(record, default_goal=25)
    assert migrated["dailyGoal"] == 25
    assert migrated["dayEntries"] == record["dayEntries"]


def test_stale_completed_days_next_to_day_entries_dropped():
    record = {
        "id": "a",
        "name": "b",
        "type": "course",
        "dayEntries": {"2026-10-03": {"completed": True}},
        "completedDays": ["2026-10-01"],
        "dailyGoal": 30,
    }
    migrated = migrate_record(record)
    assert "completedDays" not in migrated
    assert migrated["dayEntries"] == {"2026-10-03": {"completed": True}}


def test_migrate_records_passes_non_dicts_through():
    result = migrate_records([LEGACY, "junk", None])
    assert result[1:] == ["junk", None]
    assert "dayEntries" in result[0]


def test_null_or_unparseable_goal_is_treated_as_missing():
    for goal in (None, "abc", float("nan")):
        record = dict(LEGACY, dailyGoal=goal)
        migrated = migrate_record(record)
        assert migrated["dailyGoal"] == 30
        assert migrate_record(migrated) == migrated


def test_numeric_string_goal_is_kept():
    record = {"id": "a", "name": "b", "type": "course", "dayEntries": {}, "dailyGoal": "45"}
    assert migrate_record(record)["dailyGoal"] == "45"
