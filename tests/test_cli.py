from datetime import date, datetime

import pytest
from click.testing import CliRunner

from cli.tracker_cmd import tracker
from tracker.habit_store import HabitStore
from tracker.models import TimeEntry
from tracker.storage import JsonFileStore, MemoryStore

TODAY = date(2026, 10, 14)


@pytest.fixture
def cli_store():
    return HabitStore(MemoryStore(), today_provider=lambda: TODAY, now_provider=lambda: datetime(2026, 10, 14, 8, 0))


def _run(store, *args, **kwargs):
    return CliRunner().invoke(tracker, list(args), obj=store, **kwargs)


def test_add_and_list(cli_store):
    result = _run(cli_store, "add", "Machine Learning", "--type", "course", "--goal", "40")
    assert result.exit_code == 0
    assert "Added course 'Machine Learning'" in result.output

    habit = cli_store.habits[0]
    cli_store.record_day(habit.id, "2026-10-14", TimeEntry(minutes=40))

    result = _run(cli_store, "list")
    assert result.exit_code == 0
    assert f"[x] {habit.id}" in result.output
    assert "week 1/7, 40/280 min (14%)" in result.output


def test_add_blank_name_fails(cli_store):
    result = _run(cli_store, "add", "   ")
    assert result.exit_code == 1
    assert "Habit name cannot be empty" in result.output
    assert cli_store.habits == ()


def test_log_defaults_to_today(cli_store):
    habit = cli_store.add_habit("Clean Code", "book")
    result = _run(cli_store, "log", habit.id, "--minutes", "15")
    assert result.exit_code == 0
    assert habit.day_entries == {"2026-10-14": TimeEntry(minutes=15)}


def test_log_rejects_future_day(cli_store):
    habit = cli_store.add_habit("Clean Code", "book")
    result = _run(cli_store, "log", habit.id, "--day", "2026-10-15")
    assert result.exit_code == 1
    assert "future" in result.output
    assert habit.day_entries == {}


def test_log_unknown_habit(cli_store):
    result = _run(cli_store, "log", "habit_missing")
    assert result.exit_code == 1
    assert "no habit with id" in result.output


def test_unlog_clears_day(cli_store):
    habit = cli_store.add_habit("Clean Code", "book")
    cli_store.record_day(habit.id, "2026-10-13", TimeEntry())
    result = _run(cli_store, "unlog", habit.id, "--day", "2026-10-13")
    assert result.exit_code == 0
    assert habit.day_entries == {}


def test_edit_keeps_omitted_fields(cli_store):
    habit = cli_store.add_habit("Clean Code", "book", 20)
    result = _run(cli_store, "edit", habit.id, "--goal", "35")
    assert result.exit_code == 0
    assert habit.name == "Clean Code"
    assert habit.daily_goal == 35

    result = _run(cli_store, "edit", habit.id, "--name", "")
    assert result.exit_code == 1
    assert habit.name == "Clean Code"


def test_reset_and_delete_require_confirmation(cli_store):
    habit = cli_store.add_habit("Clean Code", "book")
    cli_store.record_day(habit.id, "2026-10-13", TimeEntry())

    result = _run(cli_store, "reset", habit.id, input="n\n")
    assert result.exit_code != 0
    assert habit.day_entries

    result = _run(cli_store, "reset", habit.id, "--yes")
    assert result.exit_code == 0
    assert habit.day_entries == {}

    result = _run(cli_store, "delete", habit.id, "--yes")
    assert result.exit_code == 0
    assert cli_store.habits == ()


def test_week_month_streak(cli_store):
    course = cli_store.add_habit("Algorithms", "course")
    book = cli_store.add_habit("SICP", "book")
    cli_store.record_day(course.id, "2026-10-13", TimeEntry())
    cli_store.record_day(book.id, "2026-10-12", TimeEntry())

    week = _run(cli_store, "week")
    assert "Week of 2026-10-12" in week.output

    month = _run(cli_store, "month")
    assert "2026-10-13  C-" in month.output
    assert "2026-10-12  -B" in month.output

    streak = _run(cli_store, "streak")
    assert "Streak: 2 days" in streak.output


def test_goal_show_and_set(cli_store):
    habit = cli_store.add_habit("Algorithms", "course")
    cli_store.record_day(habit.id, "2026-10-14", TimeEntry(minutes=30))

    result = _run(cli_store, "goal")
    assert "Today: 30/60 min (50%)" in result.output

    result = _run(cli_store, "goal", "120")
    assert result.exit_code == 0
    assert "Today: 30/120 min (25%)" in result.output

    result = _run(cli_store, "goal", "zero")
    assert result.exit_code == 1
    assert cli_store.daily_goal == 120


def test_storage_option_uses_file(tmp_path):
    path = tmp_path / "local_storage.json"
    result = CliRunner().invoke(tracker, ["--storage", str(path), "add", "Databases", "--type", "book"])
    assert result.exit_code == 0
    assert JsonFileStore(path).get("learning-tracker-habits") is not None
