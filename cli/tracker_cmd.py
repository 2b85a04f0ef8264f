"""
CLI: learning-tracker
Log study minutes against course/book habits and print progress views.
"""
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.append(str(project_root))

from tracker.exceptions import TrackerError  # noqa: E402
from tracker.habit_store import HabitStore  # noqa: E402
from tracker.logger import setup_logging  # noqa: E402
from tracker.models import Habit, HabitType, TimeEntry  # noqa: E402
from tracker.storage import JsonFileStore  # noqa: E402

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    click.get_current_context().exit(1)


def _require_habit(store: HabitStore, habit_id: str) -> Habit:
    habit = store.get_habit(habit_id)
    if habit is None:
        _fail(f"no habit with id '{habit_id}'")
    return habit


def _resolve_day(store: HabitStore, raw: Optional[str]) -> str:
    if not raw:
        return store.today_iso()
    try:
        day = date.fromisoformat(raw)
    except ValueError:
        _fail(f"invalid date '{raw}', use YYYY-MM-DD")
    if day > store.today():
        _fail("cannot log a day in the future")
    return day.isoformat()


@click.group()
@click.option(
    "--storage",
    "storage_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="LEARNING_TRACKER_STORAGE",
    default=None,
    help="Storage file (default: <data dir>/local_storage.json)",
)
@click.pass_context
def tracker(ctx, storage_path: Optional[Path]):
    """Learning habit tracker"""
    if ctx.obj is None:
        ctx.obj = HabitStore(JsonFileStore(storage_path))


@tracker.command()
@click.argument("name")
@click.option("--type", "habit_type", type=click.Choice([t.value for t in HabitType]), default=HabitType.COURSE.value)
@click.option("--goal", "goal", default=None, help="Daily goal in minutes (default 30)")
@click.pass_obj
def add(store: HabitStore, name: str, habit_type: str, goal: Optional[str]):
    """Add a course or book"""
    try:
        habit = store.add_habit(name, habit_type, goal)
    except TrackerError as e:
        _fail(e.get_user_message())
        return
    click.echo(f"Added {habit.type.value} '{habit.name}' ({habit.id}), goal {habit.daily_goal} min/day")


@tracker.command(name="list")
@click.pass_obj
def list_habits(store: HabitStore):
    """List habits with today's status and this week's progress"""
    if not store.habits:
        click.echo("No habits yet. Add one with 'learning-tracker add'.")
        return

    today = store.today_iso()
    for h in store.habits:
        mark = "x" if h.is_completed_on(today) else " "
        summary = store.habit_week_summary(h)
        click.echo(
            f"[{mark}] {h.id}  {h.type.value:<6} {h.name}  "
            f"week {summary.completed_days}/7, {summary.total_minutes}/{summary.weekly_goal} min ({summary.percent}%)"
        )


@tracker.command()
@click.argument("habit_id")
@click.option("--day", "day", default=None, help="YYYY-MM-DD (default today)")
@click.option("--minutes", "minutes", type=int, default=None, help="Minutes spent")
@click.pass_obj
def log(store: HabitStore, habit_id: str, day: Optional[str], minutes: Optional[int]):
    """Mark a day as completed"""
    habit = _require_habit(store, habit_id)
    day_key = _resolve_day(store, day)
    try:
        store.record_day(habit.id, day_key, TimeEntry(completed=True, minutes=minutes))
    except TrackerError as e:
        _fail(e.get_user_message())
        return
    spent = f", {minutes} min" if minutes else ""
    click.echo(f"Logged '{habit.name}' on {day_key}{spent}")


@tracker.command()
@click.argument("habit_id")
@click.option("--day", "day", default=None, help="YYYY-MM-DD (default today)")
@click.pass_obj
def unlog(store: HabitStore, habit_id: str, day: Optional[str]):
    """Clear a day's entry"""
    habit = _require_habit(store, habit_id)
    day_key = _resolve_day(store, day)
    store.record_day(habit.id, day_key, None)
    click.echo(f"Cleared '{habit.name}' on {day_key}")


@tracker.command()
@click.argument("habit_id")
@click.option("--name", "name", default=None)
@click.option("--goal", "goal", default=None, help="Daily goal in minutes")
@click.pass_obj
def edit(store: HabitStore, habit_id: str, name: Optional[str], goal: Optional[str]):
    """Rename a habit or change its daily goal"""
    habit = _require_habit(store, habit_id)
    try:
        store.edit_habit(
            habit.id,
            habit.name if name is None else name,
            habit.daily_goal if goal is None else goal,
        )
    except TrackerError as e:
        _fail(e.get_user_message())
        return
    click.echo(f"Updated '{habit.name}', goal {habit.daily_goal} min/day")


@tracker.command()
@click.argument("habit_id")
@click.confirmation_option(prompt="Clear every logged day for this habit?")
@click.pass_obj
def reset(store: HabitStore, habit_id: str):
    """Clear all logged days of a habit"""
    habit = _require_habit(store, habit_id)
    store.reset_habit(habit.id)
    click.echo(f"Reset '{habit.name}'")


@tracker.command()
@click.argument("habit_id")
@click.confirmation_option(prompt="Delete this habit permanently?")
@click.pass_obj
def delete(store: HabitStore, habit_id: str):
    """Delete a habit"""
    habit = _require_habit(store, habit_id)
    store.delete_habit(habit.id)
    click.echo(f"Deleted '{habit.name}'")


@tracker.command()
@click.pass_obj
def week(store: HabitStore):
    """Show the current Monday-Sunday week"""
    days = store.current_week_days()
    click.echo(f"Week of {days[0]}")
    click.echo(" " * 24 + " ".join(WEEKDAY_LABELS))
    for h in store.habits:
        cells = " ".join(" x " if h.is_completed_on(d) else " . " for d in days)
        click.echo(f"{h.name[:22]:<22}  {cells}  {store.weekly_completion_count(h, days)}/7")


@tracker.command()
@click.pass_obj
def month(store: HabitStore):
    """Show this month's course/book completion per day"""
    days = store.current_month_days()
    click.echo(f"Month {days[0][:7]}  (C = course, B = book)")
    for d in days:
        progress = store.month_day_progress(d)
        flags = ("C" if progress.course_done else "-") + ("B" if progress.book_done else "-")
        click.echo(f"{d}  {flags}")


@tracker.command()
@click.pass_obj
def streak(store: HabitStore):
    """Show the current streak"""
    days = store.streak()
    click.echo(f"Streak: {days} day{'s' if days != 1 else ''}")


@tracker.command()
@click.argument("minutes", required=False)
@click.pass_obj
def goal(store: HabitStore, minutes: Optional[str]):
    """Show today's total against the daily goal, or set the goal"""
    if minutes is not None:
        try:
            store.set_daily_goal(minutes)
        except TrackerError as e:
            _fail(e.get_user_message())
            return
        click.echo(f"Daily goal set to {store.daily_goal} min")

    progress = store.today_progress()
    click.echo(f"Today: {progress.total_minutes}/{progress.daily_goal} min ({progress.percent}%)")


def main():
    setup_logging()
    tracker()


if __name__ == "__main__":
    main()
