"""
Derived habit views.

Pure functions over a habit collection and a reference day: week/month
calendars, weekly completion, minute totals, streak and goal percentages.
Nothing here is stored; callers recompute on demand.
"""
import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, NamedTuple, Sequence

from tracker.models import Habit, HabitType

DEFAULT_STREAK_WINDOW = 365


class DayProgress(NamedTuple):
    """Calendar cell flags for one day."""
    course_done: bool
    book_done: bool


@dataclass
class WeekSummary:
    completed_days: int
    total_minutes: int
    weekly_goal: int
    percent: int


@dataclass
class TodayProgress:
    total_minutes: int
    daily_goal: int
    percent: int


def to_iso(day: date) -> str:
    return day.isoformat()


def week_days(today: date) -> List[str]:
    """
    Monday..Sunday ISO dates of the week containing today.

    Weekday numbering is 0=Sunday..6=Saturday, shifted so Monday is 0.
    """
    sunday_based = today.isoweekday() % 7
    offset = (sunday_based + 6) % 7
    monday = today - timedelta(days=offset)
    return [to_iso(monday + timedelta(days=i)) for i in range(7)]


def month_days(today: date) -> List[str]:
    """Every ISO date of today's month, ascending."""
    _, last_day = calendar.monthrange(today.year, today.month)
    return [to_iso(date(today.year, today.month, d)) for d in range(1, last_day + 1)]


def weekly_completion_count(habit: Habit, days: Iterable[str]) -> int:
    return sum(1 for d in days if habit.is_completed_on(d))


def weekly_total_minutes(habit: Habit, days: Iterable[str]) -> int:
    total = 0
    for d in days:
        entry = habit.entry_for(d)
        if entry and entry.minutes:
            total += entry.minutes
    return total


def monthly_completion_count(habit: Habit, days: Iterable[str]) -> int:
    return weekly_completion_count(habit, days)


def today_total_minutes(habits: Iterable[Habit], today: str) -> int:
    return sum(h.minutes_on(today) for h in habits)


def any_completed_on(habits: Sequence[Habit], day: str) -> bool:
    return any(h.is_completed_on(day) for h in habits)


def streak(habits: Sequence[Habit], today: date, window: int = DEFAULT_STREAK_WINDOW) -> int:
    """
    Consecutive days with at least one completed habit, walking back from today.

    Today not being logged yet does not end the walk; any earlier empty day does.
    At most `window` days are scanned.
    """
    count = 0
    for i in range(window):
        day = to_iso(today - timedelta(days=i))
        if any_completed_on(habits, day):
            count += 1
        elif i > 0:
            break
    return count


def month_day_progress(habits: Iterable[Habit], day: str) -> DayProgress:
    course_done = False
    book_done = False
    for h in habits:
        if not h.is_completed_on(day):
            continue
        if h.type == HabitType.COURSE:
            course_done = True
        elif h.type == HabitType.BOOK:
            book_done = True
    return DayProgress(course_done=course_done, book_done=book_done)


def goal_percentage(minutes: int, goal: int) -> int:
    """Integer percent of goal reached, capped at 100."""
    if goal <= 0:
        return 0
    return min(100, round(minutes * 100 / goal))


def habit_week_summary(habit: Habit, days: Sequence[str]) -> WeekSummary:
    minutes = weekly_total_minutes(habit, days)
    weekly_goal = habit.daily_goal * len(days)
    return WeekSummary(
        completed_days=weekly_completion_count(habit, days),
        total_minutes=minutes,
        weekly_goal=weekly_goal,
        percent=goal_percentage(minutes, weekly_goal),
    )


def today_progress(habits: Iterable[Habit], today: str, daily_goal: int) -> TodayProgress:
    minutes = today_total_minutes(habits, today)
    return TodayProgress(
        total_minutes=minutes,
        daily_goal=daily_goal,
        percent=goal_percentage(minutes, daily_goal),
    )
