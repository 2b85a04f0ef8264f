"""
HabitStore: owns the habit collection, applies mutations, persists it to a
key-value slot and serves derived views.

Every mutation commits to memory first, then rewrites the whole collection
to storage. Unknown habit ids are silent no-ops.
"""
import json
import uuid
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from tracker import aggregates
from tracker.config_manager import TrackerConfig, config
from tracker.exceptions import PersistenceParseError, ValidationError
from tracker.logger import get_logger, log_corruption
from tracker.migrations import migrate_records
from tracker.models import Habit, HabitType, TimeEntry, dict_to_habit, habit_to_dict, parse_int
from tracker.storage import KeyValueStore, decode_json_slot

logger = get_logger("habit_store")

DayLike = Union[str, date]


class HabitStore:
    """Single owner of the habit collection."""

    def __init__(
        self,
        storage: KeyValueStore,
        today_provider: Optional[Callable[[], date]] = None,
        now_provider: Optional[Callable[[], datetime]] = None,
        settings: Optional[TrackerConfig] = None,
        autoload: bool = True,
    ):
        self.storage = storage
        self.config = settings or config
        self._today = today_provider or date.today
        self._now = now_provider or datetime.now
        self._habits: List[Habit] = []
        self._daily_goal: int = self.config.DEFAULT_DAILY_GOAL
        self._has_persisted = False
        if autoload:
            self.load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Read habits and the global daily goal from storage."""
        key = self.config.HABITS_KEY
        raw = self.storage.get(key)
        self._habits = []
        self._has_persisted = raw is not None

        if raw is None:
            logger.info("No stored habits, starting empty")
        else:
            try:
                records = decode_json_slot(key, raw)
                if not isinstance(records, list):
                    raise PersistenceParseError(
                        f"Expected a JSON array under '{key}', got {type(records).__name__}",
                        key=key,
                        raw=raw,
                    )
            except PersistenceParseError as e:
                logger.error(f"Failed to load habits: {e.message}")
                log_corruption(key, raw, e.message)
                # leave the unreadable payload alone until there is real data to write
                self._has_persisted = False
            else:
                self._habits = self._habits_from_records(records)
                logger.info(f"Loaded {len(self._habits)} habits")

        self._daily_goal = self._load_daily_goal()

    def _habits_from_records(self, records: List[Any]) -> List[Habit]:
        habits: List[Habit] = []
        seen_ids = set()
        for idx, record in enumerate(migrate_records(records, self.config.DEFAULT_HABIT_GOAL)):
            if not isinstance(record, dict):
                logger.warning(f"Skipping habit record #{idx}: not an object")
                continue
            try:
                habit = dict_to_habit(record)
            except (KeyError, ValueError, TypeError, AttributeError, OverflowError) as e:
                logger.warning(f"Skipping broken habit record #{idx}: {e}")
                continue
            if habit.id in seen_ids:
                logger.warning(f"Skipping duplicate habit id {habit.id}")
                continue
            seen_ids.add(habit.id)
            habits.append(habit)
        return habits

    def _load_daily_goal(self) -> int:
        key = self.config.DAILY_GOAL_KEY
        default = self.config.DEFAULT_DAILY_GOAL
        raw = self.storage.get(key)
        if raw is None:
            return default

        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        goal = parse_int(value)
        if goal is None or goal <= 0:
            logger.warning(f"Ignoring invalid daily goal {raw!r}, using {default}")
            return default
        return goal

    def save(self) -> bool:
        """
        Write the whole collection to storage.

        Returns:
            False when the write was skipped (empty and never persisted).
        """
        if not self._habits and not self._has_persisted:
            logger.debug("Nothing persisted yet and collection empty, skipping save")
            return False

        payload = json.dumps([habit_to_dict(h) for h in self._habits], ensure_ascii=False)
        self.storage.set(self.config.HABITS_KEY, payload)
        self._has_persisted = True
        return True

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def _clean_name(self, name: Any) -> str:
        cleaned = str(name or "").strip()
        if not cleaned:
            raise ValidationError("Habit name cannot be empty", field="name")
        if len(cleaned) > self.config.MAX_NAME_LENGTH:
            raise ValidationError(
                f"Habit name is too long (max {self.config.MAX_NAME_LENGTH} characters)",
                field="name",
            )
        return cleaned

    @staticmethod
    def _coerce_type(value: Union[HabitType, str]) -> HabitType:
        if isinstance(value, HabitType):
            return value
        try:
            return HabitType(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(t.value for t in HabitType)
            raise ValidationError(f"Unknown habit type '{value}'", field="type", hint=f"Use one of: {allowed}")

    @staticmethod
    def _require_positive(value: Any, field: str) -> int:
        parsed = parse_int(value)
        if parsed is None or parsed <= 0:
            raise ValidationError(f"{field} must be a positive number of minutes", field=field)
        return parsed

    @staticmethod
    def _coerce_day(day: DayLike) -> str:
        if isinstance(day, datetime):
            return day.date().isoformat()
        if isinstance(day, date):
            return day.isoformat()
        try:
            return date.fromisoformat(str(day).strip()).isoformat()
        except ValueError:
            raise ValidationError(f"Invalid date '{day}'", field="day", hint="Use YYYY-MM-DD")

    def _new_id(self) -> str:
        existing = {h.id for h in self._habits}
        while True:
            candidate = f"habit_{uuid.uuid4().hex[:8]}"
            if candidate not in existing:
                return candidate

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def habits(self) -> Tuple[Habit, ...]:
        """Read-only view in insertion order. Mutate only through the store."""
        return tuple(self._habits)

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        for h in self._habits:
            if h.id == habit_id:
                return h
        return None

    @property
    def daily_goal(self) -> int:
        return self._daily_goal

    def today(self) -> date:
        return self._today()

    def today_iso(self) -> str:
        return self._today().isoformat()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_habit(
        self,
        name: str,
        habit_type: Union[HabitType, str],
        daily_goal_minutes: Any = None,
    ) -> Habit:
        """
        Append a new habit.

        Args:
            name: display name, trimmed; must not be empty
            habit_type: "course" or "book"
            daily_goal_minutes: per-habit goal; unparseable values fall back to the default

        Raises:
            ValidationError: empty name, unknown type or non-positive goal.
        """
        cleaned = self._clean_name(name)
        kind = self._coerce_type(habit_type)
        goal = parse_int(daily_goal_minutes)
        if goal is None:
            goal = self.config.DEFAULT_HABIT_GOAL
        elif goal <= 0:
            raise ValidationError("Daily goal must be a positive number of minutes", field="daily_goal")

        habit = Habit(
            id=self._new_id(),
            name=cleaned,
            type=kind,
            day_entries={},
            created_at=self._now().isoformat(),
            daily_goal=goal,
        )
        self._habits.append(habit)
        logger.info(f"Added {kind.value} habit {habit.id} ({cleaned})")
        self.save()
        return habit

    def record_day(self, habit_id: str, day: DayLike, entry: Optional[TimeEntry]) -> Optional[Habit]:
        """
        Set or clear one day's entry.

        A None entry, or one with completed=False, removes the day.

        Returns:
            The updated habit, or None when habit_id matched nothing.
        """
        day_key = self._coerce_day(day)
        stored: Optional[TimeEntry] = None
        if entry is not None and entry.completed:
            minutes = None
            if entry.minutes is not None:
                minutes = self._require_positive(entry.minutes, "minutes")
            stored = TimeEntry(completed=True, minutes=minutes)

        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug(f"record_day: unknown habit {habit_id}")
            return None

        if stored is None:
            habit.day_entries.pop(day_key, None)
        else:
            habit.day_entries[day_key] = stored
        self.save()
        return habit

    def reset_habit(self, habit_id: str) -> Optional[Habit]:
        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug(f"reset_habit: unknown habit {habit_id}")
            return None
        habit.day_entries = {}
        logger.info(f"Reset habit {habit_id}")
        self.save()
        return habit

    def edit_habit(self, habit_id: str, name: str, daily_goal_minutes: Any) -> Optional[Habit]:
        """
        Update name and daily goal together.

        Both values are validated before either is applied.

        Raises:
            ValidationError: empty name or non-positive goal; habit unchanged.
        """
        cleaned = self._clean_name(name)
        goal = self._require_positive(daily_goal_minutes, "daily_goal")

        habit = self.get_habit(habit_id)
        if habit is None:
            logger.debug(f"edit_habit: unknown habit {habit_id}")
            return None
        habit.name = cleaned
        habit.daily_goal = goal
        logger.info(f"Edited habit {habit_id}")
        self.save()
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        remaining = [h for h in self._habits if h.id != habit_id]
        if len(remaining) == len(self._habits):
            logger.debug(f"delete_habit: unknown habit {habit_id}")
            return False
        self._habits = remaining
        logger.info(f"Deleted habit {habit_id}")
        self.save()
        return True

    def set_daily_goal(self, minutes: Any) -> int:
        goal = self._require_positive(minutes, "daily_goal")
        self._daily_goal = goal
        self.storage.set(self.config.DAILY_GOAL_KEY, str(goal))
        return goal

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    def current_week_days(self) -> List[str]:
        return aggregates.week_days(self._today())

    def current_month_days(self) -> List[str]:
        return aggregates.month_days(self._today())

    # an explicit empty day list is a real (empty) range, not "use the default"
    def weekly_completion_count(self, habit: Habit, week_days: Optional[Sequence[str]] = None) -> int:
        if week_days is None:
            week_days = self.current_week_days()
        return aggregates.weekly_completion_count(habit, week_days)

    def weekly_total_minutes(self, habit: Habit, week_days: Optional[Sequence[str]] = None) -> int:
        if week_days is None:
            week_days = self.current_week_days()
        return aggregates.weekly_total_minutes(habit, week_days)

    def monthly_completion_count(self, habit: Habit, month_days: Optional[Sequence[str]] = None) -> int:
        if month_days is None:
            month_days = self.current_month_days()
        return aggregates.monthly_completion_count(habit, month_days)

    def today_total_minutes(self) -> int:
        return aggregates.today_total_minutes(self._habits, self.today_iso())

    def streak(self) -> int:
        return aggregates.streak(self._habits, self._today(), self.config.STREAK_WINDOW_DAYS)

    def month_day_progress(self, day: DayLike) -> aggregates.DayProgress:
        return aggregates.month_day_progress(self._habits, self._coerce_day(day))

    def habit_week_summary(self, habit: Habit) -> aggregates.WeekSummary:
        return aggregates.habit_week_summary(habit, self.current_week_days())

    def today_progress(self) -> aggregates.TodayProgress:
        return aggregates.today_progress(self._habits, self.today_iso(), self._daily_goal)
