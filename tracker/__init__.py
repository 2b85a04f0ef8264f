# Learning Tracker: habit store, models and derived views for course/book study habits.

from tracker.exceptions import TrackerError, ValidationError, PersistenceParseError
from tracker.habit_store import HabitStore
from tracker.models import Habit, HabitType, TimeEntry
from tracker.storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "Habit",
    "HabitStore",
    "HabitType",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistenceParseError",
    "TimeEntry",
    "TrackerError",
    "ValidationError",
]
