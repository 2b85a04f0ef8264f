import json

import pytest

from tracker.exceptions import PersistenceParseError
from tracker.habit_store import HabitStore
from tracker.models import TimeEntry
from tracker.storage import JsonFileStore, MemoryStore, decode_json_slot


def test_memory_store_basic_ops():
    kv = MemoryStore({"a": "1"})
    kv.set("b", "2")
    assert kv.get("a") == "1"
    assert "b" in kv
    kv.remove("a")
    kv.remove("missing")
    assert kv.get("a") is None
    assert list(kv.keys()) == ["b"]


def test_json_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "local_storage.json"
    kv = JsonFileStore(path)
    kv.set("learning-tracker-daily-goal", "90")

    assert json.loads(path.read_text(encoding="utf-8")) == {"learning-tracker-daily-goal": "90"}
    assert JsonFileStore(path).get("learning-tracker-daily-goal") == "90"
    assert not path.with_name("local_storage.json.tmp").exists()


def test_json_file_store_remove(tmp_path):
    path = tmp_path / "local_storage.json"
    kv = JsonFileStore(path)
    kv.set("k", "v")
    kv.remove("k")
    assert JsonFileStore(path).get("k") is None


def test_json_file_store_unreadable_file_starts_empty(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text("garbage", encoding="utf-8")
    assert list(JsonFileStore(path).keys()) == []


def test_json_file_store_non_string_values_are_encoded(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text(json.dumps({"learning-tracker-daily-goal": 45}), encoding="utf-8")
    assert JsonFileStore(path).get("learning-tracker-daily-goal") == "45"


def test_decode_json_slot_raises_parse_error():
    with pytest.raises(PersistenceParseError) as exc:
        decode_json_slot("learning-tracker-habits", "[oops")
    assert exc.value.key == "learning-tracker-habits"
    assert exc.value.raw == "[oops"


def test_habit_store_over_file_store(tmp_path):
    path = tmp_path / "local_storage.json"
    store = HabitStore(JsonFileStore(path))
    habit = store.add_habit("Statistics course", "course", 20)
    store.record_day(habit.id, "2026-10-10", TimeEntry(minutes=20))

    reloaded = HabitStore(JsonFileStore(path))
    assert reloaded.get_habit(habit.id).day_entries == {"2026-10-10": TimeEntry(minutes=20)}
