"""
Durable key-value slots for habit data.

HabitStore only needs synchronous get/set/remove of string values, the same
contract browser local storage offers. Two backends:
- MemoryStore: process-local dict (tests, throwaway sessions)
- JsonFileStore: one JSON object on disk mapping key -> string value
"""
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, Optional

from tracker.exceptions import PersistenceParseError
from tracker.logger import get_logger
from tracker.paths import STORAGE_PATH

logger = get_logger("storage")


class KeyValueStore(ABC):
    """Base class for all durable slots."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Return the stored string for key.

        Returns:
            The raw value, or None if nothing is stored.
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Drop key. Missing keys are ignored."""
        pass

    @abstractmethod
    def keys(self) -> Iterator[str]:
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStore(KeyValueStore):
    """In-memory slot map."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


class JsonFileStore(KeyValueStore):
    """
    Slot map persisted as a single JSON object at path.

    Every write rewrites the whole file through a temp file + os.replace,
    so readers never see a half-written document.
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else STORAGE_PATH
        self._data: Dict[str, str] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            # the whole file is unreadable, start from an empty slot map
            logger.error(f"Cannot read storage file {self._path}: {e}")
            return
        if not isinstance(data, dict):
            logger.error(f"Storage file {self._path} is not a JSON object, ignoring it")
            return
        self._data = {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self._path)

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))


def decode_json_slot(key: str, raw: str):
    """
    Decode a JSON slot value.

    Raises:
        PersistenceParseError: the value is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise PersistenceParseError(f"Invalid JSON under '{key}': {e}", key=key, raw=raw) from e
