"""
Configuration manager for Learning Tracker.

Collects tunable constants in one place. Values in config/runtime.yaml
override the defaults below.

Usage:
    from tracker.config_manager import config
    goal = config.DEFAULT_HABIT_GOAL
"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from tracker.exceptions import ConfigError
from tracker.logger import get_logger

CONFIG_DIR = Path(__file__).parent.parent / "config"
RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

logger = get_logger("config")


@dataclass
class TrackerConfig:
    """Runtime constants for the habit store."""

    # === Goals ===

    # Per-habit daily goal (minutes) when none is given or a legacy record lacks one
    DEFAULT_HABIT_GOAL: int = 30

    # Global "today's total minutes" goal
    DEFAULT_DAILY_GOAL: int = 60

    # === Aggregates ===

    # Days scanned backward from today when computing the streak
    STREAK_WINDOW_DAYS: int = 365

    # === Validation ===

    MAX_NAME_LENGTH: int = 80

    # === Storage keys ===

    HABITS_KEY: str = "learning-tracker-habits"
    DAILY_GOAL_KEY: str = "learning-tracker-daily-goal"


def _load_runtime_config(path: Path, strict: bool = False) -> dict:
    """Load runtime overrides, if the file exists."""
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        if strict:
            raise ConfigError(f"Cannot read runtime config: {e}", str(path)) from e
        return {}

    if not isinstance(data, dict):
        if strict:
            raise ConfigError("Runtime config must be a mapping", str(path))
        return {}
    return data


def _coerce_override(default: Any, value: Any) -> Optional[Any]:
    """
    Convert an override to the type of its default.

    Integer settings are counts of minutes/days/characters and must be positive.
    Returns None when the value is unusable.
    """
    if isinstance(default, int):
        if isinstance(value, bool):
            return None
        if isinstance(value, float) and not value.is_integer():
            return None
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return number if number > 0 else None
    if isinstance(default, str):
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()
    return value


def get_config(path: Optional[Path] = None, strict: bool = False) -> TrackerConfig:
    """
    Build a config instance.

    Priority: runtime.yaml > defaults. Unknown keys are ignored.
    """
    config_path = path or RUNTIME_CONFIG_PATH
    base = TrackerConfig()
    overrides = _load_runtime_config(config_path, strict=strict)
    known = {f.name for f in fields(base)}

    for key, value in overrides.items():
        if key not in known:
            continue
        coerced = _coerce_override(getattr(base, key), value)
        if coerced is None:
            message = f"Invalid value for {key}: {value!r}"
            if strict:
                raise ConfigError(message, str(config_path))
            logger.warning(f"{message}, keeping {getattr(base, key)!r}")
            continue
        setattr(base, key, coerced)

    return base


config = get_config()
