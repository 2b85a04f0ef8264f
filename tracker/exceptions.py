"""
Learning Tracker exception hierarchy.

- TrackerError: base class for every known failure
- ValidationError: rejected user input (names, goals, dates)
- PersistenceParseError: unreadable payload in the durable slot
- ConfigError: broken runtime configuration file
"""
from typing import Optional


class TrackerError(Exception):
    """Base class for all expected Learning Tracker errors.

    Catching this handles every anticipated failure mode.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: what went wrong
            hint: suggestion shown to the user
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """Return a user-facing error message."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ValidationError(TrackerError):
    """Input rejected before any state was touched."""

    def __init__(self, message: str, field: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message, hint)
        self.field = field


class PersistenceParseError(TrackerError):
    """The durable slot holds data that cannot be decoded.

    Recovered inside HabitStore.load(); callers never see it.
    """

    def __init__(self, message: str, key: Optional[str] = None, raw: Optional[str] = None):
        hint = f"Inspect the stored value under '{key}'" if key else None
        super().__init__(message, hint)
        self.key = key
        self.raw = raw


class ConfigError(TrackerError):
    """Configuration file missing required structure or unreadable."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check the config file: {config_path}" if config_path else "Check the config file format"
        super().__init__(message, hint)
        self.config_path = config_path
