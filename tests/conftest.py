import os
import sys
import tempfile
from datetime import date, datetime
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep logs and storage out of the project tree.
os.environ.setdefault("LEARNING_TRACKER_DATA_DIR", tempfile.mkdtemp(prefix="learning_tracker_"))

from tracker.habit_store import HabitStore  # noqa: E402
from tracker.storage import MemoryStore  # noqa: E402

# Wednesday; its week runs 2026-10-12 .. 2026-10-18
TODAY = date(2026, 10, 14)


@pytest.fixture
def kv():
    return MemoryStore()


@pytest.fixture
def store(kv):
    return HabitStore(
        kv,
        today_provider=lambda: TODAY,
        now_provider=lambda: datetime(2026, 10, 14, 9, 30),
    )
