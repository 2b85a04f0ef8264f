"""
Centralized filesystem paths for runtime data.
"""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent


def get_data_dir() -> Path:
    """
    Return runtime data directory.

    Priority:
    1. LEARNING_TRACKER_DATA_DIR env var
    2. <project_root>/data
    """
    raw = os.getenv("LEARNING_TRACKER_DATA_DIR", "").strip()
    if raw:
        return Path(raw).expanduser()
    return PROJECT_ROOT / "data"


DATA_DIR = get_data_dir()
LOGS_DIR = DATA_DIR / "logs"
STORAGE_PATH = DATA_DIR / "local_storage.json"
