import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from cli.tracker_cmd import main  # noqa: E402


if __name__ == "__main__":
    main()
