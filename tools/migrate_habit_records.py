"""
Migrate stored habit records to the current record shape.

Default mode is dry-run.
"""
from __future__ import annotations

import argparse
import json
import shutil
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tracker.config_manager import config  # noqa: E402
from tracker.migrations import LegacyHabitRecord, classify_record, migrate_record  # noqa: E402
from tracker.paths import STORAGE_PATH  # noqa: E402


def normalize_habit_records(records: List[object]) -> Tuple[List[object], Dict[str, object]]:
    """
    Migrate every record and collect a report.
    """
    normalized: List[object] = []
    shapes = Counter()
    report: Dict[str, object] = {
        "total": 0,
        "changed": 0,
        "skipped": 0,
        "shapes": shapes,
    }

    for idx, record in enumerate(records):
        report["total"] += 1
        if not isinstance(record, dict):
            report["skipped"] += 1
            print(f"[skip] record={idx} is not an object")
            normalized.append(record)
            continue

        shape = "legacy" if isinstance(classify_record(record), LegacyHabitRecord) else "current"
        shapes[shape] += 1
        migrated = migrate_record(record, config.DEFAULT_HABIT_GOAL)
        if migrated != record:
            report["changed"] += 1
        normalized.append(migrated)

    return normalized, report


def _backup_path(path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return path.with_name(f"{path.stem}.backup_{stamp}{path.suffix}")


def migrate(
    src: Path,
    apply: bool = False,
    backup: bool = True,
    key: str = config.HABITS_KEY,
) -> int:
    if not src.exists():
        print(f"[skip] storage file not found: {src}")
        return 0

    try:
        with open(src, "r", encoding="utf-8") as f:
            slots = json.load(f)
    except json.JSONDecodeError as e:
        print(f"[abort] storage file is not valid JSON: {e}")
        return 1
    if not isinstance(slots, dict):
        print("[abort] storage file must hold a JSON object")
        return 1

    raw = slots.get(key)
    if raw is None:
        print(f"[skip] no '{key}' slot in {src}")
        return 0
    try:
        records = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as e:
        print(f"[abort] '{key}' slot is not valid JSON: {e}")
        return 1
    if not isinstance(records, list):
        print(f"[abort] '{key}' slot must hold a JSON array")
        return 1

    normalized, report = normalize_habit_records(records)

    print("=== Habit Record Migration Report ===")
    print(f"source: {src}")
    print(f"total records: {report['total']}")
    print(f"changed records: {report['changed']}")
    print(f"skipped records: {report['skipped']}")
    print(f"shapes: {dict(report['shapes'])}")

    if not apply:
        print("\n[dry-run] no files changed")
        return 0

    if report["changed"] == 0:
        print("[done] nothing to migrate")
        return 0

    if backup:
        backup_file = _backup_path(src)
        shutil.copy2(src, backup_file)
        print(f"[backup] {backup_file}")

    slots[key] = json.dumps(normalized, ensure_ascii=False)
    with open(src, "w", encoding="utf-8") as f:
        json.dump(slots, f, ensure_ascii=False, indent=2)
    print(f"[done] migrated habit records: {src}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Migrate stored habit records to the current shape.")
    parser.add_argument(
        "--src",
        type=Path,
        default=STORAGE_PATH,
        help="storage file path",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="apply migration changes (default is dry-run)",
    )
    parser.add_argument(
        "--no-backup",
        action="store_true",
        help="do not create a backup file when applying",
    )
    args = parser.parse_args()

    raise SystemExit(
        migrate(
            src=args.src,
            apply=args.apply,
            backup=not args.no_backup,
        )
    )


if __name__ == "__main__":
    main()
