"""Convert legacy CSV files under {DB_ROOT}/SweldoDB into JSON documents.

Note: Safe to re-run; months that already have a JSON file are skipped.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_sync.payroll_sync.core.exceptions import MigrationError
from src.payroll_sync.payroll_sync.migration.migrator import migrate_csv_to_json


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_root = sys.argv[1] if len(sys.argv) > 1 else settings.DB_ROOT

    try:
        results = migrate_csv_to_json(db_root, on_progress=print)
    except MigrationError as e:
        raise SystemExit(f"Migration failed: {e}")

    created = sum(len(s.created) for s in results.values())
    failed = sum(len(s.failed) for s in results.values())
    print(f"OK: Migrated {created} file(s) in {db_root} ({failed} failed)")


if __name__ == "__main__":
    main()
