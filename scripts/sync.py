"""Push local records to Firestore or pull them back.

Usage: python scripts/sync.py upload|download [entity ...]
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

from src.payroll_sync.payroll_sync.container import build_container
from src.payroll_sync.payroll_sync.core.enums import SyncDirection, SyncStatus
from src.payroll_sync.payroll_sync.core.exceptions import DomainError


def main() -> None:
    load_dotenv(override=False)
    if len(sys.argv) < 2 or sys.argv[1] not in {d.value for d in SyncDirection}:
        raise SystemExit(__doc__.strip().splitlines()[-1])

    direction = SyncDirection(sys.argv[1])
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_root=settings.DB_ROOT,
        firebase_config=settings.FIREBASE_CONFIG,
        batch_size=settings.SYNC_BATCH_SIZE,
        ledger_max_entries=settings.LEDGER_MAX_ENTRIES,
        sync_log_max_entries=settings.SYNC_LOG_MAX_ENTRIES,
    )

    entities = sys.argv[2:] or container.coordinator.entity_names
    failed = []
    for name in entities:
        try:
            container.coordinator.run(name, direction, on_progress=print)
        except DomainError as e:
            print(f"ERROR: {name}: {e}")
            failed.append(name)

    if failed:
        raise SystemExit(f"{len(failed)} entity sync(s) failed: {', '.join(failed)}")
    states = [container.coordinator.state(n, direction) for n in entities]
    ok = sum(1 for s in states if s.status == SyncStatus.SUCCESS)
    print(f"OK: {direction.value} finished for {ok} entit{'y' if ok == 1 else 'ies'}")


if __name__ == "__main__":
    main()
