from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.constants import DB_FOLDER, DEFAULT_BATCH_SIZE, DEFAULT_COMPANY_NAME, DEFAULT_LEDGER_MAX_ENTRIES, SYNC_LOG_MAX_ENTRIES
from .entities.registry import EntityDefinition, build_definitions
from .local.json_repository import JsonFileRepository
from .migration.migrator import MigrationSummary, migrate_csv_to_json
from .remote.firestore_store import FirestoreConfig, FirestoreRemoteStore
from .remote.store import RemoteStore
from .sync.activity_log import SyncActivityLog
from .sync.adapter import EntitySyncAdapter, create_sync
from .sync.batch import ProgressCallback
from .sync.coordinator import SyncCoordinator
from .sync.ledger import ChangeLedger


@dataclass(frozen=True)
class Container:
    db_root: Path
    remote: RemoteStore
    ledger: ChangeLedger
    activity_log: SyncActivityLog

    definitions: dict[str, EntityDefinition]
    repositories: dict[str, JsonFileRepository]
    adapters: dict[str, EntitySyncAdapter]

    coordinator: SyncCoordinator

    def migrate(self, on_progress: Optional[ProgressCallback] = None) -> dict[str, MigrationSummary]:
        return migrate_csv_to_json(self.db_root, on_progress)


def build_container(
    *,
    db_root: str | Path,
    remote: Optional[RemoteStore] = None,
    firebase_config: Optional[dict] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    ledger_max_entries: int = DEFAULT_LEDGER_MAX_ENTRIES,
    sync_log_max_entries: int = SYNC_LOG_MAX_ENTRIES,
) -> Container:
    db_root = Path(db_root)
    db_path = db_root / DB_FOLDER

    if remote is None:
        cfg = firebase_config or {}
        remote = FirestoreRemoteStore(
            FirestoreConfig(
                company_name=str(cfg.get("company_name") or DEFAULT_COMPANY_NAME),
                credentials_path=cfg.get("credentials_path") or None,
                project_id=cfg.get("project_id") or None,
            )
        )

    ledger = ChangeLedger(remote, max_entries=int(ledger_max_entries))
    activity_log = SyncActivityLog(db_path / "logs" / "sync_activity.json", max_entries=int(sync_log_max_entries))

    definitions = build_definitions(db_path)
    repositories = {name: JsonFileRepository(d.codec, d.layout) for name, d in definitions.items()}
    adapters = {
        name: create_sync(d.codec, repositories[name], remote, ledger=ledger, batch_size=int(batch_size))
        for name, d in definitions.items()
    }
    coordinator = SyncCoordinator(adapters, activity_log=activity_log)

    return Container(
        db_root=db_root,
        remote=remote,
        ledger=ledger,
        activity_log=activity_log,
        definitions=definitions,
        repositories=repositories,
        adapters=adapters,
        coordinator=coordinator,
    )
