"""One-time conversion of legacy CSV files into JSON documents.

Migration is additive and re-runnable: legacy files are never touched, months
that already have a JSON document are skipped, and a broken file is reported
and skipped instead of stopping the run.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import DB_FOLDER, LAST_MODIFIED_FIELD, META_FIELD
from ..core.exceptions import MigrationError, ValidationError
from ..entities.codec import EntityCodec
from ..entities.registry import build_definitions
from ..local.json_repository import write_json_atomic
from ..local.layouts import DocumentLayout, LegacyFile
from ..sync.batch import ProgressCallback
from ..sync.identity import GroupKey
from ..sync.ledger import empty_ledger

logger = logging.getLogger(__name__)

CREATED = "created"
SKIPPED = "skipped"


@dataclass
class MigrationSummary:
    entity: str
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    backups: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "created": list(self.created),
            "skipped": list(self.skipped),
            "failed": list(self.failed),
            "backups": list(self.backups),
        }


def read_rows(path: Path) -> list[list[str]]:
    """Non-blank CSV rows of a legacy file."""
    text = path.read_text(encoding="utf-8-sig")
    return [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]


class CsvToJsonMigrator:
    def __init__(self, codec: EntityCodec, layout: DocumentLayout, *, clock: Callable[[], Any] = now_utc):
        self._codec = codec
        self._layout = layout
        self._clock = clock

    def _report(self, on_progress: Optional[ProgressCallback], message: str) -> None:
        logger.info(message)
        if on_progress:
            on_progress(message)

    def migrate_csv_to_json(self, on_progress: Optional[ProgressCallback] = None) -> MigrationSummary:
        codec = self._codec
        summary = MigrationSummary(entity=codec.name)
        self._report(on_progress, f"Starting {codec.label} migration...")

        area = self._layout.area_path()
        if not area.is_dir():
            self._report(on_progress, f"No {codec.label} folder found at {area}, nothing to migrate.")
            return summary

        def skip_folder(folder: Path, exc: OSError) -> None:
            summary.failed.append(str(folder))
            self._report(on_progress, f"  - Error reading folder {folder.name}: {exc}")

        try:
            files = list(self._layout.iter_legacy_files(on_error=skip_folder))
        except OSError as exc:
            raise MigrationError(f"Cannot list {area}: {exc}") from exc

        for legacy in files:
            try:
                outcome = self._migrate_file(legacy, summary, on_progress)
            except Exception as exc:
                summary.failed.append(str(legacy.path))
                self._report(on_progress, f"  - Error processing {legacy.path.name}: {exc}")
                continue
            if outcome == CREATED:
                summary.created.append(str(legacy.path))
            else:
                summary.skipped.append(str(legacy.path))

        self._report(on_progress, f"{codec.label.capitalize()} migration finished.")
        return summary

    def _migrate_file(self, legacy: LegacyFile, summary: MigrationSummary, on_progress: Optional[ProgressCallback]) -> str:
        name = legacy.path.name
        if legacy.key is None:
            self._report(on_progress, f"  - Skipping {name}: filename does not match {{year}}_{{month}} pattern")
            return SKIPPED

        key = legacy.key
        target = self._layout.path_for(key)
        if target.exists():
            self._report(on_progress, f"  - Skipping {name}: JSON file already exists")
            return SKIPPED

        rows = read_rows(legacy.path)
        if not rows:
            self._report(on_progress, f"  - Skipping {name}: File is empty")
            return SKIPPED

        self._report(on_progress, f"  - Processing {name}")
        payloads = self._decode_rows(rows, key, name, on_progress)

        meta = {**self._layout.meta_for(key), LAST_MODIFIED_FIELD: to_iso(self._clock())}
        write_json_atomic(target, {META_FIELD: meta, self._codec.records_field: payloads})
        self._report(on_progress, f"  - Created JSON file: {target}")

        if self._codec.keep_history:
            backup_csv = self._layout.legacy_backup_path(legacy.path)
            if backup_csv.is_file():
                try:
                    if self._migrate_backup(backup_csv, key, on_progress):
                        summary.backups.append(str(backup_csv))
                except Exception as exc:
                    self._report(on_progress, f"    - Error migrating backup {backup_csv.name}: {exc}")
        return CREATED

    def _decode_rows(self, rows: list[list[str]], key: GroupKey, name: str, on_progress: Optional[ProgressCallback]) -> dict[str, dict]:
        codec = self._codec
        header: Optional[list[str]] = None
        if codec.looks_like_header(rows[0]):
            header = [h.strip() for h in rows[0]]
            rows = rows[1:]

        payloads: dict[str, dict] = {}
        for line_no, row in enumerate(rows, start=2 if header else 1):
            try:
                if header is not None:
                    record = codec.from_row(dict(zip(header, row)), key=key)
                else:
                    if len(row) < codec.min_columns:
                        raise ValidationError(f"expected at least {codec.min_columns} fields, got {len(row)}")
                    record = codec.from_row(row, key=key)
            except ValidationError as exc:
                self._report(on_progress, f"    - Skipping line {line_no} of {name}: {exc}")
                continue
            if getattr(record, codec.key_attr) in (None, ""):
                self._report(on_progress, f"    - Skipping line {line_no} of {name}: missing {codec.key_attr}")
                continue
            payloads[codec.record_key(record)] = codec.encode(record)
        return payloads

    def _migrate_backup(self, path: Path, key: GroupKey, on_progress: Optional[ProgressCallback]) -> bool:
        target = self._layout.backup_path_for(key)
        if target.exists():
            self._report(on_progress, f"    - Skipping backup {path.name}: JSON backup already exists")
            return False

        rows = read_rows(path)
        if len(rows) < 2:
            self._report(on_progress, "    - Skipping backup migration: Backup file is empty")
            return False

        header = [h.strip() for h in rows[0]]
        by_timestamp: dict[str, list[dict]] = {}
        for row in rows[1:]:
            values = {h: (v.strip() or None) for h, v in zip(header, row)}
            timestamp = values.get("timestamp")
            if not timestamp:
                continue
            by_timestamp.setdefault(timestamp, []).append(self._backup_change(values))

        doc = empty_ledger(key)
        doc["backups"] = [{"timestamp": ts, "changes": changes} for ts, changes in by_timestamp.items()]
        write_json_atomic(target, doc)
        self._report(on_progress, f"    - Created backup JSON file: {target}")
        return True

    def _backup_change(self, values: dict[str, Optional[str]]) -> dict[str, Any]:
        day = values.get("day") or values.get("id")
        if values.get("field"):
            field_name = values["field"]
            old, new = values.get("oldValue"), values.get("newValue")
        else:
            tracked = self._codec.tracked_fields or tuple(f.wire for f in self._codec.payload_fields)
            field_name = next((f for f in tracked if values.get(f) is not None), tracked[0])
            old, new = None, values.get(field_name)
        return {
            "day": int(day) if day and day.isdigit() else day,
            "field": field_name,
            "oldValue": old,
            "newValue": new,
        }


def migrate_csv_to_json(db_root: str | Path, on_progress: Optional[ProgressCallback] = None) -> dict[str, MigrationSummary]:
    """Migrate every entity's legacy CSV files under `{db_root}/SweldoDB`.

    An entity that cannot be migrated at all does not stop the others; the
    failures are raised together once every entity has run.
    """
    db_path = Path(db_root) / DB_FOLDER
    if on_progress:
        on_progress(f"Starting CSV to JSON migration in {db_path}")
    results: dict[str, MigrationSummary] = {}
    errors: list[str] = []
    for definition in build_definitions(db_path).values():
        if not definition.migrate:
            continue
        migrator = CsvToJsonMigrator(definition.codec, definition.layout)
        try:
            results[definition.name] = migrator.migrate_csv_to_json(on_progress)
        except MigrationError as exc:
            logger.error("%s migration failed: %s", definition.name, exc)
            if on_progress:
                on_progress(f"Migration failed for {definition.codec.label}: {exc}")
            results[definition.name] = MigrationSummary(entity=definition.name, failed=[str(definition.layout.area_path())])
            errors.append(f"{definition.name}: {exc}")
    if errors:
        if on_progress:
            on_progress(f"Migration failed: {'; '.join(errors)}")
        raise MigrationError("; ".join(errors))
    if on_progress:
        on_progress("Migration completed.")
    return results
