from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import DEFAULT_LOG_LIMIT, SYNC_LOG_MAX_ENTRIES
from ..core.enums import SyncDirection, SyncStatus

logger = logging.getLogger(__name__)


class SyncActivityLog:
    """Rolling sync history in `{db}/logs/sync_activity.json`, newest first.

    Note: This is user-facing history, not diagnostics; every failure here
    is logged and ignored.
    """

    def __init__(self, path: Path, *, max_entries: int = SYNC_LOG_MAX_ENTRIES, clock: Callable[[], Any] = now_utc):
        self._path = Path(path)
        self._max_entries = int(max_entries)
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> list[dict]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except ValueError:
            logger.error("sync log %s is not valid JSON, starting fresh", self._path)
            return []
        return data if isinstance(data, list) else []

    def _write(self, entries: list[dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(entries, f, ensure_ascii=False, indent=2, default=str)
        os.replace(tmp, self._path)

    def add(
        self,
        *,
        model_name: str,
        operation: SyncDirection,
        status: SyncStatus,
        message: str,
        details: Optional[dict] = None,
    ) -> Optional[dict]:
        entry: dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "timestamp": to_iso(self._clock()),
            "modelName": model_name,
            "operation": SyncDirection(operation).value,
            "status": SyncStatus(status).value,
            "message": message,
        }
        if details:
            entry["details"] = details
        try:
            with self._lock:
                entries = self._read()
                entries.insert(0, entry)
                self._write(entries[: self._max_entries] if self._max_entries > 0 else entries)
        except OSError as exc:
            logger.error("failed to add sync log entry: %s", exc)
            return None
        return entry

    def entries(self, limit: int = DEFAULT_LOG_LIMIT) -> list[dict]:
        try:
            with self._lock:
                return self._read()[: max(0, int(limit))]
        except OSError as exc:
            logger.error("failed to read sync log: %s", exc)
            return []

    def clear(self) -> None:
        try:
            with self._lock:
                self._write([])
        except OSError as exc:
            logger.error("failed to clear sync log: %s", exc)
