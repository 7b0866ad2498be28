from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import now_utc, to_iso
from ..core.enums import SyncDirection, SyncStatus
from ..core.exceptions import SyncError, SyncInProgressError, ValidationError
from .activity_log import SyncActivityLog
from .adapter import EntitySyncAdapter
from .batch import ProgressCallback

logger = logging.getLogger(__name__)

MAX_PROGRESS_LINES = 200


@dataclass
class RunState:
    entity: str
    direction: SyncDirection
    status: SyncStatus = SyncStatus.IDLE
    error: Optional[str] = None
    progress: list[str] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "direction": self.direction.value,
            "status": self.status.value,
            "error": self.error,
            "progress": list(self.progress),
            "startedAt": to_iso(self.started_at) if self.started_at else None,
            "finishedAt": to_iso(self.finished_at) if self.finished_at else None,
        }


class SyncCoordinator:
    """Runs entity syncs and tracks idle -> running -> success|error per entity and direction.

    A second run of the same entity/direction is refused while one is running.
    """

    def __init__(
        self,
        adapters: Mapping[str, EntitySyncAdapter],
        *,
        activity_log: Optional[SyncActivityLog] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._adapters = dict(adapters)
        self._activity_log = activity_log
        self._clock = clock
        self._lock = threading.Lock()
        self._states: dict[tuple[str, SyncDirection], RunState] = {
            (name, direction): RunState(entity=name, direction=direction)
            for name in self._adapters
            for direction in SyncDirection
        }

    @property
    def entity_names(self) -> list[str]:
        return list(self._adapters)

    def state(self, entity: str, direction: SyncDirection) -> RunState:
        return self._states[(entity, SyncDirection(direction))]

    def snapshot(self) -> dict[str, dict[str, dict[str, Any]]]:
        with self._lock:
            out: dict[str, dict[str, dict[str, Any]]] = {}
            for (name, direction), st in self._states.items():
                out.setdefault(name, {})[direction.value] = st.to_dict()
            return out

    def _log(self, entity: str, direction: SyncDirection, status: SyncStatus, message: str, details: Optional[dict] = None) -> None:
        if self._activity_log is not None:
            self._activity_log.add(model_name=entity, operation=direction, status=status, message=message, details=details)

    def _begin(self, entity: str, direction: SyncDirection) -> RunState:
        if entity not in self._adapters:
            raise ValidationError(f"Unknown entity: {entity}")
        with self._lock:
            st = self._states[(entity, direction)]
            if st.status == SyncStatus.RUNNING:
                raise SyncInProgressError(f"{entity} {direction.value} is already running")
            st.status = SyncStatus.RUNNING
            st.error = None
            st.progress = []
            st.started_at = self._clock()
            st.finished_at = None
            return st

    def run(self, entity: str, direction: SyncDirection, on_progress: Optional[ProgressCallback] = None) -> RunState:
        direction = SyncDirection(direction)
        st = self._begin(entity, direction)
        verb = "Uploading" if direction == SyncDirection.UPLOAD else "Downloading"
        self._log(entity, direction, SyncStatus.RUNNING, f"{verb} {entity}...")

        def progress(message: str) -> None:
            st.progress.append(message)
            del st.progress[:-MAX_PROGRESS_LINES]
            if on_progress:
                on_progress(message)

        adapter = self._adapters[entity]
        try:
            if direction == SyncDirection.UPLOAD:
                adapter.sync_to_firestore(progress)
            else:
                adapter.sync_from_firestore(progress)
        except Exception as exc:
            with self._lock:
                st.status = SyncStatus.ERROR
                st.error = str(exc)
                st.finished_at = self._clock()
            logger.error("%s %s failed: %s", entity, direction.value, exc)
            self._log(entity, direction, SyncStatus.ERROR, str(exc), {"cause": repr(exc.__cause__)} if exc.__cause__ else None)
            raise

        with self._lock:
            st.status = SyncStatus.SUCCESS
            st.finished_at = self._clock()
        self._log(entity, direction, SyncStatus.SUCCESS, st.progress[-1] if st.progress else f"{entity} {direction.value} finished")
        return st

    def run_all(self, direction: SyncDirection, on_progress: Optional[ProgressCallback] = None) -> dict[str, RunState]:
        """Run every entity in turn. A failing entity is recorded and the rest still run."""
        direction = SyncDirection(direction)
        results: dict[str, RunState] = {}
        for name in self._adapters:
            if on_progress:
                on_progress(f"Starting {name} {direction.value}")
            try:
                results[name] = self.run(name, direction, on_progress)
            except SyncInProgressError as exc:
                logger.warning("skipping %s: %s", name, exc)
                results[name] = self.state(name, direction)
            except SyncError:
                results[name] = self.state(name, direction)
        return results
