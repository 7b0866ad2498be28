"""Generic push/pull between a local model and the remote store.

One `EntitySyncAdapter` serves every entity; the entity codec supplies the
record shape, the grouping key and the collection names.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_BATCH_SIZE, LAST_MODIFIED_FIELD, META_FIELD
from ..core.exceptions import SyncError
from ..entities.codec import EntityCodec
from ..local.repository import LocalRepository
from ..remote.store import RemoteStore
from .batch import ProgressCallback, process_in_batches
from .identity import GroupKey
from .ledger import ChangeLedger
from .transform import from_remote, to_remote

logger = logging.getLogger(__name__)


class EntitySyncAdapter:
    def __init__(
        self,
        codec: EntityCodec,
        model: LocalRepository,
        remote: RemoteStore,
        *,
        ledger: Optional[ChangeLedger] = None,
        clock: Callable[[], Any] = now_utc,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        self._codec = codec
        self._model = model
        self._remote = remote
        self._ledger = ledger
        self._clock = clock
        self._batch_size = int(batch_size)

    @property
    def codec(self) -> EntityCodec:
        return self._codec

    @staticmethod
    def _report(on_progress: Optional[ProgressCallback], message: str) -> None:
        logger.info(message)
        if on_progress:
            on_progress(message)

    def _group(self, records: Sequence[Any]) -> dict[GroupKey, list[Any]]:
        groups: dict[GroupKey, list[Any]] = {}
        for record in records:
            groups.setdefault(self._codec.group_key(record), []).append(record)
        return groups

    # Push
    def sync_to_firestore(self, on_progress: Optional[ProgressCallback] = None) -> None:
        label = self._codec.label
        try:
            records = list(self._model.load_all())
            groups = self._group(records)
        except Exception as exc:
            raise SyncError(f"Failed to sync {label} to Firestore: {exc}") from exc

        if not groups:
            self._report(on_progress, f"No {label} records found locally.")
            return

        total = len(groups)
        done = 0
        lock = threading.Lock()

        def push(item: tuple[GroupKey, list[Any]]) -> None:
            nonlocal done
            key, group = item
            self._push_group(key, group)
            with lock:
                done += 1
                index = done
            self._report(on_progress, f"Synced {key.describe()} ({index}/{total})")

        try:
            process_in_batches(list(groups.items()), self._batch_size, push)
        except Exception as exc:
            raise SyncError(f"Failed to sync {label} to Firestore: {exc}") from exc

        self._report(on_progress, f"Uploaded {len(records)} {label} record(s) in {total} document(s).")

    def _push_group(self, key: GroupKey, records: Sequence[Any]) -> None:
        codec = self._codec
        doc_id = codec.doc_id(key)
        existing = from_remote(self._remote.get_document(codec.collection, doc_id) or {})
        existing_records = existing.get(codec.records_field) or {}

        payloads = {codec.record_key(r): codec.encode(r) for r in records}
        changes: list[dict] = []
        for rk, payload in payloads.items():
            if rk not in existing_records:
                continue
            old = codec.normalize(existing_records[rk], key=key, record_key=rk)
            changes.extend(codec.diff(rk, old, payload))

        meta = {**key.to_meta(), LAST_MODIFIED_FIELD: self._clock()}
        doc = {
            META_FIELD: to_remote(meta, parse_strings=False),
            codec.records_field: {rk: codec.to_remote_payload(p) for rk, p in payloads.items()},
        }
        self._remote.set_document(codec.collection, doc_id, doc, merge=True)
        logger.debug("wrote %s/%s (%s record(s), %s change(s))", codec.collection, doc_id, len(payloads), len(changes))

        if changes and codec.keep_history and self._ledger is not None:
            self._ledger.append_backup(codec.backup_collection, key, changes, doc_id=doc_id)

    # Pull
    def sync_from_firestore(self, on_progress: Optional[ProgressCallback] = None) -> None:
        codec = self._codec
        label = codec.label
        try:
            documents = list(self._remote.list_documents(codec.collection))
        except Exception as exc:
            raise SyncError(f"Failed to sync {label} from Firestore: {exc}") from exc

        if not documents:
            self._report(on_progress, f"No {label} data found in Firestore.")
            return

        try:
            groups: dict[GroupKey, list[Any]] = {}
            for doc_id, raw in documents:
                doc = from_remote(raw)
                key = codec.key_from_document(doc_id, doc)
                payloads = doc.get(codec.records_field) or {}
                records = groups.setdefault(key, [])
                for rk, payload in payloads.items():
                    records.append(codec.decode(payload, key=key, record_key=rk))

            total = len(groups)
            for index, (key, records) in enumerate(groups.items(), start=1):
                if records:
                    self._model.save_or_update(records, key)
                self._report(on_progress, f"Saved {key.describe()} ({index}/{total})")
        except Exception as exc:
            raise SyncError(f"Failed to sync {label} from Firestore: {exc}") from exc

    def delete_remote_records(self, key: GroupKey, record_keys: Sequence[str]) -> None:
        """Remove single records from a remote document, leaving the document itself."""
        if not record_keys:
            return
        codec = self._codec
        doc_id = codec.doc_id(key)
        data = {
            META_FIELD: to_remote({LAST_MODIFIED_FIELD: self._clock()}),
            codec.records_field: {str(rk): self._remote.delete_field for rk in record_keys},
        }
        try:
            self._remote.set_document(codec.collection, doc_id, data, merge=True)
        except Exception as exc:
            raise SyncError(f"Failed to delete {codec.label} from Firestore: {exc}") from exc


def create_sync(
    codec: EntityCodec,
    model: LocalRepository,
    remote: RemoteStore,
    *,
    ledger: Optional[ChangeLedger] = None,
    clock: Callable[[], Any] = now_utc,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> EntitySyncAdapter:
    return EntitySyncAdapter(codec, model, remote, ledger=ledger, clock=clock, batch_size=batch_size)
