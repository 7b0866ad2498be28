from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..core.constants import LAST_MODIFIED_FIELD, META_FIELD
from ..core.exceptions import LocalStoreError
from ..entities.codec import EntityCodec
from ..sync.identity import GroupKey
from .layouts import DocumentLayout

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Optional[dict]:
    """Read a JSON document; a missing file is "no data yet"."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as exc:
        raise LocalStoreError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise LocalStoreError(f"Cannot read {path}: expected a JSON object")
    return data


def write_json_atomic(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=str)
        os.replace(tmp, path)
    except OSError as exc:
        raise LocalStoreError(f"Cannot write {path}: {exc}") from exc


class JsonFileRepository:
    """Local model over the JSON document files of one entity."""

    def __init__(self, codec: EntityCodec, layout: DocumentLayout, *, clock: Callable[[], Any] = now_utc):
        self._codec = codec
        self._layout = layout
        self._clock = clock

    @property
    def codec(self) -> EntityCodec:
        return self._codec

    def load_all(self) -> list[Any]:
        records: list[Any] = []
        for key, path in self._layout.iter_documents():
            doc = read_json(path)
            if doc is None:
                continue
            records.extend(self._decode_document(doc, key))
        return records

    def load_group(self, key: GroupKey) -> list[Any]:
        doc = read_json(self._layout.path_for(key))
        if doc is None:
            return []
        return self._decode_document(doc, key)

    def _decode_document(self, doc: dict, key: GroupKey) -> list[Any]:
        meta_key = GroupKey.from_meta(doc.get(META_FIELD))
        if meta_key.is_empty:
            meta_key = key
        payloads = doc.get(self._codec.records_field) or {}
        if isinstance(payloads, list):
            # Older files stored records as a list.
            payloads = {str(i): p for i, p in enumerate(payloads)}
        return [
            self._codec.decode(payload, key=meta_key, record_key=rk)
            for rk, payload in payloads.items()
        ]

    def save_or_update(self, records: Sequence[Any], key: GroupKey) -> None:
        path = self._layout.path_for(key)
        doc = read_json(path) or {}
        existing = doc.get(self._codec.records_field)
        if not isinstance(existing, dict):
            existing = {}
        for record in records:
            existing[self._codec.record_key(record)] = self._codec.encode(record)

        meta = dict(doc.get(META_FIELD) or {})
        meta.update(self._layout.meta_for(key))
        meta[LAST_MODIFIED_FIELD] = to_iso(self._clock())
        doc[META_FIELD] = meta
        doc[self._codec.records_field] = existing
        write_json_atomic(path, doc)
        logger.debug("saved %s %s record(s) to %s", len(records), self._codec.name, path)

    def delete_records(self, key: GroupKey, record_keys: Sequence[str]) -> int:
        path = self._layout.path_for(key)
        doc = read_json(path)
        if doc is None:
            return 0
        existing = doc.get(self._codec.records_field) or {}
        removed = [rk for rk in record_keys if existing.pop(str(rk), None) is not None]
        if removed:
            doc[self._codec.records_field] = existing
            meta = dict(doc.get(META_FIELD) or {})
            meta[LAST_MODIFIED_FIELD] = to_iso(self._clock())
            doc[META_FIELD] = meta
            write_json_atomic(path, doc)
        return len(removed)
