from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_LEDGER_MAX_ENTRIES
from ..remote.store import RemoteStore
from .identity import GroupKey
from .transform import to_remote

logger = logging.getLogger(__name__)


def empty_ledger(key: GroupKey) -> dict[str, Any]:
    doc: dict[str, Any] = key.to_meta()
    doc["backups"] = []
    return doc


def apply_retention(backups: list, max_entries: int) -> list:
    """Keep the newest `max_entries` whole entries; 0 keeps everything."""
    if max_entries > 0 and len(backups) > max_entries:
        return backups[-max_entries:]
    return backups


class ChangeLedger:
    """Append-only field-change history, one ledger document per sync document.

    Ledger writes are best effort: a failure is logged and never reaches the
    sync that triggered it.
    """

    def __init__(
        self,
        remote: RemoteStore,
        *,
        clock: Callable[[], Any] = now_utc,
        max_entries: int = DEFAULT_LEDGER_MAX_ENTRIES,
    ):
        self._remote = remote
        self._clock = clock
        self._max_entries = int(max_entries)

    def append_backup(
        self,
        collection: str,
        key: GroupKey,
        changes: Sequence[dict],
        *,
        doc_id: str | None = None,
    ) -> bool:
        if not changes:
            return False
        target = doc_id or key.doc_id()
        try:
            doc = self._remote.get_document(collection, target) or empty_ledger(key)
            backups = list(doc.get("backups") or [])
            backups.append({"timestamp": self._clock(), "changes": [dict(c) for c in changes]})
            doc["backups"] = apply_retention(backups, self._max_entries)
            # Values inside changes are kept verbatim; only real dates convert.
            self._remote.set_document(collection, target, to_remote(doc, parse_strings=False), merge=False)
            return True
        except Exception as exc:
            logger.warning("Backup operation failed but main save completed (%s/%s): %s", collection, target, exc)
            return False
