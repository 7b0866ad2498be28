from __future__ import annotations

from typing import Any, Protocol, Sequence

from ..sync.identity import GroupKey


class LocalRepository(Protocol):
    """Local model consumed by the sync adapters."""

    def load_all(self) -> Sequence[Any]:
        raise NotImplementedError

    def save_or_update(self, records: Sequence[Any], key: GroupKey) -> None:
        """Insert or replace `records` (by record key) in the document for `key`."""

        raise NotImplementedError
