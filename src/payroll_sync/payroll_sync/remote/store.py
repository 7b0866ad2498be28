from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence


class RemoteStore(Protocol):
    """Document store addressed by (collection, document id).

    Implementations scope every collection to the configured company.
    """

    # Sentinel that removes a field when written with merge=True.
    delete_field: Any

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def set_document(self, collection: str, doc_id: str, data: dict, *, merge: bool = True) -> None:
        raise NotImplementedError

    def list_documents(self, collection: str) -> Sequence[tuple[str, dict]]:
        raise NotImplementedError
