from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from ..core.constants import COMPANIES_COLLECTION, DEFAULT_COMPANY_NAME
from ..core.exceptions import RemoteStoreError

logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    company_name: str = DEFAULT_COMPANY_NAME
    credentials_path: Optional[str] = None
    project_id: Optional[str] = None


class FirestoreRemoteStore:
    """Firestore-backed store rooted at `companies/{company}/`.

    Note: the firebase app is process wide; it is created on first use and
    reused afterwards.
    """

    delete_field = firestore.DELETE_FIELD

    def __init__(self, config: FirestoreConfig, client: Any = None):
        self._config = config
        self._client = client

    def _get_client(self):
        if self._client is None:
            try:
                firebase_admin.get_app()
            except ValueError:
                options = {"projectId": self._config.project_id} if self._config.project_id else None
                cred = (
                    credentials.Certificate(self._config.credentials_path)
                    if self._config.credentials_path
                    else credentials.ApplicationDefault()
                )
                firebase_admin.initialize_app(cred, options)
                logger.info("firebase app initialised (project=%s)", self._config.project_id or "default")
            self._client = firestore.client()
        return self._client

    def _collection(self, collection: str):
        company = self._config.company_name or DEFAULT_COMPANY_NAME
        return (
            self._get_client()
            .collection(COMPANIES_COLLECTION)
            .document(company)
            .collection(collection)
        )

    def get_document(self, collection: str, doc_id: str) -> Optional[dict]:
        try:
            snap = self._collection(collection).document(doc_id).get()
        except google_exceptions.GoogleAPICallError as exc:
            raise RemoteStoreError(f"get {collection}/{doc_id} failed: {exc}") from exc
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    def set_document(self, collection: str, doc_id: str, data: dict, *, merge: bool = True) -> None:
        try:
            self._collection(collection).document(doc_id).set(data, merge=merge)
        except google_exceptions.GoogleAPICallError as exc:
            raise RemoteStoreError(f"set {collection}/{doc_id} failed: {exc}") from exc

    def list_documents(self, collection: str) -> Sequence[tuple[str, dict]]:
        try:
            return [(snap.id, snap.to_dict() or {}) for snap in self._collection(collection).stream()]
        except google_exceptions.GoogleAPICallError as exc:
            raise RemoteStoreError(f"list {collection} failed: {exc}") from exc
