from __future__ import annotations

from enum import Enum


class SyncDirection(str, Enum):
    """Direction of a sync run relative to the remote store."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


class SyncStatus(str, Enum):
    """Run state of one entity/direction pair; INFO only appears in the activity log."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class FieldKind(str, Enum):
    """How a record field is coerced between files, payloads and the remote store."""

    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATETIME = "datetime"
    LIST = "list"
    DATE = "date"
    JSON = "json"
    RAW = "raw"
