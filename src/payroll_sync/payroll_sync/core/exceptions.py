class DomainError(Exception):
    """Base exception for sync and migration failures."""


class ValidationError(DomainError):
    """Raised when input data is invalid or cannot be coerced."""


class SyncError(DomainError):
    """Raised when a push or pull cannot complete."""


class SyncInProgressError(SyncError):
    """Raised when a run is requested while the same run is still active."""


class MigrationError(DomainError):
    """Raised when a migration cannot even start."""


class LocalStoreError(DomainError):
    """Raised when a local document exists but cannot be read or written."""


class RemoteStoreError(DomainError):
    """Raised by remote store implementations for transport failures."""
