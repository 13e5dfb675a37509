"""Failure taxonomy for natives syncing.

Every failure aborts the sync and propagates to the caller. Re-running the
sync is the retry mechanism: per-artifact markers and the hash-checked jar
store keep the second attempt from repeating verified work.
"""

from __future__ import annotations

from pathlib import Path


class NativeSyncError(RuntimeError):
    """Base class for all natives sync failures."""


class ConfigurationError(NativeSyncError):
    """The manifest or settings do not fit the running platform.

    Raised when no artifact applies to the host, when a manifest cannot be
    parsed, or when a configured custom natives directory is missing.
    """


class TransferError(NativeSyncError):
    """A download failed: connection error, timeout or non-success status."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class IntegrityError(NativeSyncError):
    """Content did not match its declared SHA-1, or an archive is unsafe."""

    def __init__(
        self,
        message: str,
        *,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class SyncIOError(NativeSyncError, OSError):
    """A local filesystem operation failed (delete, create, marker write)."""


class MissingArtifactError(NativeSyncError):
    """Offline mode was requested and the jar store has no copy."""

    def __init__(self, message: str, *, identifier: str, path: Path) -> None:
        super().__init__(message)
        self.identifier = identifier
        self.path = path
