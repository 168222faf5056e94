# src/isr_cache/cache/errors.py — v1
"""Error taxonomy for the profile cache.

Every failure the cache reports derives from IsrCacheError and chains the
exception that caused it.
"""

from __future__ import annotations

from pathlib import Path


class IsrCacheError(Exception):
    """Base class for all profile cache errors."""


class MalformedFingerprintError(IsrCacheError, ValueError):
    """Fingerprint cannot be normalized into a cache key."""

    def __init__(self, reason: str, fingerprint: object | None = None) -> None:
        self.reason = reason
        self.fingerprint = fingerprint
        super().__init__(f"Malformed fingerprint: {reason}")


class ArtifactNotFoundError(IsrCacheError):
    """No artifact exists for the requested key and extension."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Artifact not found: {path}")


class StorageIOError(IsrCacheError):
    """Filesystem failure while creating, reading or writing cache files."""

    def __init__(self, operation: str, path: Path, error: OSError) -> None:
        self.operation = operation
        self.path = path
        self.error = error
        super().__init__(f"Failed to {operation} {path}: {error}")


class CorruptArtifactError(IsrCacheError):
    """Artifact bytes could not be decoded into a profile.

    The file is left in place for inspection.
    """

    def __init__(self, codec: str, reason: str, path: Path | None = None) -> None:
        self.codec = codec
        self.reason = reason
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Corrupt {codec} artifact{where}: {reason}")


class ArtifactEncodeError(IsrCacheError):
    """Profile could not be represented in the codec's format."""

    def __init__(self, codec: str, reason: str) -> None:
        self.codec = codec
        self.reason = reason
        super().__init__(f"Failed to encode profile as {codec}: {reason}")


class DownloadOrParseError(IsrCacheError):
    """The fetch-and-parse pipeline failed to produce a profile.

    Wraps whatever the source reported; the original exception is available
    as ``cause`` and as ``__cause__``.
    """

    def __init__(
        self,
        source: str,
        key: str,
        cause: BaseException | None = None,
        reason: str | None = None,
    ) -> None:
        self.source = source
        self.key = key
        self.cause = cause
        self.reason = reason or (f"{type(cause).__name__}: {cause}" if cause is not None else "")
        detail = f": {self.reason}" if self.reason else ""
        super().__init__(f"{source} pipeline failed for {key}{detail}")
