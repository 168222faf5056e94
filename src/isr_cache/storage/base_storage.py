# src/isr_cache/storage/base_storage.py — v1
"""Abstract artifact storage interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from isr_cache.storage.local_storage import MappedArtifact
    from isr_cache.storage.models import ArtifactInfo


class BaseArtifactStorage(ABC):
    """Unified interface for artifact storage backends.

    Artifacts are addressed by (cache key, codec extension).
    """

    @property
    @abstractmethod
    def root(self) -> Path:
        """Directory that holds the artifacts."""

    @abstractmethod
    def artifact_path(self, key: str, extension: str) -> Path:
        """Return where the artifact for key/extension lives."""

    @abstractmethod
    def exists(self, key: str, extension: str) -> bool:
        """Check whether an artifact is published."""

    @abstractmethod
    def publish(self, key: str, extension: str, data: bytes) -> bool:
        """Atomically publish an artifact.

        Returns:
            True if the artifact was written, False if it already existed.

        Raises:
            StorageIOError: On filesystem failure.
        """

    @abstractmethod
    def open(self, key: str, extension: str) -> MappedArtifact:
        """Open a read-only view of an artifact.

        Raises:
            ArtifactNotFoundError: If the artifact is absent.
            StorageIOError: On filesystem failure.
        """

    @abstractmethod
    def list_artifacts(self, extension: str | None = None) -> list[ArtifactInfo]:
        """List published artifacts, optionally for one extension."""
