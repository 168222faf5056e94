# src/isr_cache/storage/local_storage.py — v1
"""Local filesystem artifact storage with atomic publish and mmap reads.

Writers stream into a hidden temporary file next to the target, fsync it, and
``os.replace`` it into place. Readers therefore see either no artifact or a
complete one, and a published file is never modified in place: a concurrent
republish swaps in a new inode while existing mappings keep the old one.
"""

from __future__ import annotations

import contextlib
import logging
import mmap
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from isr_cache.cache.errors import ArtifactNotFoundError, StorageIOError
from isr_cache.storage import layout
from isr_cache.storage.base_storage import BaseArtifactStorage
from isr_cache.storage.models import ArtifactInfo

logger = logging.getLogger(__name__)

_ARTIFACT_MODE = 0o644


class MappedArtifact:
    """Read-only memory-mapped view of an artifact.

    Use as a context manager; the yielded memoryview is valid until exit and
    must not be retained past it.
    """

    def __init__(self, path: Path, mapping: mmap.mmap | None) -> None:
        self.path = path
        self._mapping = mapping
        self._view = memoryview(mapping) if mapping is not None else memoryview(b"")

    @classmethod
    def map(cls, path: Path) -> MappedArtifact:
        """Map a file read-only. Empty files yield an empty view."""
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            mapping = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) if size else None
        return cls(path, mapping)

    @property
    def view(self) -> memoryview:
        return self._view

    def __len__(self) -> int:
        return len(self._view)

    def close(self) -> None:
        self._view.release()
        if self._mapping is not None:
            self._mapping.close()
            self._mapping = None

    def __enter__(self) -> memoryview:
        return self._view

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class LocalArtifactStorage(BaseArtifactStorage):
    """Flat directory of ``<key>.<extension>`` artifacts.

    The root directory is created lazily on first publish.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def artifact_path(self, key: str, extension: str) -> Path:
        return layout.artifact_path(self._root, key, extension)

    def exists(self, key: str, extension: str) -> bool:
        """Check whether an artifact file is present."""
        return self.artifact_path(key, extension).is_file()

    def publish(self, key: str, extension: str, data: bytes) -> bool:
        """Write data to a temporary file and rename it over the artifact path.

        A present artifact is left untouched. Two writers racing on the same
        key both rename complete files; the last rename wins.
        """
        path = self.artifact_path(key, extension)
        if path.exists():
            logger.info("Artifact %s already published, skipping write", path.name)
            return False

        self._ensure_root()
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._root,
                prefix=layout.temp_prefix(key, extension),
                suffix=layout.TEMP_SUFFIX,
            )
        except OSError as e:
            raise StorageIOError("create temporary file in", self._root, e) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, _ARTIFACT_MODE)
            os.replace(tmp_name, path)
        except BaseException as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            if isinstance(e, OSError):
                raise StorageIOError("publish", path, e) from e
            raise

        logger.info("Published artifact %s (%d bytes)", path.name, len(data))
        return True

    def open(self, key: str, extension: str) -> MappedArtifact:
        """Memory-map an artifact read-only."""
        path = self.artifact_path(key, extension)
        try:
            return MappedArtifact.map(path)
        except FileNotFoundError:
            raise ArtifactNotFoundError(path) from None
        except OSError as e:
            raise StorageIOError("map", path, e) from e

    def list_artifacts(self, extension: str | None = None) -> list[ArtifactInfo]:
        """List published artifacts sorted by file name."""
        artifacts: list[ArtifactInfo] = []
        if not self._root.is_dir():
            return artifacts

        wanted = extension.lstrip(".") if extension else None
        for path in sorted(self._root.iterdir()):
            if not layout.is_artifact(path):
                continue
            key, ext = layout.split_artifact_name(path.name)
            if wanted is not None and ext != wanted:
                continue
            try:
                stat = path.stat()
            except FileNotFoundError:
                continue
            artifacts.append(
                ArtifactInfo(
                    key=key,
                    extension=ext,
                    path=path,
                    size_bytes=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return artifacts

    def _ensure_root(self) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError("create cache directory", self._root, e) from e
