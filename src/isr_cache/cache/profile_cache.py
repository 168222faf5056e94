# src/isr_cache/cache/profile_cache.py — v1
"""Public cache facade: fingerprint in, lazily-filled Entry out.

Usage:
    cache = ProfileCache("cache", JsonCodec(), pdb_source=my_pdb_pipeline)
    entry = cache.entry_from_codeview(
        CodeViewId(module_path="ntkrnlmp.pdb", guid="ce7ffb00c20b87500211456b3e905c471")
    )
    profile = entry.profile()
"""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from isr_cache.cache.entry import Entry
from isr_cache.cache.errors import DownloadOrParseError, IsrCacheError, StorageIOError
from isr_cache.cache.fingerprint import BannerTokens, derive_key
from isr_cache.cache.models import CodeViewId, Fingerprint, LinuxBannerId
from isr_cache.codecs.json_codec import JsonCodec
from isr_cache.storage.local_storage import LocalArtifactStorage

if TYPE_CHECKING:
    from isr_cache.cache.sources import BaseLinuxSource, BasePdbSource, BaseProfileSource
    from isr_cache.codecs.base_codec import BaseCodec
    from isr_cache.storage.models import ArtifactInfo

logger = logging.getLogger(__name__)


class ProfileCache:
    """Cache of OS kernel profiles rooted at one directory.

    One codec is bound per instance; artifacts are named ``<key>.<extension>``
    so caches using different codecs can share a directory. The root and
    codec never change after construction.
    """

    def __init__(
        self,
        root: Path | str,
        codec: BaseCodec | None = None,
        *,
        pdb_source: BasePdbSource | None = None,
        linux_source: BaseLinuxSource | None = None,
        banner_tokens: BannerTokens | None = None,
    ) -> None:
        """Open (and create if needed) a cache directory.

        Args:
            root: Cache directory.
            codec: Artifact codec. Defaults to JsonCodec.
            pdb_source: Windows fetch-and-parse pipeline.
            linux_source: Linux fetch-and-parse pipeline.
            banner_tokens: Linux banner token selector for key derivation.

        Raises:
            StorageIOError: If root exists and is not a directory, or cannot
                be created.
        """
        self._root = Path(root).expanduser()
        if self._root.exists() and not self._root.is_dir():
            raise StorageIOError(
                "use as cache directory",
                self._root,
                NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(self._root)),
            )
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError("create cache directory", self._root, e) from e

        self._codec = codec or JsonCodec()
        self._storage = LocalArtifactStorage(self._root)
        self._pdb_source = pdb_source
        self._linux_source = linux_source
        self._banner_tokens = banner_tokens
        logger.debug("Opened profile cache at %s (codec=%s)", self._root, self._codec.format)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def codec(self) -> BaseCodec:
        return self._codec

    def entry(self, fingerprint: Fingerprint) -> Entry:
        """Create an entry for any fingerprint.

        Raises:
            MalformedFingerprintError: If no key can be derived.
        """
        key = derive_key(fingerprint, self._banner_tokens)
        return Entry(key, fingerprint, self._storage, self._codec, self._source_for(fingerprint))

    def entry_from_codeview(self, codeview: CodeViewId) -> Entry:
        """Create an entry for a Windows kernel identified by its CodeView descriptor."""
        return self.entry(codeview)

    def entry_from_linux_banner(self, banner: str | LinuxBannerId) -> Entry:
        """Create an entry for a Linux kernel identified by its version banner."""
        if isinstance(banner, str):
            banner = LinuxBannerId(raw_banner=banner)
        return self.entry(banner)

    def entry_from_pe(self, pe_path: Path | str) -> Entry:
        """Create an entry from the CodeView descriptor embedded in a PE image.

        Raises:
            DownloadOrParseError: If no PDB source is configured or the
                descriptor cannot be read.
        """
        pe_path = Path(pe_path)
        if self._pdb_source is None:
            raise DownloadOrParseError("pdb", str(pe_path), reason="no pdb source configured")
        try:
            codeview = self._pdb_source.read_codeview(pe_path)
        except IsrCacheError:
            raise
        except Exception as e:
            raise DownloadOrParseError(self._pdb_source.name, str(pe_path), e) from e
        return self.entry_from_codeview(codeview)

    def artifacts(self) -> list[ArtifactInfo]:
        """List artifacts written with this cache's codec."""
        return self._storage.list_artifacts(self._codec.extension)

    def _source_for(self, fingerprint: Fingerprint) -> BaseProfileSource | None:
        if isinstance(fingerprint, CodeViewId):
            return self._pdb_source
        return self._linux_source

    def __repr__(self) -> str:
        return f"ProfileCache(root={str(self._root)!r}, codec={self._codec!r})"
