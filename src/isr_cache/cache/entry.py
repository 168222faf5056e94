# src/isr_cache/cache/entry.py — v1
"""Lazy cache entry: lookup, fill on miss, persist, read.

State flow driven by Entry.profile():

    UNRESOLVED -> READY                      artifact present, decoded
    UNRESOLVED -> MISSING -> FILLING -> READY  fetched, published (best effort)
    any        -> FAILED                     error before a profile was obtained

FAILED is terminal: the recorded error is raised again on every call. A READY
entry re-reads storage on each call and refills if the artifact is gone.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from isr_cache.cache.errors import (
    ArtifactEncodeError,
    ArtifactNotFoundError,
    CorruptArtifactError,
    DownloadOrParseError,
    IsrCacheError,
    StorageIOError,
)
from isr_cache.cache.models import EntryState, Fingerprint
from isr_cache.logging.context import entry_context
from isr_cache.profile.models import Profile

if TYPE_CHECKING:
    from isr_cache.cache.sources import BaseProfileSource
    from isr_cache.codecs.base_codec import BaseCodec
    from isr_cache.storage.base_storage import BaseArtifactStorage

logger = logging.getLogger(__name__)


class Entry:
    """Handle bound to one cache key. Creating it performs no I/O."""

    def __init__(
        self,
        key: str,
        fingerprint: Fingerprint,
        storage: BaseArtifactStorage,
        codec: BaseCodec,
        source: BaseProfileSource | None,
    ) -> None:
        self.key = key
        self.fingerprint = fingerprint
        self._storage = storage
        self._codec = codec
        self._source = source
        self._state = EntryState.UNRESOLVED
        self._error: IsrCacheError | None = None

    @property
    def state(self) -> EntryState:
        return self._state

    @property
    def error(self) -> IsrCacheError | None:
        """Error that moved the entry to FAILED, if any."""
        return self._error

    @property
    def source(self) -> str:
        """Fingerprint family: "pdb" or "linux"."""
        return self.fingerprint.source

    @property
    def artifact_path(self) -> Path:
        return self._storage.artifact_path(self.key, self._codec.extension)

    def profile(self) -> Profile:
        """Return the profile, fetching and persisting it on a cache miss.

        Raises:
            CorruptArtifactError: The cached artifact cannot be decoded.
            StorageIOError: The artifact cannot be read.
            DownloadOrParseError: The source pipeline failed or is not configured.
        """
        if self._state is EntryState.FAILED and self._error is not None:
            raise self._error

        with entry_context(self.key, self.source):
            try:
                return self._resolve()
            except IsrCacheError as e:
                self._state = EntryState.FAILED
                self._error = e
                raise

    def _resolve(self) -> Profile:
        if self._storage.exists(self.key, self._codec.extension):
            try:
                profile = self._read()
            except ArtifactNotFoundError:
                logger.info("Artifact %s disappeared before it was read", self.artifact_path.name)
            else:
                self._state = EntryState.READY
                logger.info("Cache hit: %s", self.artifact_path.name)
                return profile

        self._state = EntryState.MISSING
        logger.info("Cache miss: %s, invoking %s pipeline", self.artifact_path.name, self.source)
        return self._fill()

    def _read(self) -> Profile:
        with self._storage.open(self.key, self._codec.extension) as view:
            try:
                return self._codec.decode(view)
            except CorruptArtifactError as e:
                logger.error("Corrupt artifact %s: %s", self.artifact_path, e.reason)
                raise CorruptArtifactError(e.codec, e.reason, self.artifact_path) from e

    def _fill(self) -> Profile:
        self._state = EntryState.FILLING
        profile = self._fetch()

        # The caller already holds a valid profile: a failed write only costs
        # a recomputation on the next request.
        try:
            data = self._codec.encode(profile)
            self._storage.publish(self.key, self._codec.extension, data)
        except (ArtifactEncodeError, StorageIOError) as e:
            logger.warning(
                "Could not cache %s, it will be recomputed next time: %s",
                self.artifact_path.name, e, exc_info=True,
            )

        self._state = EntryState.READY
        return profile

    def _fetch(self) -> Profile:
        if self._source is None:
            raise DownloadOrParseError(
                self.source, self.key, reason=f"no {self.source} source configured"
            )

        try:
            profile = self._source.fetch(self.fingerprint)
        except IsrCacheError:
            raise
        except Exception as e:
            raise DownloadOrParseError(self._source.name, self.key, e) from e

        if not isinstance(profile, Profile):
            raise DownloadOrParseError(
                self._source.name, self.key,
                reason=f"source returned {type(profile).__name__}, expected Profile",
            )
        return profile

    def __repr__(self) -> str:
        return f"Entry(key={self.key!r}, codec={self._codec.format!r}, state={self._state.value!r})"
