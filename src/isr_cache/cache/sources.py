# src/isr_cache/cache/sources.py — v1
"""Fetch-and-parse pipelines consumed by the cache.

Downloading symbol packages and parsing PDB/DWARF data live outside this
package. The cache only needs a profile for a fingerprint, so each pipeline
is plugged in behind these interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from isr_cache.cache.models import CodeViewId, Fingerprint, LinuxBannerId
    from isr_cache.profile.models import Profile


class BaseProfileSource(ABC):
    """Produces a profile for a fingerprint, typically by download + parse.

    Implementations own their network timeouts and cancellation; the cache
    neither retries nor times out calls to ``fetch``.
    """

    name: str = "profile"

    @abstractmethod
    def fetch(self, fingerprint: Fingerprint) -> Profile:
        """Download debug symbols for the fingerprint and parse them.

        Any exception raised here is reported to the caller as
        DownloadOrParseError.
        """


class BasePdbSource(BaseProfileSource):
    """Windows pipeline: symbol-server PDB download and PDB parsing."""

    name = "pdb"

    @abstractmethod
    def fetch(self, fingerprint: CodeViewId) -> Profile:  # type: ignore[override]
        """Download the PDB named by the CodeView descriptor and parse it."""

    @abstractmethod
    def read_codeview(self, pe_path: Path) -> CodeViewId:
        """Extract the CodeView descriptor from a PE image's debug directory."""


class BaseLinuxSource(BaseProfileSource):
    """Linux pipeline: banner to distribution packages, DWARF + System.map parsing."""

    name = "linux"

    @abstractmethod
    def fetch(self, fingerprint: LinuxBannerId) -> Profile:  # type: ignore[override]
        """Resolve the banner's packages, download them, and parse the profile."""
