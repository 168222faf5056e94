"""Opinionated on-disk cache for OS kernel profiles.

Profiles are built from Windows PDBs (keyed by CodeView descriptor) or Linux
DWARF debug info plus System.map (keyed by version banner), persisted once
per cache directory, and memory-mapped on later reads.
"""

from isr_cache.cache.entry import Entry
from isr_cache.cache.errors import (
    ArtifactEncodeError,
    ArtifactNotFoundError,
    CorruptArtifactError,
    DownloadOrParseError,
    IsrCacheError,
    MalformedFingerprintError,
    StorageIOError,
)
from isr_cache.cache.fingerprint import derive_key, parse_linux_banner, stable_banner_tokens
from isr_cache.cache.models import CodeViewId, EntryState, LinuxBanner, LinuxBannerId
from isr_cache.cache.profile_cache import ProfileCache
from isr_cache.cache.sources import BaseLinuxSource, BasePdbSource, BaseProfileSource
from isr_cache.codecs import BaseCodec, JsonCodec, MsgpackCodec, PickleCodec, create_codec
from isr_cache.profile.models import Profile
from isr_cache.version import __version__

__all__ = [
    "ArtifactEncodeError",
    "ArtifactNotFoundError",
    "BaseCodec",
    "BaseLinuxSource",
    "BasePdbSource",
    "BaseProfileSource",
    "CodeViewId",
    "CorruptArtifactError",
    "DownloadOrParseError",
    "Entry",
    "EntryState",
    "IsrCacheError",
    "JsonCodec",
    "LinuxBanner",
    "LinuxBannerId",
    "MalformedFingerprintError",
    "MsgpackCodec",
    "PickleCodec",
    "Profile",
    "ProfileCache",
    "StorageIOError",
    "__version__",
    "create_codec",
    "derive_key",
    "parse_linux_banner",
    "stable_banner_tokens",
]
