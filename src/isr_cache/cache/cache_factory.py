# src/isr_cache/cache/cache_factory.py — v1
"""Factory for profile cache instantiation from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from isr_cache.cache.profile_cache import ProfileCache
from isr_cache.codecs.codec_factory import create_codec
from isr_cache.config.settings import ConfigurationError, Settings

if TYPE_CHECKING:
    from isr_cache.cache.sources import BaseLinuxSource, BasePdbSource


def create_cache(
    settings: Settings,
    pdb_source: BasePdbSource | None = None,
    linux_source: BaseLinuxSource | None = None,
) -> ProfileCache:
    """Instantiate the configured profile cache.

    Args:
        settings: Application settings (CACHE_ROOT, CACHE_CODEC).
        pdb_source: Windows fetch-and-parse pipeline.
        linux_source: Linux fetch-and-parse pipeline.

    Returns:
        ProfileCache rooted at settings.cache_root.

    Raises:
        ConfigurationError: If CACHE_ROOT is not set.
        StorageIOError: If the cache directory cannot be used.
    """
    if settings.cache_root is None:
        raise ConfigurationError("CACHE_ROOT must be set to create a profile cache")

    return ProfileCache(
        settings.cache_root,
        create_codec(settings.cache_codec),
        pdb_source=pdb_source,
        linux_source=linux_source,
    )
