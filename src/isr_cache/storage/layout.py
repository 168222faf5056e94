# src/isr_cache/storage/layout.py — v1
"""Cache directory layout.

Flat: every artifact lives directly under the cache root as
``<key>.<extension>``. No subdirectories, no index or manifest; presence of
the file is the only record that an artifact exists.

In-flight writes use hidden temporary files in the same directory so the
final rename stays on one filesystem.
"""

from __future__ import annotations

from pathlib import Path

TEMP_PREFIX = "."
TEMP_SUFFIX = ".tmp"


def artifact_name(key: str, extension: str) -> str:
    return f"{key}.{extension.lstrip('.')}"


def artifact_path(root: Path, key: str, extension: str) -> Path:
    """Return the path of the artifact for a key/extension pair."""
    return root / artifact_name(key, extension)


def temp_prefix(key: str, extension: str) -> str:
    """Prefix for the temporary file that precedes a published artifact."""
    return f"{TEMP_PREFIX}{artifact_name(key, extension)}."


def is_artifact(path: Path) -> bool:
    """True for published artifacts, False for temporary or hidden files."""
    return (
        path.is_file()
        and not path.name.startswith(TEMP_PREFIX)
        and not path.name.endswith(TEMP_SUFFIX)
        and bool(path.suffix)
    )


def split_artifact_name(name: str) -> tuple[str, str]:
    """Split ``<key>.<extension>`` into (key, extension)."""
    key, _, extension = name.rpartition(".")
    return key, extension
