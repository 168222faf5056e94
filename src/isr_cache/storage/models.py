# src/isr_cache/storage/models.py — v1
"""Storage models."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel


class ArtifactInfo(BaseModel):
    """A published artifact as seen on disk."""

    key: str
    extension: str
    path: Path
    size_bytes: int
    modified_at: datetime
