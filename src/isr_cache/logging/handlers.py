# src/isr_cache/logging/handlers.py — v1
"""Rotating file handler for cache logs.

Profile fills can run for minutes (multi-GB debug packages), so long-lived
hosts log to a size-rotated file next to, not inside, the cache directory.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_SIZE_RE = re.compile(r"^(?P<value>\d+)\s*(?P<unit>B|KB|MB|GB)?$", re.IGNORECASE)
_UNITS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}


def parse_size(size: str) -> int:
    """Convert ``"10MB"``, ``"512 KB"`` or ``"4096"`` to a byte count."""
    match = _SIZE_RE.match(size.strip())
    if match is None:
        raise ValueError(f"Invalid size {size!r}; expected e.g. '10MB'")
    unit = (match.group("unit") or "B").upper()
    return int(match.group("value")) * _UNITS[unit]


def create_rotating_handler(
    log_file: Path | str,
    rotation: str = "10MB",
    retention: int = 5,
    level: int = logging.NOTSET,
) -> RotatingFileHandler:
    """Create a size-rotated file handler, creating the log directory.

    Args:
        log_file: Destination log file.
        rotation: Size that triggers a rollover.
        retention: Number of rolled-over files to keep.
        level: Handler level; NOTSET defers to the logger.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler
