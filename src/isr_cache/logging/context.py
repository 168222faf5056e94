# src/isr_cache/logging/context.py — v1
"""Contextual logging support: attach cache_key and source to log records."""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set while an entry resolves.
_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)
_source: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    cache_key: str | None = None
    source: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(cache_key=_cache_key.get(), source=_source.get())


@contextmanager
def entry_context(cache_key: str, source: str) -> Iterator[None]:
    """Scope log records to one cache entry; restores the previous context on exit."""
    key_token = _cache_key.set(cache_key)
    source_token = _source.set(source)
    try:
        yield
    finally:
        _source.reset(source_token)
        _cache_key.reset(key_token)


def clear_context() -> None:
    """Reset all context variables."""
    _cache_key.set(None)
    _source.set(None)
