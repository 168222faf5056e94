# src/isr_cache/codecs/pickle_codec.py — v2
"""Pickle profile codec.

Fastest encode/decode and no integer width limit, Python-only. Payloads hold
builtin containers and scalars only, and the unpickler rejects every global,
so a foreign or tampered pickle fails to decode instead of executing code.
"""

from __future__ import annotations

import pickle

from isr_cache.cache.errors import ArtifactEncodeError, CorruptArtifactError
from isr_cache.codecs.base_codec import BaseCodec
from isr_cache.profile.models import Profile

_READLINE_CHUNK = 4096


class _ViewReader:
    """Read-only file interface over a buffer, consumed in place by the unpickler."""

    def __init__(self, data: bytes | memoryview) -> None:
        self._view = data if isinstance(data, memoryview) else memoryview(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    def read(self, size: int = -1) -> bytes:
        end = len(self._view) if size < 0 else min(len(self._view), self._pos + size)
        chunk = self._view[self._pos:end].tobytes()
        self._pos = end
        return chunk

    def readinto(self, buffer) -> int:  # noqa: ANN001
        n = min(len(buffer), self.remaining)
        buffer[:n] = self._view[self._pos:self._pos + n]
        self._pos += n
        return n

    def readline(self, size: int = -1) -> bytes:
        limit = len(self._view) if size < 0 else min(len(self._view), self._pos + size)
        end = self._pos
        while end < limit:
            chunk = self._view[end:min(end + _READLINE_CHUNK, limit)].tobytes()
            newline = chunk.find(b"\n")
            if newline >= 0:
                end += newline + 1
                break
            end += len(chunk)
        return self.read(end - self._pos)


class _DataOnlyUnpickler(pickle.Unpickler):
    def find_class(self, module: str, name: str):  # noqa: ANN201
        raise pickle.UnpicklingError(f"global {module}.{name} is not allowed")


class PickleCodec(BaseCodec):
    """Pickle over ``Profile.model_dump()`` with a data-only unpickler."""

    format = "pickle"
    extension = "pkl"

    def encode(self, profile: Profile) -> bytes:
        try:
            return pickle.dumps(profile.model_dump(), protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError) as e:
            raise ArtifactEncodeError(self.format, str(e)) from e

    def decode(self, data: bytes | memoryview) -> Profile:
        reader = _ViewReader(data)
        try:
            payload = _DataOnlyUnpickler(reader).load()
        except Exception as e:
            # Truncated or garbage input surfaces as EOFError, UnpicklingError,
            # ValueError, IndexError and friends.
            raise CorruptArtifactError(self.format, f"{type(e).__name__}: {e}") from e
        if reader.remaining:
            raise CorruptArtifactError(
                self.format, f"{reader.remaining} trailing bytes after pickle stream"
            )
        return self._validate(payload)
