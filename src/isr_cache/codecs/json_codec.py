# src/isr_cache/codecs/json_codec.py — v2
"""JSON profile codec (default).

Human-readable, pretty-printed artifacts for inspection and debugging.
Larger and slower than the binary codecs.
"""

from __future__ import annotations

from pydantic import ValidationError

from isr_cache.cache.errors import ArtifactEncodeError, CorruptArtifactError
from isr_cache.codecs.base_codec import BaseCodec
from isr_cache.profile.models import Profile


class JsonCodec(BaseCodec):
    """Pretty-printed JSON via pydantic's serializer."""

    format = "json"
    extension = "json"

    def __init__(self, indent: int | None = 2) -> None:
        self._indent = indent

    def encode(self, profile: Profile) -> bytes:
        try:
            return profile.model_dump_json(indent=self._indent).encode("utf-8")
        except ValueError as e:
            raise ArtifactEncodeError(self.format, str(e)) from e

    def decode(self, data: bytes | memoryview) -> Profile:
        # pydantic-core parses str or bytes only, so a mapped view is copied once.
        try:
            return Profile.model_validate_json(bytes(data))
        except ValidationError as e:
            raise CorruptArtifactError(self.format, f"invalid JSON profile: {e}") from e
