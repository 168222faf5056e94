# src/isr_cache/codecs/msgpack_codec.py — v1
"""MessagePack profile codec.

Compact binary readable from other languages. Integers are limited to the
64-bit range of the format.
"""

from __future__ import annotations

import msgpack

from isr_cache.cache.errors import ArtifactEncodeError, CorruptArtifactError
from isr_cache.codecs.base_codec import BaseCodec
from isr_cache.profile.models import Profile


class MsgpackCodec(BaseCodec):
    """MessagePack over ``Profile.model_dump()``."""

    format = "msgpack"
    extension = "msgpack"

    def encode(self, profile: Profile) -> bytes:
        try:
            return msgpack.packb(profile.model_dump(), use_bin_type=True)
        except (OverflowError, TypeError, ValueError) as e:
            raise ArtifactEncodeError(self.format, str(e)) from e

    def decode(self, data: bytes | memoryview) -> Profile:
        try:
            payload = msgpack.unpackb(data, raw=False)
        except Exception as e:
            # ExtraData, FormatError, StackError and ValueError on truncation.
            raise CorruptArtifactError(self.format, f"{type(e).__name__}: {e}") from e
        return self._validate(payload)
