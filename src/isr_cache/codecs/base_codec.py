# src/isr_cache/codecs/base_codec.py — v1
"""Abstract profile codec interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import ValidationError

from isr_cache.cache.errors import CorruptArtifactError
from isr_cache.profile.models import Profile


class BaseCodec(ABC):
    """Serialize profiles to bytes and back.

    Subclasses declare a stable ``format`` tag and the file ``extension`` that
    names their artifacts, so artifacts of different codecs never collide.
    """

    format: ClassVar[str]
    extension: ClassVar[str]

    @abstractmethod
    def encode(self, profile: Profile) -> bytes:
        """Serialize a profile.

        Raises:
            ArtifactEncodeError: If the profile cannot be represented.
        """

    @abstractmethod
    def decode(self, data: bytes | memoryview) -> Profile:
        """Deserialize a profile from bytes or a mapped view.

        Raises:
            CorruptArtifactError: If the data is malformed, truncated, or does
                not describe a profile.
        """

    def _validate(self, payload: Any) -> Profile:
        """Turn a decoded builtin payload into a Profile."""
        try:
            return Profile.model_validate(payload)
        except ValidationError as e:
            raise CorruptArtifactError(self.format, f"schema mismatch: {e}") from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
