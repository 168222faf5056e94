# src/isr_cache/codecs/codec_factory.py — v1
"""Factory for codec instantiation."""

from __future__ import annotations

from isr_cache.codecs.base_codec import BaseCodec
from isr_cache.codecs.json_codec import JsonCodec
from isr_cache.codecs.msgpack_codec import MsgpackCodec
from isr_cache.codecs.pickle_codec import PickleCodec

_CODECS: dict[str, type[BaseCodec]] = {
    JsonCodec.format: JsonCodec,
    MsgpackCodec.format: MsgpackCodec,
    PickleCodec.format: PickleCodec,
}

CODEC_FORMATS: tuple[str, ...] = tuple(_CODECS)


def create_codec(codec_format: str = "json") -> BaseCodec:
    """Instantiate the codec for a format tag.

    Args:
        codec_format: One of "json", "msgpack", "pickle".

    Returns:
        Configured BaseCodec implementation.

    Raises:
        ValueError: If the format is unknown.
    """
    try:
        return _CODECS[codec_format]()
    except KeyError:
        raise ValueError(f"Unsupported codec: {codec_format!r}") from None


def codec_for_extension(extension: str) -> BaseCodec:
    """Return the codec that writes artifacts with the given file extension."""
    ext = extension.lstrip(".").lower()
    for codec_cls in _CODECS.values():
        if codec_cls.extension == ext:
            return codec_cls()
    raise ValueError(f"No codec writes .{ext} artifacts")
