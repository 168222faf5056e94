from isr_cache.codecs.base_codec import BaseCodec
from isr_cache.codecs.codec_factory import CODEC_FORMATS, codec_for_extension, create_codec
from isr_cache.codecs.json_codec import JsonCodec
from isr_cache.codecs.msgpack_codec import MsgpackCodec
from isr_cache.codecs.pickle_codec import PickleCodec

__all__ = [
    "BaseCodec",
    "CODEC_FORMATS",
    "JsonCodec",
    "MsgpackCodec",
    "PickleCodec",
    "codec_for_extension",
    "create_codec",
]
