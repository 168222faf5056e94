# tests/unit/codecs/test_unit_codecs.py — v1
"""Tests for codecs/ — JSON, MessagePack and pickle profile codecs."""

from __future__ import annotations

import json
import pickle

import msgpack
import pytest

from isr_cache.cache.errors import ArtifactEncodeError, CorruptArtifactError
from isr_cache.codecs.codec_factory import CODEC_FORMATS, codec_for_extension, create_codec
from isr_cache.codecs.json_codec import JsonCodec
from isr_cache.codecs.msgpack_codec import MsgpackCodec
from isr_cache.codecs.pickle_codec import PickleCodec
from isr_cache.storage.local_storage import LocalArtifactStorage

ALL_CODECS = [JsonCodec, MsgpackCodec, PickleCodec]


@pytest.mark.parametrize("codec_cls", ALL_CODECS)
class TestCodecContract:
    def test_round_trip(self, codec_cls, sample_profile):
        codec = codec_cls()
        decoded = codec.decode(codec.encode(sample_profile))
        assert decoded == sample_profile

    def test_decode_from_memoryview(self, codec_cls, sample_profile):
        codec = codec_cls()
        data = codec.encode(sample_profile)
        assert codec.decode(memoryview(data)) == sample_profile

    def test_truncated(self, codec_cls, sample_profile):
        codec = codec_cls()
        data = codec.encode(sample_profile)
        with pytest.raises(CorruptArtifactError) as exc_info:
            codec.decode(data[: len(data) // 2])
        assert exc_info.value.codec == codec.format

    def test_empty(self, codec_cls):
        with pytest.raises(CorruptArtifactError):
            codec_cls().decode(b"")

    def test_extension_is_distinct(self, codec_cls):
        others = [c.extension for c in ALL_CODECS if c is not codec_cls]
        assert codec_cls.extension not in others


class TestJsonCodec:
    def test_human_readable(self, sample_profile):
        text = JsonCodec().encode(sample_profile).decode("utf-8")
        assert '\n  "architecture": "Amd64"' in text
        assert json.loads(text)["symbols"]["PsInitialSystemProcess"] == 0xCFC420

    def test_compact(self, sample_profile):
        assert b"\n" not in JsonCodec(indent=None).encode(sample_profile)

    def test_schema_mismatch(self):
        with pytest.raises(CorruptArtifactError, match="invalid JSON profile"):
            JsonCodec().decode(b'{"symbols": {}}')

    def test_tagged_type_references(self, sample_profile):
        data = json.loads(JsonCodec().encode(sample_profile))
        flags = data["types"]["structs"]["_EPROCESS"]["fields"]["Flags"]["type"]
        assert flags["kind"] == "bitfield"
        assert flags["subtype"] == {"kind": "base", "subkind": "u32"}


class TestMsgpackCodec:
    def test_smaller_than_json(self, sample_profile):
        assert len(MsgpackCodec().encode(sample_profile)) < len(JsonCodec().encode(sample_profile))

    def test_integer_overflow(self, sample_profile):
        sample_profile.symbols["Huge"] = 2**70
        with pytest.raises(ArtifactEncodeError) as exc_info:
            MsgpackCodec().encode(sample_profile)
        assert exc_info.value.codec == "msgpack"

    def test_wrong_payload_shape(self):
        with pytest.raises(CorruptArtifactError, match="schema mismatch"):
            MsgpackCodec().decode(msgpack.packb([1, 2, 3]))

    def test_trailing_bytes(self, sample_profile):
        data = MsgpackCodec().encode(sample_profile) + b"\x00"
        with pytest.raises(CorruptArtifactError):
            MsgpackCodec().decode(data)


class TestPickleCodec:
    def test_large_integers(self, sample_profile):
        sample_profile.symbols["Huge"] = 2**70
        codec = PickleCodec()
        assert codec.decode(codec.encode(sample_profile)).symbols["Huge"] == 2**70

    def test_rejects_globals(self):
        payload = pickle.dumps(ValueError("x"))
        with pytest.raises(CorruptArtifactError, match="not allowed"):
            PickleCodec().decode(payload)

    def test_rejects_code_execution(self, tmp_path):
        marker = tmp_path / "pwned"

        class Exploit:
            def __reduce__(self):
                return (open, (str(marker), "w"))

        with pytest.raises(CorruptArtifactError):
            PickleCodec().decode(pickle.dumps(Exploit()))
        assert not marker.exists()

    def test_garbage(self):
        with pytest.raises(CorruptArtifactError):
            PickleCodec().decode(b"\x80\x05not a pickle")

    def test_trailing_bytes(self, sample_profile):
        data = PickleCodec().encode(sample_profile) + b"\x00"
        with pytest.raises(CorruptArtifactError, match="trailing bytes"):
            PickleCodec().decode(data)

    def test_text_protocol(self, sample_profile):
        data = pickle.dumps(sample_profile.model_dump(), protocol=0)
        assert PickleCodec().decode(memoryview(data)) == sample_profile

    def test_decodes_mapped_artifact(self, tmp_path, sample_profile):
        storage = LocalArtifactStorage(tmp_path)
        codec = PickleCodec()
        storage.publish("k", codec.extension, codec.encode(sample_profile))
        with storage.open("k", codec.extension) as view:
            profile = codec.decode(view)
        assert profile == sample_profile


class TestCodecFactory:
    @pytest.mark.parametrize(
        ("codec_format", "expected"),
        [("json", JsonCodec), ("msgpack", MsgpackCodec), ("pickle", PickleCodec)],
    )
    def test_create(self, codec_format, expected):
        assert isinstance(create_codec(codec_format), expected)

    def test_default_is_json(self):
        assert isinstance(create_codec(), JsonCodec)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unsupported codec"):
            create_codec("bincode")

    def test_formats(self):
        assert set(CODEC_FORMATS) == {"json", "msgpack", "pickle"}

    @pytest.mark.parametrize(
        ("extension", "expected"),
        [("json", JsonCodec), (".msgpack", MsgpackCodec), ("PKL", PickleCodec)],
    )
    def test_for_extension(self, extension, expected):
        assert isinstance(codec_for_extension(extension), expected)

    def test_unknown_extension(self):
        with pytest.raises(ValueError, match="No codec"):
            codec_for_extension("txt")
