"""
feedcrypt -- Codec adapter test suite
=====================================
"""

import pytest

from feedcrypt import (
    AuthenticationFailure,
    Codec,
    FeedCryptError,
    SerializationError,
    StreamTruncated,
    UnauthenticatedSuiteError,
    encryption_key,
    instance_codec,
    make_codec,
    secretbox_codec,
    secretstream_codec,
    stream_codec,
)
from feedcrypt.suites import SecretBoxSuite, StreamXorSuite

SUITE_NAMES = ["secretbox", "xor", "xor-instance", "secretstream"]


def codec_pair(name, key, value_encoding=None):
    """(writer, reader) codecs that share whatever context the suite needs."""
    writer = make_codec(name, key, value_encoding)
    if name in ("xor", "xor-instance"):
        reader = make_codec(name, key, value_encoding, nonce=writer.nonce)
    elif name == "secretstream":
        reader = make_codec(name, key, value_encoding, header=writer.header)
    else:
        reader = make_codec(name, key, value_encoding)
    return writer, reader


class UpperCodec:
    """Custom value encoding: str stored upper-cased."""

    def encode(self, value):
        return value.upper().encode("ascii")

    def decode(self, data):
        return bytes(data).decode("ascii")

# ── round trips through every suite ──────────────────────────────────────────
@pytest.mark.parametrize("name", SUITE_NAMES)
def test_structured_value_roundtrip(name, key):
    writer, reader = codec_pair(name, key, "json")
    assert reader.decode(writer.encode({"a": 1})) == {"a": 1}

@pytest.mark.parametrize("name", SUITE_NAMES)
def test_nested_json_roundtrip(name, key):
    value = {"boop": "beep", "n": [1, 2.5, None, True], "nested": {"x": "ü"}}
    writer, reader = codec_pair(name, key, "json")
    assert reader.decode(writer.encode(value)) == value

@pytest.mark.parametrize("name", SUITE_NAMES)
def test_utf8_roundtrip(name, key):
    writer, reader = codec_pair(name, key, "utf-8")
    assert reader.decode(writer.encode("Hello World")) == "Hello World"

@pytest.mark.parametrize("name", SUITE_NAMES)
def test_binary_roundtrip(name, key):
    writer, reader = codec_pair(name, key)
    data = bytes(range(256))
    ct   = writer.encode(data)
    assert ct != data
    assert reader.decode(ct) == data

@pytest.mark.parametrize("name", SUITE_NAMES)
def test_many_records_in_order(name, key):
    writer, reader = codec_pair(name, key, "utf8")
    records = [writer.encode(f"entry {i}") for i in range(20)]
    assert [reader.decode(r) for r in records] == [f"entry {i}" for i in range(20)]

@pytest.mark.parametrize("name", SUITE_NAMES)
def test_encoding_length(name, key):
    writer, _ = codec_pair(name, key, "json")
    value = {"boop": "beep"}
    assert writer.encoding_length(value) == len(writer.encode(value))

@pytest.mark.parametrize("name", SUITE_NAMES)
def test_encode_into_buffer_and_decode_slice(name, key):
    writer, reader = codec_pair(name, key, "utf-8")
    length = writer.encoding_length("boop")
    buf    = bytearray(b"\xaa" * (length + 10))
    out    = writer.encode("boop", buf, 4)
    assert out is buf
    assert buf[:4] == b"\xaa" * 4
    assert reader.decode(buf, 4, 4 + length) == "boop"

def test_buffer_too_small(key):
    codec = secretbox_codec(key)
    with pytest.raises(ValueError):
        codec.encode(b"boop", bytearray(10), 0)

def test_negative_offset_rejected(key):
    codec = secretbox_codec(key)
    buf   = bytearray(100)
    with pytest.raises(ValueError):
        codec.encode(b"boop", buf, -5)
    assert len(buf) == 100
    assert buf == bytearray(100)

def test_rejected_buffer_leaves_cursor_in_place(key):
    writer = instance_codec(key)
    reader = instance_codec(key, nonce=writer.nonce)
    with pytest.raises(ValueError):
        writer.encode(b"boop", bytearray(2), 0)
    assert writer.suite.tx_offset == 0
    assert reader.decode(writer.encode(b"boop")) == b"boop"

# ── concrete scenarios ───────────────────────────────────────────────────────
def test_hello_world_secretbox_zero_key():
    codec = secretbox_codec(bytes(32), value_encoding="utf-8")
    ct    = codec.encode("Hello World")
    assert isinstance(ct, bytes)
    assert len(ct) == 11 + SecretBoxSuite.MAC_SIZE + SecretBoxSuite.NONCE_SIZE
    assert codec.decode(ct) == "Hello World"

def test_encryption_key_works_for_every_suite():
    key = encryption_key()
    for name in SUITE_NAMES:
        writer, reader = codec_pair(name, key)
        assert reader.decode(writer.encode(b"boop")) == b"boop"

# ── factories and configuration ──────────────────────────────────────────────
def test_factories(key):
    box = secretbox_codec(key, "json")
    assert box.authenticated and box.nonce is None
    xor = stream_codec(key, "json")
    assert not xor.authenticated and len(xor.nonce) == 12
    cur = instance_codec(key, "json", nonce=xor.nonce)
    assert cur.nonce == xor.nonce
    sst = secretstream_codec(key, "json")
    assert sst.authenticated and len(sst.header) == 24

def test_stream_codec_requires_nonce_on_reader(key):
    from feedcrypt import MissingNonce
    with pytest.raises(MissingNonce):
        stream_codec(key, require_nonce=True)

def test_require_authentication(key):
    assert make_codec("secretbox", key, require_authentication=True).authenticated
    assert make_codec("secretstream", key, require_authentication=True).authenticated
    for name in ("xor", "xor-instance"):
        with pytest.raises(UnauthenticatedSuiteError):
            make_codec(name, key, require_authentication=True)

def test_unknown_suite(key):
    with pytest.raises(ValueError):
        make_codec("rot13", key)

def test_codec_requires_suite():
    with pytest.raises(TypeError):
        Codec(object())

def test_custom_value_encoding(key):
    codec = Codec(SecretBoxSuite(key), UpperCodec())
    assert codec.decode(codec.encode("boop")) == "BOOP"

def test_custom_value_encoding_failure_wrapped(key):
    codec = Codec(SecretBoxSuite(key), UpperCodec())
    with pytest.raises(SerializationError):
        codec.encode("bööp")

def test_custom_value_encoding_wrong_type_wrapped(key):
    codec = Codec(SecretBoxSuite(key), UpperCodec())
    with pytest.raises(SerializationError):
        codec.encode(5)

def test_utf8_lone_surrogate_wrapped(key):
    with pytest.raises(SerializationError):
        secretbox_codec(key, "utf-8").encode("\ud800")

def test_deeply_nested_json_wrapped(key):
    writer = stream_codec(key)
    reader = stream_codec(key, "json", nonce=writer.nonce)
    ct     = writer.encode(b"[" * 100000 + b"]" * 100000)
    with pytest.raises(SerializationError):
        reader.decode(ct)

def test_self_referencing_json_wrapped(key):
    value = []
    value.append(value)
    with pytest.raises(SerializationError):
        secretbox_codec(key, "json").encode(value)

# ── plaintext hygiene ────────────────────────────────────────────────────────
class KeepingSuite(StreamXorSuite):
    """Holds on to the plaintext buffer the codec hands over."""

    def encode(self, data):
        self.seen = data
        return super().encode(data)

def test_codec_wipes_serialized_plaintext(key):
    suite = KeepingSuite(key)
    Codec(suite).encode(b"boop")
    assert isinstance(suite.seen, bytearray)
    assert suite.seen == bytearray(4)

# ── errors ───────────────────────────────────────────────────────────────────
def test_non_bytes_without_encoding(key):
    with pytest.raises(SerializationError):
        secretbox_codec(key).encode("not bytes")

def test_unserializable_json(key):
    with pytest.raises(SerializationError):
        secretbox_codec(key, "json").encode({"s": {1, 2}})

def test_unknown_value_encoding(key):
    with pytest.raises(SerializationError):
        secretbox_codec(key, "yaml")

def test_decoded_bytes_not_utf8(key):
    writer = stream_codec(key)
    reader = stream_codec(key, "utf-8", nonce=writer.nonce)
    with pytest.raises(SerializationError):
        reader.decode(writer.encode(b"\xff\xfe"))

def test_authentication_failure_propagates(key):
    codec = secretbox_codec(key, "json")
    ct    = bytearray(codec.encode({"a": 1}))
    ct[-1] ^= 0x01
    with pytest.raises(AuthenticationFailure):
        codec.decode(bytes(ct))

def test_xor_codec_wrong_nonce_decodes_garbage(key):
    writer = Codec(StreamXorSuite(key))
    reader = Codec(StreamXorSuite(key))
    assert reader.decode(writer.encode(b"boop beep")) != b"boop beep"

# ── stream end through the codec ─────────────────────────────────────────────
def test_secretstream_codec_final(key):
    writer = secretstream_codec(key, "json")
    reader = secretstream_codec(key, "json", header=writer.header)
    first  = writer.encode({"seq": 0})
    last   = writer.encode_final({"seq": 1})
    assert reader.decode(first) == {"seq": 0}
    assert reader.decode(last) == {"seq": 1}
    assert reader.suite.finished
    reader.suite.finish()

def test_secretstream_codec_truncated(key):
    writer = secretstream_codec(key, "json")
    reader = secretstream_codec(key, "json", header=writer.header)
    reader.decode(writer.encode({"seq": 0}))
    writer.encode_final({"seq": 1})
    with pytest.raises(StreamTruncated):
        reader.suite.finish()

def test_encode_final_needs_stream_suite(key):
    with pytest.raises(FeedCryptError):
        secretbox_codec(key).encode_final(b"boop")
