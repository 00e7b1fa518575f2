"""
Codec Adapter
=============
The value-encoding plugin a storage engine calls once per record:

    encode(value, buffer=None, offset=0) -> bytes
    decode(buffer, start=0, end=None)    -> value

value -> serializer -> suite.encode -> ciphertext, and back. The storage
engine never sees keys, nonces or stream state.

    codec = secretbox_codec(key, value_encoding="json")
    record = codec.encode({"a": 1})
    codec.decode(record)        # {'a': 1}

Deterministic suites need the same nonce on both ends:

    writer = stream_codec(key)
    reader = stream_codec(key, nonce=writer.nonce)
"""

import logging

from .errors import FeedCryptError, UnauthenticatedSuiteError
from .keys import generate_key, wipe
from .serializers import resolve
from .suites import (
    CipherSuite,
    SecretBoxSuite,
    SecretStreamSuite,
    StreamCursor,
    StreamXorSuite,
)

logger = logging.getLogger(__name__)

SUITES = {
    SecretBoxSuite.NAME:    SecretBoxSuite,
    StreamXorSuite.NAME:    StreamXorSuite,
    StreamCursor.NAME:      StreamCursor,
    SecretStreamSuite.NAME: SecretStreamSuite,
}


class Codec:
    """A cipher suite plus a value serializer behind encode/decode."""

    def __init__(self, suite: CipherSuite, value_encoding=None):
        if not isinstance(suite, CipherSuite):
            raise TypeError("suite must be a CipherSuite.")
        self._suite      = suite
        self._serializer = resolve(value_encoding)
        logger.debug(f"Codec: {suite!r} with {self._serializer.name} values")

    @property
    def suite(self) -> CipherSuite:
        return self._suite

    @property
    def authenticated(self) -> bool:
        return self._suite.AUTHENTICATED

    @property
    def nonce(self):
        return getattr(self._suite, "nonce", None)

    @property
    def header(self):
        return getattr(self._suite, "header", None)

    def _serialize(self, value) -> bytearray:
        return bytearray(self._serializer.encode(value))

    def _check_room(self, buffer, offset: int, length: int):
        if buffer is None:
            return
        if offset < 0 or offset + length > len(buffer):
            raise ValueError(
                f"Buffer of {len(buffer)}B cannot hold {length}B at offset {offset}."
            )

    def _emit(self, ct: bytes, buffer, offset: int):
        if buffer is None:
            return ct
        buffer[offset:offset + len(ct)] = ct
        return buffer

    def encode(self, value, buffer: bytearray = None, offset: int = 0):
        """
        Serialize and encrypt one value. With a buffer, the ciphertext is
        written into it at offset and the buffer is returned.
        """
        plain = self._serialize(value)
        self._check_room(buffer, offset, len(plain) + self._suite.OVERHEAD)
        try:
            ct = self._suite.encode(plain)
        finally:
            wipe(plain)
        return self._emit(ct, buffer, offset)

    def encode_final(self, value, buffer: bytearray = None, offset: int = 0):
        """Encode the last record of a stream. Streaming suites only."""
        if not isinstance(self._suite, SecretStreamSuite):
            raise FeedCryptError(f"{self._suite.NAME} has no end-of-stream marker.")
        plain = self._serialize(value)
        self._check_room(buffer, offset, len(plain) + self._suite.OVERHEAD)
        try:
            ct = self._suite.final(plain)
        finally:
            wipe(plain)
        return self._emit(ct, buffer, offset)

    def encoding_length(self, value) -> int:
        return len(self._serializer.encode(value)) + self._suite.OVERHEAD

    def decode(self, buffer, start: int = 0, end: int = None):
        """Decrypt buffer[start:end] and deserialize it."""
        return self._serializer.decode(self._suite.decode(bytes(buffer[start:end])))

    def __repr__(self):
        return f"Codec({self._suite!r}, {self._serializer.name})"


# ─────────────────────────────────────────────────────────────────────────────
# Factories
# ─────────────────────────────────────────────────────────────────────────────

def make_codec(suite: str, key: bytes, value_encoding=None,
               require_authentication: bool = False, **options) -> Codec:
    """
    Build a codec by suite name: "secretbox", "xor", "xor-instance" or
    "secretstream". options go to the suite (nonce, associated_data, ...).
    """
    try:
        suite_cls = SUITES[suite]
    except KeyError:
        raise ValueError(
            f"Unknown suite {suite!r}. Choose from: {', '.join(SUITES)}."
        ) from None
    if require_authentication and not suite_cls.AUTHENTICATED:
        raise UnauthenticatedSuiteError(
            f"{suite} provides confidentiality only and cannot detect tampering."
        )
    return Codec(suite_cls(key, **options), value_encoding)


def secretbox_codec(key: bytes, value_encoding=None, associated_data: bytes = None,
                    generator=None) -> Codec:
    return Codec(SecretBoxSuite(key, associated_data, generator), value_encoding)


def stream_codec(key: bytes, value_encoding=None, nonce: bytes = None,
                 require_nonce: bool = False, generator=None) -> Codec:
    return Codec(StreamXorSuite(key, nonce, require_nonce, generator), value_encoding)


def instance_codec(key: bytes, value_encoding=None, nonce: bytes = None,
                   require_nonce: bool = False, generator=None) -> Codec:
    return Codec(StreamCursor(key, nonce, require_nonce, generator), value_encoding)


def secretstream_codec(key: bytes, value_encoding=None, header: bytes = None,
                       associated_data: bytes = None, rekey_every: int = 0) -> Codec:
    return Codec(SecretStreamSuite(key, header, associated_data, rekey_every), value_encoding)


def encryption_key() -> bytearray:
    """Fresh 32-byte key, valid for every suite."""
    return generate_key()
