"""
feedcrypt -- Encrypted value codecs for append-only logs
========================================================
Symmetric-key codecs that sit between application values and a log's raw
record storage. The storage engine calls encode()/decode() per record and
never sees a key.

Suites:
    secretbox     XChaCha20-Poly1305, random nonce per record   AUTHENTICATED
    secretstream  XChaCha20-Poly1305 chained stream, rekeyable  AUTHENTICATED
    xor           ChaCha20 XOR, one nonce per session           confidentiality only
    xor-instance  ChaCha20 XOR, ordered tx/rx cursors           confidentiality only

Value encodings: binary (default), utf-8, json, or any encode/decode object.

License: Apache 2.0
"""

__version__ = "1.0.0"

from .errors import (
    FeedCryptError,
    InvalidKeyLength,
    InvalidNonceLength,
    InvalidHeaderLength,
    MissingNonce,
    AuthenticationFailure,
    StreamTruncated,
    StreamClosed,
    OutOfOrderChunk,
    SerializationError,
    UnauthenticatedSuiteError,
)
from .keys    import KeyGenerator, generate_key, generate_nonce, wipe
from .suites  import (
    CipherSuite,
    AuthenticatedSuite,
    UnauthenticatedSuite,
    SecretBoxSuite,
    StreamXorSuite,
    StreamCursor,
    Chunk,
    SecretStreamSuite,
    StreamState,
    Tag,
)
from .codec   import (
    Codec,
    SUITES,
    make_codec,
    secretbox_codec,
    stream_codec,
    instance_codec,
    secretstream_codec,
    encryption_key,
)

KEY_SIZE = SecretBoxSuite.KEY_SIZE

__all__ = [
    "FeedCryptError",
    "InvalidKeyLength",
    "InvalidNonceLength",
    "InvalidHeaderLength",
    "MissingNonce",
    "AuthenticationFailure",
    "StreamTruncated",
    "StreamClosed",
    "OutOfOrderChunk",
    "SerializationError",
    "UnauthenticatedSuiteError",
    "KeyGenerator",
    "generate_key",
    "generate_nonce",
    "wipe",
    "CipherSuite",
    "AuthenticatedSuite",
    "UnauthenticatedSuite",
    "SecretBoxSuite",
    "StreamXorSuite",
    "StreamCursor",
    "Chunk",
    "SecretStreamSuite",
    "StreamState",
    "Tag",
    "Codec",
    "SUITES",
    "make_codec",
    "secretbox_codec",
    "stream_codec",
    "instance_codec",
    "secretstream_codec",
    "encryption_key",
    "KEY_SIZE",
]
