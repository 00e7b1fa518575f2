"""
Streaming-AEAD: XChaCha20-Poly1305 secretstream
===============================================
Chained, rekeyable, authenticated stream of chunks.

A stream starts with init_push(), which derives a per-stream sub-key from
the secret key and a fresh random header. The header is public and is sent
ahead of the first chunk; init_pull(header, key) derives the same state on
the receiving side.

Every chunk's authentication trailer depends on the state left behind by
all earlier chunks. Plain per-record AEAD cannot tell that a record was
dropped, duplicated, moved or copied from another stream; here any of
those makes pull() fail. The last chunk is tagged FINAL so the pull side
can tell a finished stream from a truncated one.

Tags (one per chunk, encrypted inside the trailer):
    MESSAGE  -- ordinary chunk
    PUSH     -- end of a logical message, stream continues
    REKEY    -- both sides rekey after this chunk
    FINAL    -- end of stream

Key:      256-bit (32 bytes)
Header:   192-bit (24 bytes) -- one per stream, public
Trailer:  17 bytes per chunk (1 encrypted tag byte + 16-byte MAC)

Wire format: header(24), then chunk = ciphertext(len) || trailer(17), ...

Dependencies: PyNaCl (libsodium crypto_secretstream_xchacha20poly1305_*)
"""

import enum
import logging
from typing import Iterable, Iterator, Optional, Tuple

from nacl.bindings import (
    crypto_secretstream_xchacha20poly1305_ABYTES,
    crypto_secretstream_xchacha20poly1305_HEADERBYTES,
    crypto_secretstream_xchacha20poly1305_KEYBYTES,
    crypto_secretstream_xchacha20poly1305_TAG_FINAL,
    crypto_secretstream_xchacha20poly1305_TAG_MESSAGE,
    crypto_secretstream_xchacha20poly1305_TAG_PUSH,
    crypto_secretstream_xchacha20poly1305_TAG_REKEY,
    crypto_secretstream_xchacha20poly1305_init_pull,
    crypto_secretstream_xchacha20poly1305_init_push,
    crypto_secretstream_xchacha20poly1305_pull,
    crypto_secretstream_xchacha20poly1305_push,
    crypto_secretstream_xchacha20poly1305_rekey,
    crypto_secretstream_xchacha20poly1305_state,
)
from nacl.exceptions import CryptoError

from ..errors import (
    AuthenticationFailure,
    InvalidHeaderLength,
    InvalidKeyLength,
    StreamClosed,
    StreamTruncated,
)
from .base import AuthenticatedSuite

logger = logging.getLogger(__name__)

KEY_SIZE     = crypto_secretstream_xchacha20poly1305_KEYBYTES      # 32
HEADER_SIZE  = crypto_secretstream_xchacha20poly1305_HEADERBYTES   # 24
TRAILER_SIZE = crypto_secretstream_xchacha20poly1305_ABYTES        # 17

PUSH = "push"
PULL = "pull"


class Tag(enum.IntEnum):
    MESSAGE = crypto_secretstream_xchacha20poly1305_TAG_MESSAGE
    PUSH    = crypto_secretstream_xchacha20poly1305_TAG_PUSH
    REKEY   = crypto_secretstream_xchacha20poly1305_TAG_REKEY
    FINAL   = crypto_secretstream_xchacha20poly1305_TAG_FINAL


class StreamState:
    """
    One direction of one stream. Holds the derived sub-key, nonce and
    counter inside the libsodium state, plus the chunk count and whether
    FINAL has been seen. Never reuse a state across streams.
    """

    def __init__(self, direction: str):
        self._state    = crypto_secretstream_xchacha20poly1305_state()
        self.direction = direction
        self.chunks    = 0
        self.finished  = False

    def _check(self, direction: str):
        if self.direction != direction:
            raise ValueError(f"Cannot {direction} on a {self.direction} stream state.")
        if self.finished:
            raise StreamClosed(f"Stream already ended with FINAL after {self.chunks} chunks.")

    def __repr__(self):
        return (f"StreamState({self.direction}, chunks={self.chunks}, "
                f"finished={self.finished})")


def _check_key(key: bytes) -> bytes:
    if len(key) != KEY_SIZE:
        raise InvalidKeyLength("secretstream", KEY_SIZE, len(key))
    return bytes(key)


def init_push(key: bytes) -> Tuple[StreamState, bytes]:
    """
    Start a new stream. Returns (state, header); the header is generated
    fresh by libsodium and must reach the pull side before the first chunk.

    The header comes from libsodium's own randomness, not from a
    KeyGenerator, so a seeded generator does not make headers reproducible.
    """
    state  = StreamState(PUSH)
    header = crypto_secretstream_xchacha20poly1305_init_push(state._state, _check_key(key))
    logger.info("secretstream: push stream started")
    return state, header


def init_pull(header: bytes, key: bytes) -> StreamState:
    if len(header) != HEADER_SIZE:
        raise InvalidHeaderLength(
            f"secretstream header must be {HEADER_SIZE} bytes, got {len(header)}."
        )
    state = StreamState(PULL)
    crypto_secretstream_xchacha20poly1305_init_pull(state._state, bytes(header), _check_key(key))
    logger.info("secretstream: pull stream started")
    return state


def push(state: StreamState, plaintext: bytes,
         associated_data: Optional[bytes] = None, tag: Tag = Tag.MESSAGE) -> bytes:
    """Encrypt one chunk. Returns ciphertext || trailer."""
    state._check(PUSH)
    tag = Tag(tag)
    ct  = crypto_secretstream_xchacha20poly1305_push(
        state._state, bytes(plaintext),
        bytes(associated_data) if associated_data else None, int(tag),
    )
    state.chunks += 1
    if tag is Tag.FINAL:
        state.finished = True
        logger.info(f"secretstream: push stream finished after {state.chunks} chunks")
    logger.debug(f"secretstream push #{state.chunks}: {len(plaintext)}B tag={tag.name}")
    return ct


def pull(state: StreamState, ciphertext: bytes,
         associated_data: Optional[bytes] = None) -> Tuple[bytes, Tag]:
    """
    Verify and decrypt the next chunk against the chained state.
    Returns (plaintext, tag). Raises AuthenticationFailure, releasing
    nothing, if the chunk was altered, reordered, spliced in from another
    stream or decrypted with the wrong key.
    """
    state._check(PULL)
    if len(ciphertext) < TRAILER_SIZE:
        logger.warning(f"secretstream pull: chunk of {len(ciphertext)}B is too short")
        raise AuthenticationFailure(
            f"Chunk too short -- need at least {TRAILER_SIZE} bytes."
        )
    try:
        pt, raw_tag = crypto_secretstream_xchacha20poly1305_pull(
            state._state, bytes(ciphertext),
            bytes(associated_data) if associated_data else None,
        )
    except CryptoError as exc:
        logger.warning(f"secretstream pull: chunk {state.chunks + 1} failed authentication")
        raise AuthenticationFailure(
            "Stream chunk failed authentication -- tampered, reordered, "
            "from another stream, or wrong key."
        ) from exc
    tag = Tag(raw_tag)
    state.chunks += 1
    if tag is Tag.FINAL:
        state.finished = True
        logger.info(f"secretstream: pull stream finished after {state.chunks} chunks")
    return pt, tag


def rekey(state: StreamState) -> None:
    """
    Derive a new sub-key from the current state. Deterministic: both sides
    must call it at the same chunk position or the next pull fails.
    """
    state._check(state.direction)
    crypto_secretstream_xchacha20poly1305_rekey(state._state)
    logger.debug(f"secretstream: {state.direction} side rekeyed after {state.chunks} chunks")


# ─────────────────────────────────────────────────────────────────────────────
# Codec-facing suite
# ─────────────────────────────────────────────────────────────────────────────

class SecretStreamSuite(AuthenticatedSuite):
    """
    One direction of a secretstream behind the encode/decode contract.

    Without a header the suite is a push side and exposes .header for the
    peer. With a header it is a pull side. Records must be decoded in the
    order they were encoded.
    """

    NAME        = "secretstream"
    KEY_SIZE    = KEY_SIZE
    HEADER_SIZE = HEADER_SIZE
    OVERHEAD    = TRAILER_SIZE

    def __init__(self, key: bytes, header: bytes = None,
                 associated_data: bytes = None, rekey_every: int = 0):
        super().__init__(key)
        if rekey_every < 0:
            raise ValueError("rekey_every must be >= 0.")
        self._aad         = bytes(associated_data) if associated_data else None
        self._rekey_every = rekey_every
        if header is None:
            self._state, self._header = init_push(self._key)
        else:
            self._state  = init_pull(header, self._key)
            self._header = bytes(header)
        self.last_tag = None

    @property
    def header(self) -> bytes:
        return self._header

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state.finished

    def _next_tag(self) -> Tag:
        if self._rekey_every and (self._state.chunks + 1) % self._rekey_every == 0:
            return Tag.REKEY
        return Tag.MESSAGE

    def encode(self, data: bytes, tag: Tag = None) -> bytes:
        return push(self._state, data, self._aad, tag if tag is not None else self._next_tag())

    def final(self, data: bytes = b"") -> bytes:
        """Encode the last chunk of the stream."""
        return self.encode(data, Tag.FINAL)

    def decode(self, data: bytes) -> bytes:
        pt, self.last_tag = pull(self._state, data, self._aad)
        return pt

    def rekey(self) -> None:
        rekey(self._state)

    def finish(self) -> None:
        """Pull side: confirm the stream ended with FINAL."""
        if self._state.direction == PULL and not self._state.finished:
            logger.warning(
                f"secretstream: input ended after {self._state.chunks} chunks without FINAL"
            )
            raise StreamTruncated(
                f"Stream ended after {self._state.chunks} chunks without a FINAL chunk."
            )


# ─────────────────────────────────────────────────────────────────────────────
# Whole-stream helpers
# ─────────────────────────────────────────────────────────────────────────────

def encrypt_stream(key: bytes, chunks: Iterable[bytes],
                   associated_data: bytes = None, rekey_every: int = 0) -> Iterator[bytes]:
    """
    Yields the header, then one record per chunk. The last chunk is tagged
    FINAL; an empty input still produces a FINAL record.
    """
    suite = SecretStreamSuite(key, associated_data=associated_data, rekey_every=rekey_every)
    yield suite.header
    pending = None
    for chunk in chunks:
        if pending is not None:
            yield suite.encode(pending)
        pending = chunk
    yield suite.final(pending if pending is not None else b"")


def decrypt_stream(key: bytes, records: Iterable[bytes],
                   associated_data: bytes = None) -> Iterator[bytes]:
    """
    Inverse of encrypt_stream: the first record is the header. Raises
    StreamTruncated if records run out before FINAL and StreamClosed if
    records follow it.
    """
    records = iter(records)
    header  = next(records, None)
    if header is None:
        raise StreamTruncated("Stream is empty -- no header.")
    suite = SecretStreamSuite(key, header=header, associated_data=associated_data)
    for record in records:
        yield suite.decode(record)
    suite.finish()
