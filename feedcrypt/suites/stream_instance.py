"""
Stream-XOR (instance): ChaCha20 with persistent cursors
=======================================================
Same key+nonce derivation as the stateless suite, but the keystream is
never restarted. One cursor object owns both directions:

    tx  -- advances on every encode()/write()
    rx  -- advances on every decode()/read()

Record N is XORed against the keystream bytes that follow record N-1, so
no two records share keystream. The price is position: the receiving
cursor must consume records in exactly the order the transmitting cursor
produced them. Skipping, repeating or reordering a record desynchronises
rx and corrupts it and everything after it -- silently, because there is
no MAC.

encode()/decode() are the bare positional contract a storage engine uses.
write()/read() add a sequence number and offset to each chunk so that
misordering is caught with OutOfOrderChunk before any keystream is spent.

Dependencies: cryptography >= 41.0
"""

import logging
from typing import NamedTuple

from ..errors import MissingNonce, OutOfOrderChunk
from ..keys import DEFAULT_GENERATOR, KeyGenerator
from .base import UnauthenticatedSuite
from .stream_xor import NONCE_SIZE, keystream_cipher

logger = logging.getLogger(__name__)


class Chunk(NamedTuple):
    seq:        int     # position in the transmit sequence, from 0
    offset:     int     # keystream offset of the first ciphertext byte
    ciphertext: bytes


class StreamCursor(UnauthenticatedSuite):
    """Ordered ChaCha20 keystream with transmit and receive cursors."""

    NAME       = "xor-instance"
    NONCE_SIZE = NONCE_SIZE

    def __init__(self, key: bytes, nonce: bytes = None, require_nonce: bool = False,
                 generator: KeyGenerator = None):
        super().__init__(key)
        if nonce is None:
            if require_nonce:
                raise MissingNonce(
                    f"{self.NAME} decoder needs the encoder's {self.NONCE_SIZE}-byte nonce."
                )
            nonce = (generator or DEFAULT_GENERATOR).nonce(self.NONCE_SIZE)
        self._nonce = self.check_nonce(nonce, self.NONCE_SIZE)
        cipher      = keystream_cipher(self._key, self._nonce)
        self._tx    = cipher.encryptor()
        self._rx    = cipher.encryptor()
        self._tx_offset = self._rx_offset = 0
        self._tx_seq    = self._rx_seq    = 0

    @property
    def nonce(self) -> bytes:
        return self._nonce

    @property
    def tx_offset(self) -> int:
        return self._tx_offset

    @property
    def rx_offset(self) -> int:
        return self._rx_offset

    @property
    def tx_seq(self) -> int:
        return self._tx_seq

    @property
    def rx_seq(self) -> int:
        return self._rx_seq

    # ── positional contract ──────────────────────────────────────────────────
    def encode(self, data: bytes) -> bytes:
        out = self._tx.update(data)
        self._tx_offset += len(data)
        self._tx_seq    += 1
        logger.debug(f"{self.NAME} tx: {len(data)}B, offset now {self._tx_offset}")
        return out

    def decode(self, data: bytes) -> bytes:
        out = self._rx.update(data)
        self._rx_offset += len(data)
        self._rx_seq    += 1
        logger.debug(f"{self.NAME} rx: {len(data)}B, offset now {self._rx_offset}")
        return out

    # ── sequenced contract ───────────────────────────────────────────────────
    def write(self, data: bytes) -> Chunk:
        seq, offset = self._tx_seq, self._tx_offset
        return Chunk(seq, offset, self.encode(data))

    def read(self, chunk: Chunk) -> bytes:
        """
        Decode the next chunk. Raises OutOfOrderChunk, leaving the rx cursor
        untouched, if chunk is not the one the cursor expects.
        """
        if chunk.seq != self._rx_seq or chunk.offset != self._rx_offset:
            logger.warning(
                f"{self.NAME} rx: got chunk {chunk.seq}@{chunk.offset}, "
                f"expected {self._rx_seq}@{self._rx_offset}"
            )
            raise OutOfOrderChunk(self._rx_seq, chunk.seq)
        return self.decode(chunk.ciphertext)
