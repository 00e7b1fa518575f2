"""
Stream-XOR (stateless): ChaCha20
================================
One nonce per session, keystream restarted at offset zero for every record.

encode and decode are the same operation: plaintext XOR keystream(key, nonce).
Output length equals input length -- there is no room for a MAC, so this
suite provides confidentiality only. A flipped ciphertext bit silently flips
the recovered plaintext bit.

Every record of a session is XORed against the SAME keystream prefix.
Two records encoded by one suite reveal the XOR of their plaintexts to
anyone holding both; use it only where that is acceptable, and never reuse
a key+nonce pair across sessions.

Key:    256-bit (32 bytes)
Nonce:   96-bit (12 bytes) -- shared out of band via the .nonce property

Record format: ciphertext (same length as plaintext)

Dependencies: cryptography >= 41.0
"""

import logging

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from ..errors import MissingNonce
from ..keys import DEFAULT_GENERATOR, KeyGenerator
from .base import UnauthenticatedSuite

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
_COUNTER   = b"\x00" * 4   # RFC 8439 block counter, little-endian, starts at 0


def keystream_cipher(key: bytes, nonce: bytes) -> Cipher:
    """ChaCha20 cipher positioned at keystream offset zero."""
    return Cipher(algorithms.ChaCha20(key, _COUNTER + nonce), mode=None)


class StreamXorSuite(UnauthenticatedSuite):
    """Stateless ChaCha20 XOR. Confidentiality only."""

    NAME       = "xor"
    NONCE_SIZE = NONCE_SIZE

    def __init__(self, key: bytes, nonce: bytes = None, require_nonce: bool = False,
                 generator: KeyGenerator = None):
        """
        Omit nonce on the side that starts a session; pass the peer's
        .nonce on the side that joins it. require_nonce=True turns a
        forgotten nonce into MissingNonce instead of an undecodable pair.
        """
        super().__init__(key)
        if nonce is None:
            if require_nonce:
                raise MissingNonce(
                    f"{self.NAME} decoder needs the encoder's {self.NONCE_SIZE}-byte nonce."
                )
            nonce = (generator or DEFAULT_GENERATOR).nonce(self.NONCE_SIZE)
            logger.debug(f"{self.NAME}: generated session nonce")
        self._nonce  = self.check_nonce(nonce, self.NONCE_SIZE)
        self._cipher = keystream_cipher(self._key, self._nonce)

    @property
    def nonce(self) -> bytes:
        return self._nonce

    def _xor(self, data: bytes) -> bytes:
        ctx = self._cipher.encryptor()
        return ctx.update(data) + ctx.finalize()

    def encode(self, data: bytes) -> bytes:
        logger.debug(f"{self.NAME} encode: {len(data)}B")
        return self._xor(data)

    def decode(self, data: bytes) -> bytes:
        logger.debug(f"{self.NAME} decode: {len(data)}B")
        return self._xor(data)
