"""
AEAD-SecretBox: XChaCha20-Poly1305
==================================
Random nonce per record, authenticated.

Each record carries its own 192-bit nonce, so records can be stored,
fetched and decoded independently and in any order. The 24-byte nonce
makes random generation safe at scale: collision probability stays
negligible even after billions of records under one key.

Key:    256-bit (32 bytes)
Nonce:  192-bit (24 bytes) -- fresh per record
MAC:    128-bit (16 bytes) -- Poly1305

Record format: nonce(24) || ciphertext || MAC(16)

Dependencies: PyNaCl (libsodium crypto_aead_xchacha20poly1305_ietf_*)
"""

import logging

from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_ABYTES,
    crypto_aead_xchacha20poly1305_ietf_KEYBYTES,
    crypto_aead_xchacha20poly1305_ietf_NPUBBYTES,
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
)
from nacl.exceptions import CryptoError

from ..errors import AuthenticationFailure
from ..keys import DEFAULT_GENERATOR, KeyGenerator
from .base import AuthenticatedSuite

logger = logging.getLogger(__name__)


class SecretBoxSuite(AuthenticatedSuite):
    """XChaCha20-Poly1305 authenticated encryption, one nonce per record."""

    NAME       = "secretbox"
    KEY_SIZE   = crypto_aead_xchacha20poly1305_ietf_KEYBYTES    # 32
    NONCE_SIZE = crypto_aead_xchacha20poly1305_ietf_NPUBBYTES   # 24
    MAC_SIZE   = crypto_aead_xchacha20poly1305_ietf_ABYTES      # 16
    OVERHEAD   = NONCE_SIZE + MAC_SIZE

    def __init__(self, key: bytes, associated_data: bytes = None,
                 generator: KeyGenerator = None):
        """
        associated_data is bound into every MAC without being stored; the
        decoding side must be constructed with the same value.
        """
        super().__init__(key)
        self._aad       = bytes(associated_data) if associated_data else None
        self._generator = generator or DEFAULT_GENERATOR

    def encode(self, data: bytes) -> bytes:
        """
        Encrypt and authenticate one record.
        Returns: nonce(24) || ciphertext || MAC(16)
        """
        nonce = self._generator.nonce(self.NONCE_SIZE)
        ct    = crypto_aead_xchacha20poly1305_ietf_encrypt(
            bytes(data), self._aad, nonce, self._key
        )
        logger.debug(f"secretbox encode: {len(data)}B -> {len(nonce) + len(ct)}B")
        return nonce + ct

    def decode(self, data: bytes) -> bytes:
        """
        Verify and decrypt one record.
        Raises AuthenticationFailure on a bad MAC, wrong key or short record.
        """
        data = bytes(data)
        if len(data) < self.OVERHEAD:
            logger.warning(f"secretbox decode: record of {len(data)}B is too short")
            raise AuthenticationFailure(
                f"Record too short -- need at least {self.OVERHEAD} bytes."
            )
        nonce = data[:self.NONCE_SIZE]
        ct    = data[self.NONCE_SIZE:]
        try:
            pt = crypto_aead_xchacha20poly1305_ietf_decrypt(ct, self._aad, nonce, self._key)
        except CryptoError as exc:
            logger.warning("secretbox decode: MAC verification failed")
            raise AuthenticationFailure(
                "Record failed authentication -- tampered, truncated or wrong key."
            ) from exc
        return pt
