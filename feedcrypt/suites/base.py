"""
Cipher Suite interface
======================
Every suite turns plaintext bytes into a ciphertext record and back.

The interface is identical across suites but the guarantees are not:

    AuthenticatedSuite    -- confidentiality + integrity. Tampering raises
                             AuthenticationFailure; no plaintext is released.
    UnauthenticatedSuite  -- confidentiality only. A flipped ciphertext bit
                             silently flips the same plaintext bit.

Use isinstance(suite, AuthenticatedSuite), or the AUTHENTICATED flag, before
trusting decoded data that an attacker could have touched.
"""

from ..errors import InvalidKeyLength, InvalidNonceLength
from ..keys import KEY_SIZE


class CipherSuite:
    """Base for all suites. Subclasses implement encode() and decode()."""

    NAME          = "suite"
    KEY_SIZE      = KEY_SIZE
    OVERHEAD      = 0        # ciphertext bytes added per record
    AUTHENTICATED = False

    def __init__(self, key: bytes):
        self._key = bytes(self.check_key(key))

    @classmethod
    def check_key(cls, key: bytes) -> bytes:
        if not isinstance(key, (bytes, bytearray, memoryview)):
            raise TypeError(f"{cls.NAME} key must be bytes-like.")
        if len(key) != cls.KEY_SIZE:
            raise InvalidKeyLength(cls.NAME, cls.KEY_SIZE, len(key))
        return key

    @classmethod
    def check_nonce(cls, nonce: bytes, size: int) -> bytes:
        if not isinstance(nonce, (bytes, bytearray, memoryview)):
            raise TypeError(f"{cls.NAME} nonce must be bytes-like.")
        if len(nonce) != size:
            raise InvalidNonceLength(cls.NAME, size, len(nonce))
        return bytes(nonce)

    def encode(self, data: bytes) -> bytes:
        raise NotImplementedError

    def decode(self, data: bytes) -> bytes:
        raise NotImplementedError

    def __repr__(self):
        kind = "authenticated" if self.AUTHENTICATED else "unauthenticated"
        return f"{type(self).__name__}({self.NAME}, {kind})"


class AuthenticatedSuite(CipherSuite):
    AUTHENTICATED = True


class UnauthenticatedSuite(CipherSuite):
    AUTHENTICATED = False
