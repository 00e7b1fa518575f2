"""
Key / Nonce Generator
=====================
Random key and nonce material of suite-mandated lengths.

The random source is an explicit dependency: production code uses the
default (os.urandom), tests inject a deterministic callable so that
ciphertexts are reproducible.

The codec zeroes its serialized plaintext bytearray with wipe() after
encryption. Immutable bytes objects, including the copies libsodium is
given, cannot be zeroed from Python; keep keys in bytearrays if you intend
to wipe them.
"""

import os
import ctypes
import logging
from typing import Callable

logger = logging.getLogger(__name__)

KEY_SIZE = 32   # every suite uses a 256-bit key

RandomSource = Callable[[int], bytes]


class KeyGenerator:
    """Produces keys and nonces from an injected random source."""

    def __init__(self, random_source: RandomSource = None):
        self._random = random_source if random_source is not None else os.urandom

    def random(self, size: int) -> bytes:
        data = self._random(size)
        if len(data) != size:
            raise ValueError(
                f"Random source returned {len(data)} bytes, expected {size}."
            )
        return bytes(data)

    def key(self, size: int = KEY_SIZE) -> bytearray:
        """Fresh secret key. Returned mutable so the caller can wipe() it."""
        logger.debug(f"Generating {size}-byte key")
        return bytearray(self.random(size))

    def nonce(self, size: int) -> bytes:
        return self.random(size)


DEFAULT_GENERATOR = KeyGenerator()


def generate_key(size: int = KEY_SIZE) -> bytearray:
    return DEFAULT_GENERATOR.key(size)


def generate_nonce(size: int) -> bytes:
    return DEFAULT_GENERATOR.nonce(size)


def wipe(buf: bytearray) -> None:
    """Overwrite a mutable buffer with zeros in place."""
    if not isinstance(buf, bytearray):
        raise TypeError("Only bytearray buffers can be wiped.")
    if buf:
        ctypes.memset((ctypes.c_char * len(buf)).from_buffer(buf), 0, len(buf))
