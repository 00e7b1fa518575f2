import hashlib
import itertools

import pytest

from feedcrypt.keys import KeyGenerator


def counter_source(seed: bytes):
    """Deterministic stand-in for os.urandom: SHA-256 over a running counter."""
    counter = itertools.count()

    def source(n: int) -> bytes:
        out = b""
        while len(out) < n:
            out += hashlib.sha256(seed + next(counter).to_bytes(8, "big")).digest()
        return out[:n]

    return source


@pytest.fixture
def key():
    return bytes(range(32))


@pytest.fixture
def make_generator():
    def factory(seed: bytes = b"feedcrypt-tests") -> KeyGenerator:
        return KeyGenerator(counter_source(seed))
    return factory


@pytest.fixture
def seeded(make_generator):
    return make_generator()
