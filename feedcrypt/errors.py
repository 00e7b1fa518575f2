"""
Error taxonomy
==============
Every failure raised by feedcrypt derives from FeedCryptError.

Construction errors (bad key, nonce or header length, missing nonce) also
derive from ValueError, so callers validating input the usual way keep
working. Verification errors never carry plaintext: when one is raised,
nothing was released.
"""


class FeedCryptError(Exception):
    """Base class for all feedcrypt errors."""


class InvalidKeyLength(FeedCryptError, ValueError):
    """Key does not match the suite's required length."""

    def __init__(self, suite: str, expected: int, actual: int):
        super().__init__(f"{suite} key must be {expected} bytes, got {actual}.")
        self.suite    = suite
        self.expected = expected
        self.actual   = actual


class InvalidNonceLength(FeedCryptError, ValueError):
    """Supplied nonce does not match the suite's nonce length."""

    def __init__(self, suite: str, expected: int, actual: int):
        super().__init__(f"{suite} nonce must be {expected} bytes, got {actual}.")
        self.suite    = suite
        self.expected = expected
        self.actual   = actual


class InvalidHeaderLength(FeedCryptError, ValueError):
    """Stream header does not match the secretstream header length."""


class MissingNonce(FeedCryptError, ValueError):
    """A deterministic suite needs the peer's nonce and none was given."""


class AuthenticationFailure(FeedCryptError):
    """MAC or chained stream tag verification failed."""


class StreamTruncated(AuthenticationFailure):
    """The pull side reached end of input without a FINAL chunk."""


class StreamClosed(FeedCryptError):
    """Push or pull attempted after the stream's FINAL chunk."""


class OutOfOrderChunk(FeedCryptError):
    """A sequenced chunk arrived at the wrong keystream position."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Chunk {actual} read out of order -- next expected chunk is {expected}."
        )
        self.expected = expected
        self.actual   = actual


class SerializationError(FeedCryptError):
    """The value serializer could not produce or parse bytes."""


class UnauthenticatedSuiteError(FeedCryptError):
    """An authenticated suite was required but an XOR suite was chosen."""
