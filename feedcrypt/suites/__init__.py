from .base              import CipherSuite, AuthenticatedSuite, UnauthenticatedSuite
from .secretbox         import SecretBoxSuite
from .stream_xor        import StreamXorSuite
from .stream_instance   import StreamCursor, Chunk
from .secretstream      import (
    Tag, StreamState, SecretStreamSuite,
    init_push, init_pull, push, pull, rekey,
    encrypt_stream, decrypt_stream,
)

__all__ = [
    "CipherSuite",
    "AuthenticatedSuite",
    "UnauthenticatedSuite",
    "SecretBoxSuite",
    "StreamXorSuite",
    "StreamCursor",
    "Chunk",
    "Tag",
    "StreamState",
    "SecretStreamSuite",
    "init_push",
    "init_pull",
    "push",
    "pull",
    "rekey",
    "encrypt_stream",
    "decrypt_stream",
]
