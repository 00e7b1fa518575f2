"""
Value serializers
=================
Turn application values into the bytes a suite encrypts, and back.

    None / "binary" / "raw"   bytes passthrough
    "utf-8" / "utf8"          str
    "json"                    JSON-representable structures

Any object with encode(value) -> bytes and decode(bytes) -> value methods
can be passed instead of a name.
"""

import json

from .errors import SerializationError


class BinarySerializer:
    name = "binary"

    def encode(self, value) -> bytes:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise SerializationError(
                f"Expected bytes without a value encoding, got {type(value).__name__}."
            )
        return bytes(value)

    def decode(self, data: bytes) -> bytes:
        return bytes(data)


class Utf8Serializer:
    name = "utf-8"

    def encode(self, value) -> bytes:
        if not isinstance(value, str):
            raise SerializationError(f"utf-8 encoding expects str, got {type(value).__name__}.")
        try:
            return value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SerializationError(f"Value cannot be encoded as UTF-8: {exc}") from exc

    def decode(self, data: bytes) -> str:
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("Decoded bytes are not valid UTF-8.") from exc


class JsonSerializer:
    name = "json"

    def encode(self, value) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError, RecursionError) as exc:
            raise SerializationError(f"Value is not JSON serializable: {exc}") from exc

    def decode(self, data: bytes):
        try:
            return json.loads(bytes(data).decode("utf-8"))
        except (ValueError, RecursionError) as exc:
            raise SerializationError(f"Decoded bytes are not valid JSON: {exc}") from exc


class CustomSerializer:
    """Wraps a caller-supplied encoder so its failures surface as SerializationError."""

    def __init__(self, inner):
        self._inner = inner
        self.name   = getattr(inner, "name", type(inner).__name__)

    def encode(self, value) -> bytes:
        try:
            data = self._inner.encode(value)
        except Exception as exc:
            raise SerializationError(f"{self.name} could not encode value: {exc}") from exc
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise SerializationError(f"{self.name}.encode must return bytes.")
        return bytes(data)

    def decode(self, data: bytes):
        try:
            return self._inner.decode(data)
        except Exception as exc:
            raise SerializationError(f"{self.name} could not decode value: {exc}") from exc


_NAMED = {
    "binary": BinarySerializer,
    "raw":    BinarySerializer,
    "utf-8":  Utf8Serializer,
    "utf8":   Utf8Serializer,
    "json":   JsonSerializer,
}


def resolve(value_encoding=None):
    """Serializer for a name, a custom encoder object, or None."""
    if value_encoding is None:
        return BinarySerializer()
    if isinstance(value_encoding, str):
        try:
            return _NAMED[value_encoding.lower()]()
        except KeyError:
            raise SerializationError(
                f"Unknown value encoding {value_encoding!r}. "
                f"Choose from: {', '.join(sorted(_NAMED))}."
            ) from None
    if isinstance(value_encoding, (BinarySerializer, Utf8Serializer,
                                   JsonSerializer, CustomSerializer)):
        return value_encoding
    if callable(getattr(value_encoding, "encode", None)) and \
       callable(getattr(value_encoding, "decode", None)):
        return CustomSerializer(value_encoding)
    raise SerializationError("value_encoding must be a name or have encode/decode methods.")
