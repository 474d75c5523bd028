"""
Representation-independent hashing of request contents.

A request id is the SHA-256 of the sorted concatenation of
``sha256(name) || sha256(value)`` over every present field. Field order does
not affect the result; field presence does, so optional fields are dropped
from the map rather than hashed as empty values.
"""

from __future__ import annotations
from typing import Any, Iterable, Mapping, Union

from ..runtime.errors import EncodingError
from .hashes import sha256_bytes
from .writer import encode_uvarint

REQUEST_ID_LENGTH = 32

# Length-prefixed domain separator for request signatures
IC_REQUEST_DOMAIN_SEPARATOR = b"\x0Aic-request"

HashableValue = Union[bytes, str, int, Iterable[Any]]


def hash_value(value: HashableValue) -> bytes:
    """
    Hash a single field value.

    Args:
        value: Blob, string, unsigned integer, or sequence of such values

    Returns:
        32-byte SHA-256 digest of the value's canonical encoding

    Raises:
        EncodingError: If the value is negative or of an unsupported type
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return sha256_bytes(bytes(value))
    if isinstance(value, str):
        return sha256_bytes(value.encode("utf-8"))
    if isinstance(value, bool):
        raise EncodingError("Booleans have no representation-independent encoding")
    if isinstance(value, int):
        if value < 0:
            raise EncodingError(f"Cannot hash negative integer: {value}")
        return sha256_bytes(encode_uvarint(value))
    if isinstance(value, (list, tuple)):
        return sha256_bytes(b"".join(hash_value(item) for item in value))
    if hasattr(value, "as_bytes"):
        return sha256_bytes(value.as_bytes())
    raise EncodingError(f"Unsupported value type for request id: {type(value).__name__}")


def representation_independent_hash(fields: Mapping[str, Any]) -> bytes:
    """
    Reduce a field map to its 32-byte representation-independent hash.

    Args:
        fields: Mapping of field name to value; ``None`` values are skipped

    Returns:
        32-byte digest
    """
    pairs = [
        sha256_bytes(name.encode("utf-8")) + hash_value(value)
        for name, value in fields.items()
        if value is not None
    ]
    pairs.sort()
    return sha256_bytes(b"".join(pairs))


class RequestId:
    """32-byte identifier of a call or read_state request."""

    __slots__ = ("_digest",)

    def __init__(self, digest: bytes):
        if len(digest) != REQUEST_ID_LENGTH:
            raise EncodingError(
                f"Request id must be {REQUEST_ID_LENGTH} bytes, got {len(digest)}"
            )
        self._digest = bytes(digest)

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> RequestId:
        return cls(representation_independent_hash(fields))

    @classmethod
    def from_hex(cls, hex_str: str) -> RequestId:
        try:
            return cls(bytes.fromhex(hex_str))
        except ValueError as e:
            raise EncodingError(f"Invalid request id hex: {hex_str!r}", cause=e)

    def signable(self) -> bytes:
        """Domain-separated bytes that are hashed and signed."""
        return IC_REQUEST_DOMAIN_SEPARATOR + self._digest

    def as_bytes(self) -> bytes:
        return self._digest

    def to_hex(self) -> str:
        return self._digest.hex()

    def __bytes__(self) -> bytes:
        return self._digest

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, RequestId):
            return self._digest == other._digest
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._digest)

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"RequestId({self.to_hex()})"


def make_signature_payload(request_id: RequestId) -> bytes:
    """
    Build the payload a sender signs for a request.

    Args:
        request_id: Request id of the envelope content

    Returns:
        ``b"\\x0Aic-request" || request_id``
    """
    return request_id.signable()


__all__ = [
    "RequestId",
    "representation_independent_hash",
    "hash_value",
    "make_signature_payload",
    "IC_REQUEST_DOMAIN_SEPARATOR",
    "REQUEST_ID_LENGTH",
]
