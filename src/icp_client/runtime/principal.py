"""
Principal Pydantic custom type for Internet Computer identities.

A principal is an opaque byte string of at most 29 bytes. Its textual form
is the lowercase base32 encoding of ``crc32(bytes) || bytes`` split into
groups of five characters separated by dashes.
"""

from __future__ import annotations
import base64
import binascii
import functools
from typing import Any, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from ..codec.hashes import crc32_be, sha224_bytes
from .errors import InvalidPrincipalError

MAX_PRINCIPAL_LENGTH = 29

# Trailing tag bytes of the principal classes
SELF_AUTHENTICATING_TAG = 0x02
ANONYMOUS_TAG = 0x04


@functools.total_ordering
class Principal:
    """Custom Pydantic type for Internet Computer principals."""

    __slots__ = ("_bytes",)

    def __init__(self, data: bytes):
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidPrincipalError("Principal must be constructed from bytes")
        if len(data) > MAX_PRINCIPAL_LENGTH:
            raise InvalidPrincipalError(
                f"Principal is {len(data)} bytes long, at most {MAX_PRINCIPAL_LENGTH} allowed"
            )
        object.__setattr__(self, "_bytes", bytes(data))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Principal is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Principal is immutable")

    @classmethod
    def self_authenticating(cls, der_public_key: bytes) -> Principal:
        """
        Derive the principal controlled by a DER-encoded public key.

        Args:
            der_public_key: SubjectPublicKeyInfo DER bytes

        Returns:
            SHA-224 of the key followed by the self-authenticating tag
        """
        return cls(sha224_bytes(der_public_key) + bytes([SELF_AUTHENTICATING_TAG]))

    @classmethod
    def from_public_key(cls, public_key: bytes) -> Principal:
        """
        Derive the principal of a SEC1-encoded secp256k1 public key.

        Args:
            public_key: 33-byte compressed or 65-byte uncompressed point

        Returns:
            Self-authenticating principal
        """
        from ..crypto.secp256k1 import der_encode_public_key
        return cls.self_authenticating(der_encode_public_key(public_key))

    @classmethod
    def anonymous(cls) -> Principal:
        """The well-known anonymous principal (``2vxsx-fae``)."""
        return cls(bytes([ANONYMOUS_TAG]))

    @classmethod
    def management_canister(cls) -> Principal:
        """The management canister principal (``aaaaa-aa``)."""
        return cls(b"")

    @classmethod
    def from_text(cls, text: str) -> Principal:
        """
        Parse the canonical textual form.

        Args:
            text: Dash-grouped base32 text

        Returns:
            Parsed principal

        Raises:
            InvalidPrincipalError: If the text is malformed, too long, has a
                bad checksum or is not in canonical form
        """
        if not isinstance(text, str):
            raise InvalidPrincipalError(f"Principal text must be a string, got {type(text).__name__}")

        compact = text.replace("-", "").upper()
        try:
            raw = base64.b32decode(compact + "=" * (-len(compact) % 8))
        except (binascii.Error, ValueError) as e:
            raise InvalidPrincipalError(f"Principal text is not valid base32: {text!r}", cause=e)

        if len(raw) < 4:
            raise InvalidPrincipalError(f"Principal text is too short: {text!r}")

        checksum, data = raw[:4], raw[4:]
        principal = cls(data)
        if crc32_be(data) != checksum:
            raise InvalidPrincipalError(
                f"Principal checksum mismatch: {text!r}",
                details={"expected": crc32_be(data).hex(), "found": checksum.hex()},
            )

        if principal.to_text() != text:
            raise InvalidPrincipalError(
                f"Principal text is not in canonical form: {text!r}",
                details={"expected": principal.to_text()},
            )
        return principal

    @classmethod
    def from_hex(cls, hex_str: str) -> Principal:
        """Create a principal from its raw bytes in hex."""
        try:
            return cls(bytes.fromhex(hex_str))
        except ValueError as e:
            raise InvalidPrincipalError(f"Invalid principal hex: {hex_str!r}", cause=e)

    def to_text(self) -> str:
        """Render the canonical textual form."""
        encoded = base64.b32encode(crc32_be(self._bytes) + self._bytes).decode("ascii")
        encoded = encoded.rstrip("=").lower()
        return "-".join(encoded[i:i + 5] for i in range(0, len(encoded), 5))

    def to_hex(self) -> str:
        return self._bytes.hex()

    def as_bytes(self) -> bytes:
        """Raw principal bytes."""
        return self._bytes

    def __bytes__(self) -> bytes:
        return self._bytes

    def __len__(self) -> int:
        return len(self._bytes)

    @property
    def is_anonymous(self) -> bool:
        return self._bytes == bytes([ANONYMOUS_TAG])

    @property
    def is_self_authenticating(self) -> bool:
        return len(self._bytes) == MAX_PRINCIPAL_LENGTH and self._bytes[-1] == SELF_AUTHENTICATING_TAG

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Principal('{self.to_text()}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Principal):
            return self._bytes == other._bytes
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, Principal):
            return self._bytes < other._bytes
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the Principal."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda p: p.to_text(), when_used="json"
            ),
        )

    @classmethod
    def _validate(cls, value: Union[Principal, str, bytes]) -> Principal:
        """Validate and convert the input to a Principal."""
        if isinstance(value, cls):
            return value
        try:
            if isinstance(value, str):
                return cls.from_text(value)
            if isinstance(value, (bytes, bytearray)):
                return cls(bytes(value))
        except InvalidPrincipalError as e:
            raise ValueError(str(e)) from e
        raise ValueError(f"Invalid Principal: {value!r}")


__all__ = [
    "Principal",
    "MAX_PRINCIPAL_LENGTH",
    "SELF_AUTHENTICATING_TAG",
    "ANONYMOUS_TAG",
]
