"""
Legacy ledger account identifiers.

An account identifier is 32 bytes: a big-endian CRC-32 of the 28-byte hash
followed by the hash itself, where the hash is
``SHA-224(b"\\x0Aaccount-id" || principal || subaccount)``.
"""

from __future__ import annotations
import string
from typing import Any, Optional

from ..codec.hashes import crc32_be, sha224_bytes
from ..runtime.errors import (
    AddressChecksumError, AddressLengthError, InvalidAddressError, InvalidSubaccountError
)
from ..runtime.principal import Principal

ACCOUNT_DOMAIN_SEPARATOR = b"\x0Aaccount-id"
ACCOUNT_IDENTIFIER_LENGTH = 32
HASH_LENGTH = 28
SUBACCOUNT_LENGTH = 32
DEFAULT_SUBACCOUNT = bytes(SUBACCOUNT_LENGTH)


class AccountIdentifier:
    """Checksummed 32-byte legacy ledger address."""

    __slots__ = ("_hash",)

    def __init__(self, hash_bytes: bytes):
        """
        Initialize from the 28-byte hash part.

        Args:
            hash_bytes: SHA-224 account hash

        Raises:
            AddressLengthError: If the hash is not 28 bytes
        """
        if len(hash_bytes) != HASH_LENGTH:
            raise AddressLengthError(
                f"Account hash must be {HASH_LENGTH} bytes, got {len(hash_bytes)}"
            )
        self._hash = bytes(hash_bytes)

    @classmethod
    def new(cls, principal: Principal, subaccount: Optional[bytes] = None) -> AccountIdentifier:
        """
        Derive the account identifier of an owner and subaccount.

        Args:
            principal: Account owner
            subaccount: Optional 32-byte subaccount, default all zeroes

        Returns:
            AccountIdentifier

        Raises:
            InvalidSubaccountError: If the subaccount is not 32 bytes
        """
        if subaccount is None:
            subaccount = DEFAULT_SUBACCOUNT
        if len(subaccount) != SUBACCOUNT_LENGTH:
            raise InvalidSubaccountError(
                f"Subaccount must be {SUBACCOUNT_LENGTH} bytes, got {len(subaccount)}"
            )
        return cls(sha224_bytes(ACCOUNT_DOMAIN_SEPARATOR + principal.as_bytes() + bytes(subaccount)))

    @classmethod
    def from_bytes(cls, data: bytes) -> AccountIdentifier:
        """
        Parse the 32-byte checksummed form.

        Raises:
            AddressLengthError: If the input is not 32 bytes
            AddressChecksumError: If the checksum does not match the hash
        """
        if len(data) != ACCOUNT_IDENTIFIER_LENGTH:
            raise AddressLengthError(
                f"Account identifier must be {ACCOUNT_IDENTIFIER_LENGTH} bytes, got {len(data)}",
                details={"length": len(data)},
            )
        found, hash_bytes = bytes(data[:4]), bytes(data[4:])
        expected = crc32_be(hash_bytes)
        if found != expected:
            raise AddressChecksumError(
                "Account identifier checksum mismatch",
                expected=expected.hex(),
                found=found.hex(),
            )
        return cls(hash_bytes)

    @classmethod
    def from_hex(cls, hex_str: str) -> AccountIdentifier:
        """
        Parse the hex form, in any letter case.

        Args:
            hex_str: 64 hex characters

        Returns:
            AccountIdentifier

        Raises:
            InvalidAddressError: If the text is not hex
            AddressLengthError: If it does not decode to 32 bytes
            AddressChecksumError: If the checksum does not match the hash
        """
        if not isinstance(hex_str, str) or not all(c in string.hexdigits for c in hex_str):
            raise InvalidAddressError(f"Account identifier is not valid hex: {hex_str!r}")
        if len(hex_str) != 2 * ACCOUNT_IDENTIFIER_LENGTH:
            raise AddressLengthError(
                f"Account identifier must be {2 * ACCOUNT_IDENTIFIER_LENGTH} hex characters, "
                f"got {len(hex_str)}",
                details={"length": len(hex_str)},
            )
        return cls.from_bytes(bytes.fromhex(hex_str))

    @staticmethod
    def is_valid(hex_str: str) -> bool:
        """True if the text parses as a checksummed account identifier."""
        try:
            AccountIdentifier.from_hex(hex_str)
        except InvalidAddressError:
            return False
        return True

    @property
    def hash(self) -> bytes:
        """The 28-byte hash part."""
        return self._hash

    def checksum(self) -> bytes:
        return crc32_be(self._hash)

    def to_bytes(self) -> bytes:
        return self.checksum() + self._hash

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"AccountIdentifier({self.to_hex()})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, AccountIdentifier):
            return self._hash == other._hash
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._hash)


__all__ = [
    "AccountIdentifier",
    "ACCOUNT_DOMAIN_SEPARATOR",
    "ACCOUNT_IDENTIFIER_LENGTH",
    "DEFAULT_SUBACCOUNT",
    "SUBACCOUNT_LENGTH",
]
