"""
ICRC-1 accounts.

An account is an owner principal plus an optional 32-byte subaccount. The
all-zero subaccount is the default and is equivalent to no subaccount for
equality, ordering and text rendering.

Text form::

    <owner>                                  default subaccount
    <owner>-<checksum>.<hex subaccount>      any other subaccount

where the checksum is the 7-character lowercase unpadded base32 encoding of
``crc32(owner || subaccount)`` and the hex subaccount has no leading zeroes.
"""

from __future__ import annotations
import base64
import functools
import string
from typing import Any, Optional

from ..codec.hashes import crc32_be
from ..runtime.errors import (
    DefaultSubaccountShouldBeOmittedError,
    InvalidSubaccountError,
    InvalidChecksumError,
    LeadingZeroesInSubaccountError,
    MissingChecksumError,
)
from ..runtime.principal import Principal
from .account_identifier import AccountIdentifier, DEFAULT_SUBACCOUNT, SUBACCOUNT_LENGTH

CHECKSUM_LENGTH = 7


def account_checksum(owner: Principal, subaccount: bytes) -> str:
    """7-character checksum of an owner and subaccount."""
    encoded = base64.b32encode(crc32_be(owner.as_bytes() + subaccount)).decode("ascii")
    return encoded.rstrip("=").lower()


@functools.total_ordering
class IcrcAccount:
    """Owner principal with an optional subaccount."""

    __slots__ = ("owner", "subaccount")

    def __init__(self, owner: Principal, subaccount: Optional[bytes] = None):
        """
        Initialize an account.

        Args:
            owner: Owner principal
            subaccount: Optional 32-byte subaccount

        Raises:
            InvalidSubaccountError: If the subaccount is not 32 bytes
        """
        if subaccount is not None:
            if len(subaccount) != SUBACCOUNT_LENGTH:
                raise InvalidSubaccountError(
                    f"Subaccount must be {SUBACCOUNT_LENGTH} bytes, got {len(subaccount)}"
                )
            subaccount = bytes(subaccount)
        object.__setattr__(self, "owner", owner)
        object.__setattr__(self, "subaccount", subaccount)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("IcrcAccount is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("IcrcAccount is immutable")

    @classmethod
    def from_public_key(cls, public_key: bytes, subaccount: Optional[bytes] = None) -> IcrcAccount:
        """Account owned by the self-authenticating principal of a SEC1 key."""
        return cls(Principal.from_public_key(public_key), subaccount)

    @property
    def effective_subaccount(self) -> bytes:
        """The subaccount, or the default subaccount when unset."""
        return self.subaccount if self.subaccount is not None else DEFAULT_SUBACCOUNT

    @property
    def has_default_subaccount(self) -> bool:
        return self.effective_subaccount == DEFAULT_SUBACCOUNT

    def to_account_identifier(self) -> AccountIdentifier:
        """Legacy address of the same owner and subaccount."""
        return AccountIdentifier.new(self.owner, self.effective_subaccount)

    def to_text(self) -> str:
        owner_text = self.owner.to_text()
        if self.has_default_subaccount:
            return owner_text
        checksum = account_checksum(self.owner, self.effective_subaccount)
        hex_subaccount = self.effective_subaccount.hex().lstrip("0")
        return f"{owner_text}-{checksum}.{hex_subaccount}"

    @classmethod
    def from_text(cls, text: str) -> IcrcAccount:
        """
        Parse the text form.

        Args:
            text: Bare principal, or principal-checksum.subaccount

        Returns:
            Parsed account

        Raises:
            InvalidPrincipalError: If the owner is not a valid principal
            MissingChecksumError: If a subaccount is given without a checksum
            LeadingZeroesInSubaccountError: If the subaccount hex starts with 0
            InvalidSubaccountError: If the subaccount is not hex or too long
            DefaultSubaccountShouldBeOmittedError: If the subaccount is all zeroes
            InvalidChecksumError: If the checksum does not match
        """
        owner_part, dot, hex_subaccount = text.rpartition(".")
        if not dot:
            return cls(Principal.from_text(text))

        owner_text, dash, checksum = owner_part.rpartition("-")
        if not dash or len(checksum) != CHECKSUM_LENGTH:
            raise MissingChecksumError(f"Account text has no checksum: {text!r}")

        owner = Principal.from_text(owner_text)

        if hex_subaccount.startswith("0"):
            raise LeadingZeroesInSubaccountError(
                f"Subaccount must not have leading zeroes: {hex_subaccount!r}"
            )
        if not all(c in string.hexdigits for c in hex_subaccount):
            raise InvalidSubaccountError(f"Subaccount is not valid hex: {hex_subaccount!r}")
        padded = hex_subaccount.rjust(2 * SUBACCOUNT_LENGTH, "0")
        if len(padded) != 2 * SUBACCOUNT_LENGTH:
            raise InvalidSubaccountError(
                f"Subaccount is longer than {SUBACCOUNT_LENGTH} bytes: {hex_subaccount!r}"
            )
        subaccount = bytes.fromhex(padded)
        if subaccount == DEFAULT_SUBACCOUNT:
            raise DefaultSubaccountShouldBeOmittedError(
                f"Default subaccount must be omitted: {text!r}"
            )

        expected = account_checksum(owner, subaccount)
        if checksum != expected:
            raise InvalidChecksumError(
                f"Account checksum mismatch: {text!r}",
                expected=expected,
            )
        return cls(owner, subaccount)

    @classmethod
    def from_text_optional(cls, text: str) -> Optional[IcrcAccount]:
        """Parse account text, treating the empty string as no account."""
        if text == "":
            return None
        return cls.from_text(text)

    def _key(self):
        return self.owner, self.effective_subaccount

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, IcrcAccount):
            return self._key() == other._key()
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, IcrcAccount):
            return self._key() < other._key()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"IcrcAccount('{self.to_text()}')"


__all__ = [
    "IcrcAccount",
    "account_checksum",
    "DEFAULT_SUBACCOUNT",
    "CHECKSUM_LENGTH",
]
