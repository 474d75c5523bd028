"""
ICP Client Error Model

This module provides the error handling framework for the ICP client,
covering address parsing, argument encoding, signing and envelope assembly.
Every failure of a signing attempt surfaces as one of these typed errors.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes reported by the signing pipeline."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Input validation errors (100-199)
    INVALID_ARGUMENTS = 100
    INVALID_AMOUNT = 101
    INVALID_ADDRESS = 102
    INVALID_PRINCIPAL = 103
    INVALID_TO_ADDRESS = 104

    # Encoding errors (200-299)
    ENCODING_ERROR = 200
    ENCODING_ARGS_FAILED = 201
    DECODING_ERROR = 202

    # Cryptographic errors (300-399)
    INVALID_PRIVATE_KEY = 300
    INVALID_PUBLIC_KEY = 301
    SIGNING_FAILED = 302
    MALFORMED_SIGNATURE = 303

    # Structural errors (400-499)
    INVALID_ENVELOPE_PAIR = 400


class IcpError(Exception):
    """
    Base class for all ICP client errors.

    Provides structured error information: a stable code, a message,
    optional details and the underlying cause.
    """

    code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an ICP error.

        Args:
            message: Error message
            code: Error code (defaults to the class code)
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# Input validation

class InvalidArgumentsError(IcpError):
    """Required transaction arguments are missing or inconsistent."""
    code = ErrorCode.INVALID_ARGUMENTS


class InvalidAmountError(InvalidArgumentsError):
    """Transfer amount is below the minimum of one unit."""
    code = ErrorCode.INVALID_AMOUNT


class InvalidAddressError(IcpError):
    """Base class for address parsing failures."""
    code = ErrorCode.INVALID_ADDRESS


class InvalidPrincipalError(InvalidAddressError):
    """Textual or binary principal is malformed."""
    code = ErrorCode.INVALID_PRINCIPAL


class AddressLengthError(InvalidAddressError):
    """Account identifier does not decode to 32 bytes."""


class AddressChecksumError(InvalidAddressError):
    """Account identifier CRC-32 prefix does not match its hash."""

    def __init__(self, message: str, expected: str, found: str, **kwargs):
        super().__init__(message, details={"expected": expected, "found": found}, **kwargs)
        self.expected = expected
        self.found = found


class MissingChecksumError(InvalidAddressError):
    """ICRC-1 account text has a subaccount but no 7-character checksum."""


class InvalidChecksumError(InvalidAddressError):
    """ICRC-1 account checksum does not match owner and subaccount."""

    def __init__(self, message: str, expected: str, **kwargs):
        super().__init__(message, details={"expected": expected}, **kwargs)
        self.expected = expected


class LeadingZeroesInSubaccountError(InvalidAddressError):
    """ICRC-1 subaccount hex must be rendered without leading zeroes."""


class DefaultSubaccountShouldBeOmittedError(InvalidAddressError):
    """The all-zero subaccount must be omitted rather than spelled out."""


class InvalidSubaccountError(InvalidAddressError):
    """Subaccount is not hex or does not fit in 32 bytes."""


class InvalidToAddressError(InvalidArgumentsError):
    """Destination of a transfer could not be parsed."""
    code = ErrorCode.INVALID_TO_ADDRESS


# Encoding

class EncodingError(IcpError):
    """A value could not be encoded in the requested wire format."""
    code = ErrorCode.ENCODING_ERROR


class DecodingError(IcpError):
    """Bytes could not be decoded back into a value."""
    code = ErrorCode.DECODING_ERROR


class EncodingArgsFailedError(EncodingError):
    """Transfer arguments could not be serialized for the ledger call."""
    code = ErrorCode.ENCODING_ARGS_FAILED


# Cryptographic

class InvalidPrivateKeyError(IcpError):
    """Private key bytes are not a valid secp256k1 scalar."""
    code = ErrorCode.INVALID_PRIVATE_KEY


class InvalidPublicKeyError(IcpError):
    """Public key bytes are not a valid secp256k1 point."""
    code = ErrorCode.INVALID_PUBLIC_KEY


class SigningError(IcpError):
    """The signature primitive failed."""
    code = ErrorCode.SIGNING_FAILED


class MalformedSignatureError(SigningError):
    """A signature component does not fit in 32 bytes."""
    code = ErrorCode.MALFORMED_SIGNATURE


# Structural

class EnvelopePairError(IcpError):
    """Envelope contents do not match the update / read_state roles."""
    code = ErrorCode.INVALID_ENVELOPE_PAIR


__all__ = [
    "ErrorCode",
    "IcpError",
    "InvalidArgumentsError",
    "InvalidAmountError",
    "InvalidAddressError",
    "InvalidPrincipalError",
    "AddressLengthError",
    "AddressChecksumError",
    "MissingChecksumError",
    "InvalidChecksumError",
    "LeadingZeroesInSubaccountError",
    "DefaultSubaccountShouldBeOmittedError",
    "InvalidSubaccountError",
    "InvalidToAddressError",
    "EncodingError",
    "DecodingError",
    "EncodingArgsFailedError",
    "InvalidPrivateKeyError",
    "InvalidPublicKeyError",
    "SigningError",
    "MalformedSignatureError",
    "EnvelopePairError",
]
