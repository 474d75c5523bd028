"""
SECP256K1 cryptographic operations.

Deterministic (RFC 6979) ECDSA over secp256k1 with low-S normalization, the
fixed 64-byte ``r || s`` signature encoding verified by the network, and
SubjectPublicKeyInfo DER encoding of public keys.

Signing uses the ``ecdsa`` library; DER encoding uses ``cryptography``.
"""

from __future__ import annotations
import hashlib
from typing import Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from ecdsa import BadSignatureError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.ecdsa import RSZeroError
from ecdsa.keys import BadDigestError, MalformedPointError
from ecdsa.util import sigdecode_string, sigencode_strings_canonize

from ..runtime.errors import (
    InvalidPrivateKeyError, InvalidPublicKeyError, MalformedSignatureError, SigningError
)

PRIVATE_KEY_LENGTH = 32
COMPONENT_LENGTH = 32
SIGNATURE_LENGTH = 2 * COMPONENT_LENGTH


def der_encode_public_key(public_key: bytes) -> bytes:
    """
    DER-encode a SEC1 secp256k1 public key as SubjectPublicKeyInfo.

    Args:
        public_key: 33-byte compressed or 65-byte uncompressed point

    Returns:
        88-byte DER document with the uncompressed point

    Raises:
        InvalidPublicKeyError: If the bytes are not a point on the curve
    """
    try:
        key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), bytes(public_key))
    except (TypeError, ValueError) as e:
        raise InvalidPublicKeyError(f"Invalid secp256k1 public key: {e}", cause=e)
    return key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def encode_rs(r: bytes, s: bytes) -> bytes:
    """
    Encode signature components as fixed-length ``r || s``.

    Each component is reduced to its minimal big-endian form and left-padded
    with zeroes to 32 bytes.

    Args:
        r: Big-endian r component
        s: Big-endian s component

    Returns:
        64-byte signature

    Raises:
        MalformedSignatureError: If a component exceeds 32 bytes
    """
    r = bytes(r).lstrip(b"\x00")
    s = bytes(s).lstrip(b"\x00")
    if len(r) > COMPONENT_LENGTH or len(s) > COMPONENT_LENGTH:
        raise MalformedSignatureError(
            "Cannot create secp256k1 signature: malformed signature.",
            details={"r_length": len(r), "s_length": len(s)},
        )
    return r.rjust(COMPONENT_LENGTH, b"\x00") + s.rjust(COMPONENT_LENGTH, b"\x00")


class Secp256k1PublicKey:
    """SECP256K1 public key for verification."""

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize public key.

        Args:
            public_key_bytes: SEC1 public key bytes (33 or 65 bytes)

        Raises:
            InvalidPublicKeyError: If the bytes are not a point on the curve
        """
        try:
            self._verifying_key = VerifyingKey.from_string(bytes(public_key_bytes), curve=SECP256k1)
        except (MalformedPointError, ValueError) as e:
            raise InvalidPublicKeyError(f"Invalid secp256k1 public key: {e}", cause=e)

    def to_bytes(self, compressed: bool = False) -> bytes:
        """SEC1 encoding of the point."""
        return self._verifying_key.to_string("compressed" if compressed else "uncompressed")

    def der_encoded(self) -> bytes:
        """SubjectPublicKeyInfo DER encoding."""
        return der_encode_public_key(self.to_bytes())

    def verify_digest(self, signature: bytes, digest: bytes) -> bool:
        """
        Verify a 64-byte ``r || s`` signature over a 32-byte digest.

        Args:
            signature: Fixed-length signature
            digest: Digest that was signed

        Returns:
            True if signature is valid
        """
        try:
            return self._verifying_key.verify_digest(signature, digest, sigdecode=sigdecode_string)
        except (BadSignatureError, AssertionError, ValueError):
            return False

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Verify a signature over SHA-256(message)."""
        return self.verify_digest(signature, hashlib.sha256(message).digest())

    def __eq__(self, other) -> bool:
        if isinstance(other, Secp256k1PublicKey):
            return self.to_bytes() == other.to_bytes()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"Secp256k1PublicKey({self.to_bytes(compressed=True).hex()})"


class Secp256k1PrivateKey:
    """
    SECP256K1 private key.

    The secret scalar is held only by the underlying ``ecdsa`` signing key
    and is never included in string representations.
    """

    def __init__(self, private_key_bytes: bytes):
        """
        Initialize private key.

        Args:
            private_key_bytes: 32-byte big-endian secret scalar

        Raises:
            InvalidPrivateKeyError: If the bytes are not a valid scalar
        """
        if not isinstance(private_key_bytes, (bytes, bytearray)):
            raise InvalidPrivateKeyError("Private key must be bytes")
        if len(private_key_bytes) != PRIVATE_KEY_LENGTH:
            raise InvalidPrivateKeyError(
                f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(private_key_bytes)}"
            )
        try:
            self._signing_key = SigningKey.from_string(bytes(private_key_bytes), curve=SECP256k1)
        except (MalformedPointError, ValueError) as e:
            raise InvalidPrivateKeyError("Private key is not a valid secp256k1 scalar", cause=e)
        self._public_key = Secp256k1PublicKey(
            self._signing_key.get_verifying_key().to_string("uncompressed")
        )

    @classmethod
    def from_hex(cls, private_key_hex: str) -> Secp256k1PrivateKey:
        """Create a private key from a hex string."""
        try:
            private_key_bytes = bytes.fromhex(private_key_hex)
        except ValueError as e:
            raise InvalidPrivateKeyError("Private key is not valid hex", cause=e)
        return cls(private_key_bytes)

    def public_key(self) -> Secp256k1PublicKey:
        return self._public_key

    def sign_digest(self, digest: bytes) -> Tuple[bytes, bytes]:
        """
        Deterministically sign a 32-byte digest.

        Args:
            digest: SHA-256 digest to sign

        Returns:
            Tuple of big-endian (r, s) with s in the lower half of the order

        Raises:
            SigningError: If the primitive fails
        """
        if len(digest) != 32:
            raise SigningError(f"Digest must be 32 bytes, got {len(digest)}")
        try:
            return self._signing_key.sign_digest_deterministic(
                digest,
                hashfunc=hashlib.sha256,
                sigencode=sigencode_strings_canonize,
            )
        except (BadDigestError, RSZeroError, ValueError) as e:
            raise SigningError(f"secp256k1 signing failed: {e}", cause=e)

    def sign(self, message: bytes) -> bytes:
        """
        Sign SHA-256(message) and return the 64-byte ``r || s`` signature.

        Args:
            message: Message to sign

        Returns:
            Fixed-length signature

        Raises:
            SigningError: If the primitive fails
            MalformedSignatureError: If a component exceeds 32 bytes
        """
        r, s = self.sign_digest(hashlib.sha256(message).digest())
        return encode_rs(r, s)

    def __repr__(self) -> str:
        return f"Secp256k1PrivateKey(public={self._public_key.to_bytes(compressed=True).hex()[:16]}...)"


__all__ = [
    "Secp256k1PrivateKey",
    "Secp256k1PublicKey",
    "der_encode_public_key",
    "encode_rs",
    "PRIVATE_KEY_LENGTH",
    "SIGNATURE_LENGTH",
]
