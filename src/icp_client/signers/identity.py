"""
Secp256k1 identity for signing requests.

An identity owns a private key and derives the sender principal from the DER
encoding of its public key. Signatures are taken over the domain-separated
request id, never the bare id.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from ..codec.request_id import RequestId, make_signature_payload
from ..crypto.secp256k1 import Secp256k1PrivateKey, Secp256k1PublicKey
from ..runtime.errors import IcpError, SigningError
from ..runtime.principal import Principal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Signature:
    """DER public key and 64-byte signature attached to an envelope."""
    public_key: bytes
    signature: bytes


class Identity:
    """
    Self-authenticating identity backed by a secp256k1 key.

    The DER public key and sender principal are computed once on
    construction.
    """

    def __init__(self, private_key: Secp256k1PrivateKey):
        """
        Initialize identity.

        Args:
            private_key: Signing key
        """
        self._private_key = private_key
        self._der_public_key = private_key.public_key().der_encoded()
        self._sender = Principal.self_authenticating(self._der_public_key)

    @classmethod
    def from_bytes(cls, private_key_bytes: bytes) -> Identity:
        return cls(Secp256k1PrivateKey(private_key_bytes))

    @property
    def public_key(self) -> Secp256k1PublicKey:
        return self._private_key.public_key()

    @property
    def der_public_key(self) -> bytes:
        return self._der_public_key

    def sender(self) -> Principal:
        """Principal of this identity."""
        return self._sender

    def sign(self, request_id: RequestId) -> Signature:
        """
        Sign a request id.

        Args:
            request_id: Request id of the envelope content

        Returns:
            Signature carrying the DER public key

        Raises:
            SigningError: If the signature primitive fails
        """
        try:
            signature = self._private_key.sign(make_signature_payload(request_id))
        except SigningError:
            raise
        except IcpError as e:
            raise SigningError(f"Failed to sign request {request_id}: {e.message}", cause=e)
        logger.debug(f"Signed request {request_id} as {self._sender}")
        return Signature(public_key=self._der_public_key, signature=signature)

    def __repr__(self) -> str:
        return f"Identity({self._sender})"


__all__ = [
    "Identity",
    "Signature",
]
