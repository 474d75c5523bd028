"""
Cryptographic primitives for the ICP client.

Provides secp256k1 signing and public key DER encoding.
"""

from .secp256k1 import Secp256k1PrivateKey, Secp256k1PublicKey, der_encode_public_key

__all__ = [
    "Secp256k1PrivateKey",
    "Secp256k1PublicKey",
    "der_encode_public_key",
]
