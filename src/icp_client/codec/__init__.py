"""
ICP Binary Codecs

Key components:
- writer.py: LEB128 varints and fixed-width integers
- hashes.py: SHA-256, SHA-224 and CRC-32 helpers
- request_id.py: representation-independent hashing of request contents
- protobuf.py: legacy ledger SendRequest
- candid.py: Candid arguments for ICRC-1 calls
"""

from .hashes import sha256_bytes, sha224_bytes, crc32_be
from .writer import BinaryWriter
from .request_id import RequestId, representation_independent_hash, make_signature_payload

__all__ = [
    "BinaryWriter",
    "RequestId",
    "representation_independent_hash",
    "make_signature_payload",
    "sha256_bytes",
    "sha224_bytes",
    "crc32_be",
]
