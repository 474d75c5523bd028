"""
Hash Functions

SHA-256, SHA-224 and CRC-32 helpers shared by the principal, address and
request-id code. All functions are pure byte-in/byte-out.
"""

import hashlib
import zlib


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def sha224_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-224 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-224 hash as bytes (28 bytes)
    """
    return hashlib.sha224(input_bytes).digest()


def crc32(input_bytes: bytes) -> int:
    """CRC-32 (IEEE) of input bytes as an unsigned integer."""
    return zlib.crc32(input_bytes) & 0xFFFFFFFF


def crc32_be(input_bytes: bytes) -> bytes:
    """
    CRC-32 checksum encoded as 4 big-endian bytes.

    Args:
        input_bytes: Input bytes to checksum

    Returns:
        4-byte big-endian checksum
    """
    return crc32(input_bytes).to_bytes(4, "big")
