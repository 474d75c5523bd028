"""
Binary Writer

Accumulates bytes for the wire formats used by the client: LEB128 varints
for the request-id hasher and Candid, and fixed-width little-endian
integers for Candid primitives.
"""

import struct
from typing import List


class BinaryWriter:
    """
    Binary writer over an in-memory byte buffer.

    Every write appends to the buffer; ``to_bytes`` returns an immutable copy.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def __len__(self) -> int:
        return len(self._bb)

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Args:
            v: Integer value to write (0-255)
        """
        self._bb.append(v & 0xFF)

    def u64le(self, v: int) -> None:
        """
        Write unsigned 64-bit integer in little-endian format.

        Args:
            v: Integer value to write as 64-bit little-endian

        Raises:
            ValueError: If the value does not fit in 64 bits
        """
        if v < 0 or v > 0xFFFFFFFFFFFFFFFF:
            raise ValueError(f"Value does not fit in u64: {v}")
        self._bb.extend(struct.pack('<Q', v))

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.extend(v)

    def len_prefixed_bytes(self, v: bytes) -> None:
        """
        Write bytes with length prefix using uvarint.

        Args:
            v: Bytes to write with length prefix
        """
        self.uvarint(len(v))
        self.bytes(v)

    def uvarint(self, v: int) -> None:
        """
        Write unsigned varint in ULEB128 format.

        Unlike a fixed 64-bit varint this accepts arbitrarily large values,
        which Candid ``nat`` requires.

        Args:
            v: Non-negative integer value to encode

        Raises:
            ValueError: If the value is negative
        """
        if v < 0:
            raise ValueError(f"Cannot encode negative value as uvarint: {v}")
        x = v
        while x >= 0x80:
            self.u8((x & 0x7F) | 0x80)
            x >>= 7
        self.u8(x)

    def svarint(self, v: int) -> None:
        """
        Write signed varint in SLEB128 format.

        Args:
            v: Integer value to encode
        """
        x = v
        while True:
            byte = x & 0x7F
            x >>= 7
            done = (x == 0 and not byte & 0x40) or (x == -1 and byte & 0x40)
            if done:
                self.u8(byte)
                return
            self.u8(byte | 0x80)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)


def encode_uvarint(v: int) -> bytes:
    """ULEB128 encoding of a non-negative integer."""
    writer = BinaryWriter()
    writer.uvarint(v)
    return writer.to_bytes()
