"""
Unsigned LEB128 varint encoding and decoding.

Varints encode integers in 7-bit groups, low-order group first. The MSB of each
byte is a continuation flag: 1 means more bytes follow, 0 marks the last byte.

Example: 300 = 0b1_0010_1100

    Byte 0: 0101100 | 0x80 = 0xAC
    Byte 1: 0000010        = 0x02

Protobuf uses varints for field tags, lengths and integer fields. The metadata
records published to the content store are protobuf messages, so the record
decoder is built on these two helpers.

Maximum value: 2^64 - 1 (10 bytes).

References:
    https://protobuf.dev/programming-guides/encoding/#varints
"""

from __future__ import annotations


class VarintError(Exception):
    """Raised when varint encoding or decoding fails."""


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned integer as LEB128 varint.

    Args:
        value: Non-negative integer to encode. Maximum: 2^64 - 1.

    Returns:
        Varint-encoded bytes (1 to 10 bytes).

    Raises:
        ValueError: If value is negative or does not fit in 64 bits.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value >= 1 << 64:
        raise ValueError("Varint exceeds 64 bits")

    result = bytearray()

    # Emit low 7 bits with the continuation flag until the rest fits in 7 bits.
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7

    result.append(value)

    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint from bytes at the given offset.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data. Defaults to 0.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        VarintError: If the input is truncated or does not fit in 64 bits.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise VarintError("Truncated varint")

        byte = data[pos]
        pos += 1

        result |= (byte & 0x7F) << shift
        shift += 7

        if not (byte & 0x80):
            break

        # A 64-bit value needs at most 10 bytes.
        if shift >= 70:
            raise VarintError("Varint too long")

    if result >= 1 << 64:
        raise VarintError("Varint exceeds 64 bits")

    return result, pos - offset
