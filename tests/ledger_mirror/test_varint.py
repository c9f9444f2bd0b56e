"""Tests for LEB128 varint encoding."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ledger_mirror.varint import VarintError, decode_varint, encode_varint


class TestEncodeVarint:
    """Tests for varint encoding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, b"\x00"),
            (1, b"\x01"),
            (127, b"\x7f"),
            (128, b"\x80\x01"),
            (300, b"\xac\x02"),
            (16384, b"\x80\x80\x01"),
        ],
    )
    def test_known_encodings(self, value: int, expected: bytes) -> None:
        """Small values encode to their documented byte sequences."""
        assert encode_varint(value) == expected

    def test_max_value_is_ten_bytes(self) -> None:
        """The largest 64-bit value needs ten bytes."""
        assert len(encode_varint((1 << 64) - 1)) == 10

    def test_negative_rejected(self) -> None:
        """Negative values cannot be encoded."""
        with pytest.raises(ValueError, match="non-negative"):
            encode_varint(-1)

    def test_oversized_rejected(self) -> None:
        """Values past 64 bits cannot be encoded."""
        with pytest.raises(ValueError, match="64 bits"):
            encode_varint(1 << 64)


class TestDecodeVarint:
    """Tests for varint decoding."""

    def test_decode_reports_consumed_bytes(self) -> None:
        """Trailing bytes after the varint are left alone."""
        assert decode_varint(b"\xac\x02\xff") == (300, 2)

    def test_decode_at_offset(self) -> None:
        """Decoding can start in the middle of a buffer."""
        assert decode_varint(b"\x00\x00\x96\x01", offset=2) == (150, 2)

    def test_empty_input_is_truncated(self) -> None:
        """An empty buffer holds no varint."""
        with pytest.raises(VarintError, match="Truncated"):
            decode_varint(b"")

    def test_dangling_continuation_is_truncated(self) -> None:
        """A final byte with the continuation bit set is truncated."""
        with pytest.raises(VarintError, match="Truncated"):
            decode_varint(b"\x80\x80")

    def test_too_long(self) -> None:
        """More than ten continuation bytes is rejected."""
        with pytest.raises(VarintError, match="too long"):
            decode_varint(b"\xff" * 11)

    def test_past_64_bits_rejected(self) -> None:
        """A ten-byte encoding whose value overflows 64 bits is rejected."""
        with pytest.raises(VarintError, match="exceeds 64 bits"):
            decode_varint(b"\xff" * 9 + b"\x02")

    @given(st.integers(min_value=0, max_value=(1 << 64) - 1))
    def test_decode_inverts_encode(self, value: int) -> None:
        """Every encodable value decodes back to itself."""
        encoded = encode_varint(value)
        assert decode_varint(encoded) == (value, len(encoded))
