"""
Conversion between on-ledger and content-store identifiers.

The ledger stores each content identifier as a fixed-width 32-byte word. The
content store addresses the same content by a base58 multihash string:

    multihash = [code][length][digest]

    code   = 0x12 (sha2-256)
    length = 0x20 (32 bytes)

Every identifier the ledger holds uses that same hash function and digest size,
so the 2-byte prefix carries no information on chain. The ledger keeps only the
digest, written as ``0x`` followed by 64 lowercase hex characters::

    Qm...  <-- base58 -->  12 20 <digest>  <-- strip prefix -->  0x<digest hex>

Both directions are pure and mutually inverse over valid inputs.

References:
    - https://github.com/multiformats/multihash
    - https://en.bitcoin.it/wiki/Base58Check_encoding
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from .errors import MalformedIdentifier

__all__ = [
    "Base58",
    "Multihash",
    "MultihashCode",
    "DIGEST_LENGTH",
    "CHAIN_PREFIX",
    "to_content_store_id",
    "to_chain_encoded",
]

DIGEST_LENGTH: Final[int] = 32
"""Byte length of a sha2-256 digest, the only digest size the ledger stores."""

CHAIN_PREFIX: Final[str] = "0x"
"""Marker prepended to the hex digest in the on-chain representation."""


class MultihashCode(IntEnum):
    """
    Multihash function codes.

    Only sha2-256 identifiers are written to the ledger.
    """

    SHA2_256 = 0x12
    """SHA-256 hash (32-byte output)."""


class Base58:
    """
    Base58 encoding/decoding (Bitcoin-style alphabet).

    The alphabet is: 123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz
    """

    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    """Base58 alphabet (Bitcoin style, excludes 0, O, I, l)."""

    @classmethod
    def encode(cls, data: bytes) -> str:
        """
        Encode bytes as Base58 string.

        Leading zero bytes become leading '1' characters.
        """
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []

        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend([cls.ALPHABET[0]] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode Base58 string to bytes.

        Leading '1' characters become leading zero bytes.

        Raises:
            ValueError: If string contains invalid characters.
        """
        leading_ones = len(s) - len(s.lstrip(cls.ALPHABET[0]))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise ValueError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        result = b"" if num == 0 else num.to_bytes((num.bit_length() + 7) // 8, "big")

        return b"\x00" * leading_ones + result


@dataclass(frozen=True, slots=True)
class Multihash:
    """
    A self-describing hash in multihash format.

    Format: [code][length][digest], with single-byte code and length since the
    ledger only deals in 32-byte sha2-256 digests.
    """

    code: MultihashCode
    """Hash function used."""

    digest: bytes
    """Hash output."""

    def encode(self) -> bytes:
        """Encode as multihash bytes."""
        return bytes([self.code, len(self.digest)]) + self.digest

    def to_base58(self) -> str:
        """Encode as the content store's textual identifier."""
        return Base58.encode(self.encode())

    @classmethod
    def from_base58(cls, value: str) -> Multihash:
        """
        Parse a base58 multihash string.

        Raises:
            MalformedIdentifier: On invalid base58, unknown prefix or bad length.
        """
        try:
            raw = Base58.decode(value)
        except ValueError as exc:
            raise MalformedIdentifier(value, str(exc)) from exc

        if len(raw) < 2:
            raise MalformedIdentifier(value, "multihash shorter than its prefix")

        code, length, digest = raw[0], raw[1], raw[2:]
        if code != MultihashCode.SHA2_256 or length != DIGEST_LENGTH:
            raise MalformedIdentifier(
                value, f"unexpected prefix 0x{code:02x}{length:02x}, want 0x1220"
            )
        if len(digest) != DIGEST_LENGTH:
            raise MalformedIdentifier(
                value, f"digest is {len(digest)} bytes, want {DIGEST_LENGTH}"
            )

        return cls(code=MultihashCode.SHA2_256, digest=digest)


def _chain_digest(chain_encoded: str | bytes) -> bytes:
    """Extract the raw digest from an on-chain identifier."""
    if isinstance(chain_encoded, bytes):
        digest = chain_encoded
    else:
        if not chain_encoded.startswith(CHAIN_PREFIX):
            raise MalformedIdentifier(chain_encoded, f"missing {CHAIN_PREFIX!r} marker")
        try:
            digest = bytes.fromhex(chain_encoded[len(CHAIN_PREFIX) :])
        except ValueError as exc:
            raise MalformedIdentifier(chain_encoded, "not a hex string") from exc

    if len(digest) != DIGEST_LENGTH:
        raise MalformedIdentifier(
            chain_encoded, f"expected {DIGEST_LENGTH} bytes, got {len(digest)}"
        )
    return digest


def to_content_store_id(chain_encoded: str | bytes) -> str:
    """
    Convert an on-chain identifier to the content store's multihash string.

    Args:
        chain_encoded: ``0x``-prefixed 64-char hex string, or the raw 32 bytes.

    Returns:
        Base58 multihash (``Qm...``).

    Raises:
        MalformedIdentifier: If the input is not a 32-byte identifier.
    """
    digest = _chain_digest(chain_encoded)
    return Multihash(code=MultihashCode.SHA2_256, digest=digest).to_base58()


def to_chain_encoded(multihash: str) -> str:
    """
    Convert a content store multihash string to its on-chain form.

    Args:
        multihash: Base58 multihash string.

    Returns:
        ``0x`` followed by the 64-char lowercase hex digest.

    Raises:
        MalformedIdentifier: On decode errors or an unexpected prefix.
    """
    return CHAIN_PREFIX + Multihash.from_base58(multihash).digest.hex()
