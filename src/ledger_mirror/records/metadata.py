"""
File metadata records published to the content store.

Each ledger entry points at one of these records. Records are protobuf
messages with the following schema::

    message FileMetadata {
        string title       = 1;
        string description = 2;
        string category    = 3;
        string mimeType    = 4;
        uint64 sizeBytes   = 5;
        string uri         = 6;
    }

Wire format per field::

    [tag varint][value]

    tag = (field_number << 3) | wire_type

    wire_type 0 = varint               (sizeBytes)
    wire_type 2 = length-delimited     (all strings)

Encoding is deterministic: fields in tag order, proto3 defaults (empty string,
zero) omitted. Decoding follows protobuf rules: missing fields take their
default, the last occurrence of a repeated scalar wins, unknown fields with a
known wire type are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from ledger_mirror.errors import DecodeError
from ledger_mirror.varint import VarintError, decode_varint, encode_varint


class WireType(IntEnum):
    """Protobuf wire types."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5


_FIXED_WIDTHS: Final[dict[WireType, int]] = {WireType.FIXED64: 8, WireType.FIXED32: 4}
"""Payload width of the fixed-size wire types, used when skipping unknown fields."""

_STRING_FIELDS: Final[dict[int, str]] = {
    1: "title",
    2: "description",
    3: "category",
    4: "mime_type",
    6: "uri",
}
"""Field number to attribute name for the string fields."""

_SIZE_BYTES_FIELD: Final[int] = 5
"""Field number of sizeBytes, the only varint field."""


def _tag(field_number: int, wire_type: WireType) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Decoded metadata record describing one published file."""

    title: str = ""
    description: str = ""
    category: str = ""
    mime_type: str = ""
    size_bytes: int = 0
    uri: str = ""

    def encode(self) -> bytes:
        """
        Encode as protobuf wire format.

        Returns:
            Protobuf-encoded FileMetadata message bytes.
        """
        out = bytearray()
        for field_number in sorted((*_STRING_FIELDS, _SIZE_BYTES_FIELD)):
            if field_number == _SIZE_BYTES_FIELD:
                if self.size_bytes:
                    out += _tag(field_number, WireType.VARINT) + encode_varint(self.size_bytes)
                continue

            value = getattr(self, _STRING_FIELDS[field_number]).encode("utf-8")
            if value:
                out += _tag(field_number, WireType.LENGTH_DELIMITED)
                out += encode_varint(len(value)) + value

        return bytes(out)

    @classmethod
    def decode(cls, data: bytes, *, content_id: str = "") -> FileMetadata:
        """
        Decode a protobuf-encoded FileMetadata message.

        Args:
            data: Message bytes.
            content_id: Identifier of the payload, used in error reports.

        Returns:
            The decoded record.

        Raises:
            DecodeError: If the bytes are not a well-formed FileMetadata message.
        """
        fields: dict[str, str | int] = {}
        pos = 0

        while pos < len(data):
            field_start = pos
            try:
                key, consumed = decode_varint(data, pos)
            except VarintError as exc:
                raise DecodeError(content_id, f"bad field tag: {exc}", offset=pos) from exc
            pos += consumed

            field_number, wire_type = key >> 3, key & 0x07
            if field_number == 0:
                raise DecodeError(content_id, "field number 0 is reserved", offset=field_start)

            if wire_type == WireType.VARINT:
                try:
                    value, consumed = decode_varint(data, pos)
                except VarintError as exc:
                    raise DecodeError(content_id, f"bad varint: {exc}", offset=pos) from exc
                pos += consumed
                if field_number == _SIZE_BYTES_FIELD:
                    fields["size_bytes"] = value
                elif field_number in _STRING_FIELDS:
                    raise DecodeError(
                        content_id,
                        f"field {field_number} must be length-delimited",
                        offset=field_start,
                    )

            elif wire_type == WireType.LENGTH_DELIMITED:
                try:
                    length, consumed = decode_varint(data, pos)
                except VarintError as exc:
                    raise DecodeError(content_id, f"bad length: {exc}", offset=pos) from exc
                pos += consumed
                if pos + length > len(data):
                    raise DecodeError(
                        content_id,
                        f"field {field_number} needs {length} bytes, "
                        f"{len(data) - pos} remain",
                        offset=pos,
                    )
                raw = data[pos : pos + length]
                pos += length

                if field_number in _STRING_FIELDS:
                    try:
                        fields[_STRING_FIELDS[field_number]] = raw.decode("utf-8")
                    except UnicodeDecodeError as exc:
                        raise DecodeError(
                            content_id, f"field {field_number} is not UTF-8", offset=field_start
                        ) from exc
                elif field_number == _SIZE_BYTES_FIELD:
                    raise DecodeError(
                        content_id, "sizeBytes must be a varint", offset=field_start
                    )

            elif wire_type in _FIXED_WIDTHS:
                width = _FIXED_WIDTHS[WireType(wire_type)]
                if pos + width > len(data):
                    raise DecodeError(content_id, "truncated fixed-width field", offset=pos)
                if field_number in _STRING_FIELDS or field_number == _SIZE_BYTES_FIELD:
                    raise DecodeError(
                        content_id,
                        f"field {field_number} has wire type {wire_type}",
                        offset=field_start,
                    )
                pos += width

            else:
                raise DecodeError(
                    content_id, f"unsupported wire type {wire_type}", offset=field_start
                )

        return cls(**fields)  # type: ignore[arg-type]


def decode_record(payload: bytes, content_id: str = "") -> FileMetadata:
    """
    Deserialize a fetched payload into a metadata record.

    Args:
        payload: Raw bytes retrieved from the content store.
        content_id: Identifier of the payload, used in error reports.

    Raises:
        DecodeError: If the payload does not match the schema.
    """
    return FileMetadata.decode(bytes(payload), content_id=content_id)
