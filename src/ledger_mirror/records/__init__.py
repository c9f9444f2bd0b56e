"""
Metadata records and their cache representation.

Payloads fetched from the content store are protobuf `FileMetadata` messages.
The decoder turns them into `FileMetadata` values; `Inode` is the shape the
local cache stores and serves.
"""

from .inode import Inode
from .metadata import FileMetadata, decode_record

__all__ = [
    "FileMetadata",
    "Inode",
    "decode_record",
]
