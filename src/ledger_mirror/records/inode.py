"""Cache record shape for mirrored ledger entries."""

from __future__ import annotations

from pydantic import Field

from ledger_mirror.types import StrictBaseModel

from .metadata import FileMetadata


class Inode(StrictBaseModel):
    """
    One mirrored file listing, as stored in the local cache.

    Serializes with camelCase aliases (``createdAt``, ``mimeType``,
    ``sizeBytes``, ``dataUri``).
    """

    id: str
    """Content store identifier of the metadata record. Primary key."""

    title: str
    description: str
    category: str

    created_at: int
    """Local ingestion time in milliseconds since the epoch, not the ledger timestamp."""

    mime_type: str
    size_bytes: int = Field(ge=0, lt=1 << 64)
    """Declared file size. A protobuf uint64."""

    author: str
    """Ledger address of the entry's creator."""

    data_uri: str
    """Where the file contents live (the record's ``uri`` field)."""

    @classmethod
    def from_metadata(
        cls,
        content_id: str,
        metadata: FileMetadata,
        *,
        author: str,
        created_at: int,
    ) -> Inode:
        """Map a decoded metadata record into the cache shape."""
        return cls(
            id=content_id,
            title=metadata.title,
            description=metadata.description,
            category=metadata.category,
            created_at=created_at,
            mime_type=metadata.mime_type,
            size_bytes=metadata.size_bytes,
            author=author,
            data_uri=metadata.uri,
        )
