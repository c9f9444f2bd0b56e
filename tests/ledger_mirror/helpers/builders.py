"""Builders for ledger entries, payloads and cache records."""

from __future__ import annotations

import hashlib

from ledger_mirror.address import Multihash, MultihashCode
from ledger_mirror.records import FileMetadata, Inode

CREATOR = "0x1111111111111111111111111111111111111111"
"""Default creator address for test entries."""

NAMESPACE = "0xfeed"
"""Ledger address used as the sync namespace in tests."""


def make_chain_id(seed: int | str) -> str:
    """Deterministic on-chain identifier derived from a seed."""
    return "0x" + hashlib.sha256(str(seed).encode()).hexdigest()


def content_id_for(data: bytes) -> str:
    """Multihash string a sha2-256 content store assigns to ``data``."""
    return Multihash(code=MultihashCode.SHA2_256, digest=hashlib.sha256(data).digest()).to_base58()


def make_metadata(title: str = "Monthly Report", **overrides: object) -> FileMetadata:
    """Metadata record with sensible defaults."""
    fields: dict[str, object] = {
        "title": title,
        "description": f"{title} description",
        "category": "documents",
        "mime_type": "application/pdf",
        "size_bytes": 2048,
        "uri": f"ipfs://{hashlib.sha256(title.encode()).hexdigest()[:16]}",
    }
    fields.update(overrides)
    return FileMetadata(**fields)  # type: ignore[arg-type]


def make_inode(
    title: str = "Monthly Report",
    *,
    content_id: str | None = None,
    created_at: int = 1_700_000_000_000,
    author: str = CREATOR,
) -> Inode:
    """Cache record with sensible defaults."""
    metadata = make_metadata(title)
    return Inode.from_metadata(
        content_id or content_id_for(metadata.encode() + str(created_at).encode()),
        metadata,
        author=author,
        created_at=created_at,
    )
