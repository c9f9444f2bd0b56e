"""
Publishing new listings.

A listing is published in two steps: the encoded metadata record goes to the
content store, then its identifier is appended to the ledger in on-chain form.
Sync runs pick the entry up from there like any other.
"""

from __future__ import annotations

import logging

from .address import to_chain_encoded
from .content import ContentStore
from .ledger import LedgerWriter
from .records import FileMetadata

logger = logging.getLogger(__name__)


class Publisher:
    """Uploads files and metadata records, and registers records on the ledger."""

    def __init__(self, content_store: ContentStore, ledger: LedgerWriter) -> None:
        self.content_store = content_store
        self.ledger = ledger

    async def add_file(self, data: bytes) -> str:
        """Upload raw file contents and return their content identifier."""
        return await self.content_store.add(data)

    async def get_file(self, content_id: str) -> bytes:
        """Download raw file contents by content identifier."""
        return await self.content_store.cat(content_id)

    async def publish(self, metadata: FileMetadata) -> str:
        """
        Publish a metadata record and append it to the ledger.

        Args:
            metadata: The record to publish. Its ``uri`` usually points at a
                file uploaded with `add_file`.

        Returns:
            Content identifier of the published record.

        Raises:
            MalformedIdentifier: If the content store returned a non-sha2-256 id.
        """
        content_id = await self.content_store.add(metadata.encode())
        chain_id = to_chain_encoded(content_id)

        await self.ledger.append(chain_id)

        logger.info("Published %r as %s", metadata.title, content_id)
        return content_id
