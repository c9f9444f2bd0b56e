"""
Content store client for the IPFS HTTP API.

Uses the RPC endpoints of a local or remote IPFS daemon:

    POST /api/v0/cat?arg=<cid>    -> raw bytes
    POST /api/v0/add  (multipart) -> {"Hash": "<cid>", ...}
"""

from __future__ import annotations

import logging

import httpx

from ledger_mirror.errors import ContentUnavailable

logger = logging.getLogger(__name__)

IPFS_API_URL = "http://127.0.0.1:5001/api/v0"
"""Default IPFS HTTP API endpoint."""

DEFAULT_TIMEOUT = 60.0
"""HTTP request timeout in seconds. The sync loop applies its own shorter bound."""


class IpfsError(Exception):
    """Raised when publishing to IPFS fails."""


class IpfsHttpStore:
    """
    ContentStore backed by an IPFS daemon's HTTP API.

    The HTTP client is created lazily with connection pooling and reused.
    Call `close` when done.
    """

    def __init__(
        self,
        api_url: str = IPFS_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            api_url: IPFS HTTP API URL (including ``/api/v0``).
            timeout: Per-request timeout in seconds.
            transport: Optional transport override (e.g. `httpx.MockTransport`).
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                transport=self._transport,
            )
        return self._client

    async def cat(self, content_id: str) -> bytes:
        """
        Retrieve content bytes by CID.

        Raises:
            ContentUnavailable: On network errors or a non-2xx response.
        """
        try:
            response = await self._get_client().post(
                f"{self.api_url}/cat",
                params={"arg": content_id},
            )
            response.raise_for_status()
        except httpx.RequestError as exc:
            raise ContentUnavailable(content_id, f"network error: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise ContentUnavailable(
                content_id,
                f"HTTP {exc.response.status_code}: {exc.response.text[:200]}",
            ) from exc

        logger.debug("Fetched from IPFS: %s (%d bytes)", content_id, len(response.content))
        return response.content

    async def add(self, data: bytes) -> str:
        """
        Add bytes to IPFS and return their CID.

        Raises:
            IpfsError: If the daemon rejects the upload or is unreachable.
        """
        try:
            response = await self._get_client().post(
                f"{self.api_url}/add",
                files={"file": ("data", data)},
                params={"quiet": "true", "pin": "true"},
            )
            response.raise_for_status()
            cid = response.json()["Hash"]
        except httpx.HTTPError as exc:
            raise IpfsError(f"IPFS add failed: {exc}") from exc
        except (KeyError, ValueError) as exc:
            raise IpfsError(f"Unexpected IPFS add response: {exc}") from exc

        logger.debug("Added to IPFS: %s (%d bytes)", cid, len(data))
        return cid

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
