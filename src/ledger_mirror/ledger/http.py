"""
Ledger client for a JSON-over-HTTP ledger gateway.

The gateway exposes three endpoints relative to its base URL::

    GET  /entries/count                  -> {"count": 320}
    GET  /entries?count=100&offset=200   -> {"entries": [{"contentId": "0x..",
                                                          "creator": "0x..",
                                                          "timestamp": 1700000000}, ...]}
    POST /entries  {"contentId": "0x.."} -> 2xx once the append is final

Any transport or status failure is reported as `LedgerUnreachable`. The sync
engine treats that as fatal to the run.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ledger_mirror.errors import LedgerUnreachable

from .interface import LedgerEntry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
"""HTTP request timeout in seconds."""

COUNT_ENDPOINT = "/entries/count"
ENTRIES_ENDPOINT = "/entries"


class HttpLedger:
    """
    LedgerReader and LedgerWriter over HTTP.

    The underlying client is created lazily and reused across calls.
    Call `close` when done.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Root URL of the ledger gateway.
            timeout: Per-request timeout in seconds.
            transport: Optional transport override (e.g. `httpx.MockTransport`).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._get_client().request(method, url, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else None
        except httpx.RequestError as exc:
            raise LedgerUnreachable(operation, f"network error: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise LedgerUnreachable(
                operation,
                f"HTTP {exc.response.status_code}: {exc.response.text[:200]}",
            ) from exc
        except ValueError as exc:
            raise LedgerUnreachable(operation, f"invalid JSON response: {exc}") from exc

    async def entry_count(self) -> int:
        """Return the current number of ledger entries."""
        body = await self._request("entry_count", "GET", COUNT_ENDPOINT)
        try:
            return int(body["count"])
        except (TypeError, KeyError, ValueError) as exc:
            raise LedgerUnreachable("entry_count", f"unexpected response: {body!r}") from exc

    async def get_range(self, count: int, offset: int) -> list[LedgerEntry]:
        """Return ``count`` entries starting at ``offset``."""
        body = await self._request(
            "get_range",
            "GET",
            ENTRIES_ENDPOINT,
            params={"count": count, "offset": offset},
        )
        try:
            entries = [LedgerEntry.model_validate(item) for item in body["entries"]]
        except (TypeError, KeyError, ValidationError) as exc:
            raise LedgerUnreachable("get_range", f"unexpected response: {exc}") from exc

        logger.debug("Fetched %d ledger entries at offset %d", len(entries), offset)
        return entries

    async def append(self, content_id: str) -> None:
        """Append an on-chain identifier and wait for the gateway to confirm."""
        await self._request("append", "POST", ENTRIES_ENDPOINT, json={"contentId": content_id})
        logger.info("Appended %s to ledger", content_id)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
