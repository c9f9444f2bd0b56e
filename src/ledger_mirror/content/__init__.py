"""
Content store access.

`ContentFetcher` bounds every retrieval with a timeout. `IpfsHttpStore` talks to
an IPFS daemon over its HTTP API.
"""

from .fetcher import ContentFetcher, ContentStore
from .ipfs import IpfsError, IpfsHttpStore

__all__ = [
    "ContentFetcher",
    "ContentStore",
    "IpfsError",
    "IpfsHttpStore",
]
