"""Paginated query results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Pageable(Generic[T]):
    """
    One page of an ordered result set.

    A page is the slice ``[offset, offset + limit)`` of the full match list.
    Consecutive pages concatenate to the same sequence as one larger page.
    """

    data: list[T] = field(default_factory=list)
    """Records on this page, in result order."""

    total: int = 0
    """Number of matches across all pages."""

    end: bool = True
    """Whether this page reaches the last match."""

    @classmethod
    def slice(cls, data: list[T], total: int, offset: int) -> Pageable[T]:
        """
        Build a page from its records and the full match count.

        Args:
            data: Records already restricted to the page window.
            total: Full match count.
            offset: Start of the page window.
        """
        return cls(data=data, total=total, end=offset + len(data) >= total)
