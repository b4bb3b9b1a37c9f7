from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from pyheadlines.utils.types import FilterSpec, HeadlineId

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Cursor-based page request.

    ``cursor`` means "start strictly after the record with this id", in
    whatever stable order the source maintains.
    """

    limit: int | None = None
    cursor: HeadlineId | None = None
    filter: FilterSpec = field(default_factory=FilterSpec)

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be >= 1")

    def next(self, page: Page[Any]) -> PageRequest:
        """Return the request for the page following ``page``.

        An empty page has no cursor of its own; the request keeps the current
        cursor so paging past the end stays at the end.
        """
        cursor = self.cursor if page.cursor is None else page.cursor
        return PageRequest(limit=self.limit, cursor=cursor, filter=self.filter)


@dataclass(frozen=True)
class Page(Generic[T]):
    """Cursor-based pagination result.

    ``has_more`` is a heuristic: a page filled up to ``limit`` is taken to
    mean more records may follow. Sources expose no total count, so a page
    that happens to hold exactly the last ``limit`` records still reports
    ``has_more=True``. Without a limit it is always ``False``.
    """

    items: list[T]
    cursor: HeadlineId | None
    has_more: bool

    @classmethod
    def from_items(cls, items: Sequence[T], limit: int | None) -> Page[T]:
        items = list(items)
        return cls(
            items=items,
            cursor=items[-1].id if items else None,
            has_more=limit is not None and len(items) == limit,
        )

    @classmethod
    def empty(cls) -> Page[T]:
        return cls(items=[], cursor=None, has_more=False)
