from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Iterable

from pyheadlines.core.headline import Headline
from pyheadlines.core.polling import PollingStream
from pyheadlines.core.source import HeadlineSource
from pyheadlines.lifecycle.observability import track_operation
from pyheadlines.utils.exceptions import (
    CreateFailure,
    DeleteFailure,
    FetchFailure,
    HeadlinesError,
    NotFoundFailure,
    SearchFailure,
    UpdateFailure,
)
from pyheadlines.utils.pagination import Page, PageRequest
from pyheadlines.utils.types import FilterSpec, HeadlineId

logger = logging.getLogger("pyheadlines")

DEFAULT_POLL_INTERVAL = timedelta(minutes=5)


class LookupKind(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class Lookup:
    """Tagged outcome of a lookup by id."""

    kind: LookupKind
    record: Headline | None = None
    message: str | None = None

    @property
    def found(self) -> bool:
        return self.kind is LookupKind.FOUND


@asynccontextmanager
async def _failure_boundary(
    failure: type[HeadlinesError],
    *passthrough: type[HeadlinesError],
):
    """Propagate typed failures unchanged; wrap anything else in ``failure``."""
    try:
        yield
    except (failure, *passthrough):
        raise
    except Exception as exc:
        logger.debug("Wrapping %s from source as %s", type(exc).__name__, failure.__name__)
        raise failure(str(exc)) from exc


class HeadlinesRepository:
    """Paginated, filtered access to headlines held by a HeadlineSource.

    Every call goes to the source; nothing is cached. Filters are handed to
    the source unchanged and never re-evaluated locally.
    """

    def __init__(
        self,
        source: HeadlineSource,
        *,
        poll_interval: timedelta | float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._source = source
        self._source_name = type(source).__name__
        self.poll_interval = poll_interval

    @property
    def source(self) -> HeadlineSource:
        return self._source

    # --- Reads ---

    async def get_headlines(
        self,
        request: PageRequest | None = None,
        *,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
        categories: Iterable[str] | None = None,
        sources: Iterable[str] | None = None,
        event_countries: Iterable[str] | None = None,
    ) -> Page[Headline]:
        """Fetch one page of headlines.

        Either pass a PageRequest or build one from the keyword arguments.

        Raises:
            FetchFailure: If the source fails for any reason
        """
        request = _resolve_request(
            request,
            limit=limit,
            cursor=cursor,
            categories=categories,
            sources=sources,
            event_countries=event_countries,
        )
        filter_kwargs = request.filter.as_kwargs()
        traced_filter = {name: sorted(refs) for name, refs in filter_kwargs.items()}
        async with track_operation("list", self._source_name, filter=traced_filter) as ctx:
            async with _failure_boundary(FetchFailure):
                items = await self._source.list(
                    limit=request.limit,
                    cursor=request.cursor,
                    **filter_kwargs,
                )
            page = Page.from_items(items, request.limit)
            _record_page(ctx, page)
        return page

    async def get_headline(self, id: HeadlineId) -> Headline | None:
        """Fetch a headline by id, or None when the source does not have it.

        Raises:
            FetchFailure: If the source fails for any other reason
        """
        try:
            return await self.require_headline(id)
        except NotFoundFailure:
            return None

    async def require_headline(self, id: HeadlineId) -> Headline:
        """Fetch a headline by id, treating absence as an error.

        Raises:
            NotFoundFailure: If the source does not have the headline
            FetchFailure: If the source fails for any other reason
        """
        async with track_operation("get", self._source_name, filter={"id": id}) as ctx:
            async with _failure_boundary(FetchFailure, NotFoundFailure):
                headline = await self._source.get(id)
            ctx["result_count"] = 1
        return headline

    async def lookup_headline(self, id: HeadlineId) -> Lookup:
        """Fetch a headline by id and report the outcome as a tagged Lookup."""
        try:
            headline = await self.require_headline(id)
        except NotFoundFailure as exc:
            return Lookup(LookupKind.NOT_FOUND, message=exc.message)
        except FetchFailure as exc:
            return Lookup(LookupKind.FAILED, message=exc.message)
        return Lookup(LookupKind.FOUND, record=headline)

    async def search_headlines(
        self,
        query: str,
        *,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
    ) -> Page[Headline]:
        """Search headlines; matching is up to the source.

        Raises:
            SearchFailure: If the source fails for any reason
        """
        if limit is not None and limit < 1:
            raise ValueError("limit must be >= 1")
        async with track_operation("search", self._source_name, filter={"query": query}) as ctx:
            async with _failure_boundary(SearchFailure):
                items = await self._source.search(query, limit=limit, cursor=cursor)
            page = Page.from_items(items, limit)
            _record_page(ctx, page)
        return page

    # --- Writes ---

    async def create_headline(self, headline: Headline) -> Headline:
        """Create a headline and return what the source stored."""
        async with track_operation("create", self._source_name):
            async with _failure_boundary(CreateFailure):
                return await self._source.create(headline)

    async def update_headline(self, headline: Headline) -> Headline:
        """Replace a headline and return the source's copy as-is."""
        async with track_operation("update", self._source_name, filter={"id": headline.id}):
            async with _failure_boundary(UpdateFailure):
                return await self._source.update(headline)

    async def delete_headline(self, id: HeadlineId) -> None:
        async with track_operation("delete", self._source_name, filter={"id": id}):
            async with _failure_boundary(DeleteFailure):
                await self._source.delete(id)

    # --- Polling ---

    def poll_headlines(
        self,
        request: PageRequest | None = None,
        *,
        interval: timedelta | float | None = None,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
        categories: Iterable[str] | None = None,
        sources: Iterable[str] | None = None,
        event_countries: Iterable[str] | None = None,
    ) -> PollingStream[Headline]:
        """Return a stream that re-fetches the same page every ``interval``.

        Nothing is fetched until the stream is iterated. See PollingStream
        for scheduling, suppression and failure semantics.
        """
        request = _resolve_request(
            request,
            limit=limit,
            cursor=cursor,
            categories=categories,
            sources=sources,
            event_countries=event_countries,
        )
        return PollingStream(
            self.get_headlines,
            request,
            self.poll_interval if interval is None else interval,
        )


def _resolve_request(
    request: PageRequest | None,
    *,
    limit: int | None,
    cursor: HeadlineId | None,
    categories: Iterable[str] | None,
    sources: Iterable[str] | None,
    event_countries: Iterable[str] | None,
) -> PageRequest:
    keywords = (limit, cursor, categories, sources, event_countries)
    if request is not None:
        if any(value is not None for value in keywords):
            raise ValueError("Pass either a PageRequest or keyword arguments, not both")
        return request
    return PageRequest(
        limit=limit,
        cursor=cursor,
        filter=FilterSpec(
            categories=categories,
            sources=sources,
            event_countries=event_countries,
        ),
    )


def _record_page(ctx: dict, page: Page[Headline]) -> None:
    ctx["result_count"] = len(page.items)
    ctx["cursor"] = page.cursor
    ctx["has_more"] = page.has_more
