from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from pyheadlines.utils.pagination import Page, PageRequest

logger = logging.getLogger("pyheadlines")

T = TypeVar("T")

PageFetch = Callable[[PageRequest], Awaitable[Page[T]]]


class StreamState(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    FETCHING = "fetching"
    FAILED = "failed"
    CANCELLED = "cancelled"


_TERMINAL = (StreamState.FAILED, StreamState.CANCELLED)


def _to_seconds(interval: timedelta | float) -> float:
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


class PollingStream(Generic[T]):
    """Async iterator that re-fetches one page request on a timer.

    - The first fetch runs as soon as the stream is iterated, without delay.
    - Scheduling is fixed-delay: each fetch starts ``interval`` after the
      previous one completed.
    - A page equal to the last emitted page is not emitted again; the stream
      just waits for the next tick.
    - The first fetch failure is raised to the consumer and ends the stream.
      Nothing is retried.
    - ``cancel()`` wakes a pending timer and ends the stream. A fetch already
      in flight completes, but its result is dropped and no tick follows.

    A stream is single-use: once cancelled or failed it stays that way.
    Fetches only happen while the consumer awaits the next page, so a
    consumer that stops iterating stops the polling.

    Usage:
        async with repository.poll_headlines(limit=20, interval=60) as stream:
            async for page in stream:
                render(page.items)
    """

    def __init__(
        self,
        fetch: PageFetch[T],
        request: PageRequest,
        interval: timedelta | float,
    ) -> None:
        seconds = _to_seconds(interval)
        if seconds < 0:
            raise ValueError("interval must be >= 0")
        self._fetch = fetch
        self._request = request
        self._interval = seconds
        self._state = StreamState.IDLE
        self._last_page: Page[T] | None = None
        self._cancel_event = asyncio.Event()
        self._ticks = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def request(self) -> PageRequest:
        return self._request

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def last_page(self) -> Page[T] | None:
        """The last page emitted to the consumer."""
        return self._last_page

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    # --- Cancellation ---

    def cancel(self) -> None:
        """Stop the stream. Safe to call more than once."""
        self._cancel_event.set()
        if self._state is not StreamState.FETCHING and self._state not in _TERMINAL:
            self._state = StreamState.CANCELLED

    async def aclose(self) -> None:
        self.cancel()

    async def __aenter__(self) -> PollingStream[T]:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.cancel()

    # --- Iteration ---

    def __aiter__(self) -> PollingStream[T]:
        return self

    async def __anext__(self) -> Page[T]:
        while True:
            if self._state in _TERMINAL:
                raise StopAsyncIteration

            if self._state is StreamState.SCHEDULED and await self._wait_for_tick():
                self._state = StreamState.CANCELLED
                raise StopAsyncIteration

            page = await self._run_tick()
            if page is None:
                continue
            return page

    async def _wait_for_tick(self) -> bool:
        """Sleep for one interval. Returns True when woken by cancel()."""
        try:
            await asyncio.wait_for(self._cancel_event.wait(), timeout=self._interval)
        except TimeoutError:
            return False
        except asyncio.CancelledError:
            self._state = StreamState.CANCELLED
            raise
        return True

    async def _run_tick(self) -> Page[T] | None:
        """Fetch once. Returns the page to emit, or None when suppressed."""
        self._state = StreamState.FETCHING
        self._ticks += 1
        tick = self._ticks
        try:
            page = await self._fetch(self._request)
        except asyncio.CancelledError:
            self._state = StreamState.CANCELLED
            raise
        except Exception as exc:
            if self.cancelled:
                self._state = StreamState.CANCELLED
                raise StopAsyncIteration from None
            self._state = StreamState.FAILED
            logger.warning("Polling stopped on tick %d: %s", tick, exc)
            raise

        if self.cancelled:
            logger.debug("Dropping page from tick %d fetched after cancel", tick)
            self._state = StreamState.CANCELLED
            raise StopAsyncIteration

        self._state = StreamState.SCHEDULED
        if page == self._last_page:
            logger.debug("Tick %d returned an unchanged page; not emitting", tick)
            return None

        logger.debug("Tick %d emitting page with %d items", tick, len(page.items))
        self._last_page = page
        return page
