from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated, Any, Generic, Optional, TypeVar

from fastapi import Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pyheadlines.core.connection import connect, disconnect
from pyheadlines.utils.exceptions import HeadlinesError, NotFoundFailure
from pyheadlines.utils.pagination import Page, PageRequest
from pyheadlines.utils.types import FilterSpec

T = TypeVar("T")

MAX_PAGE_SIZE = 100


def init_app(app: Any, uri: str, alias: str = "default", **client_kwargs: Any) -> Any:
    """Initialize a FastAPI app with a pyheadlines MongoDB connection.

    Sets up:
    - MongoDB connection/disconnection in app lifespan
    - Exception handlers for pyheadlines failures

    Args:
        app: FastAPI application instance
        uri: MongoDB connection URI
        alias: Connection alias for multi-connection support (default: "default")
    """
    original_lifespan = getattr(app, "router", app).lifespan_context

    @asynccontextmanager
    async def lifespan(a: Any):
        await connect(uri, alias=alias, **client_kwargs)
        try:
            if original_lifespan is not None:
                async with original_lifespan(a) as state:
                    yield state
            else:
                yield
        finally:
            await disconnect(alias)

    app.router.lifespan_context = lifespan
    register_exception_handlers(app)
    return app


def register_exception_handlers(app: Any) -> None:
    """Register pyheadlines exception handlers on a FastAPI app."""

    @app.exception_handler(NotFoundFailure)
    async def not_found_handler(request: Any, exc: NotFoundFailure):
        return JSONResponse(
            status_code=404,
            content={"detail": exc.message, "kind": type(exc).__name__},
        )

    @app.exception_handler(HeadlinesError)
    async def headlines_error_handler(request: Any, exc: HeadlinesError):
        return JSONResponse(
            status_code=500,
            content={"detail": exc.message, "kind": type(exc).__name__},
        )


class PageParams:
    """FastAPI dependency turning query parameters into a PageRequest.

    Filter fields are repeatable: ``?category=a&category=b`` matches either.
    ``limit`` outside 1..MAX_PAGE_SIZE is rejected with a 422 response.
    """

    def __init__(
        self,
        limit: Annotated[Optional[int], Query(ge=1, le=MAX_PAGE_SIZE)] = None,
        cursor: Optional[str] = None,
        category: Annotated[Optional[list[str]], Query()] = None,
        source: Annotated[Optional[list[str]], Query()] = None,
        event_country: Annotated[Optional[list[str]], Query()] = None,
    ):
        self.limit = limit
        self.cursor = cursor
        self.filter = FilterSpec(
            categories=category,
            sources=source,
            event_countries=event_country,
        )

    def to_request(self) -> PageRequest:
        return PageRequest(limit=self.limit, cursor=self.cursor, filter=self.filter)


class PaginatedResponse(BaseModel, Generic[T]):
    """Cursor-paginated response model for API endpoints."""

    items: list[T]
    cursor: Optional[str] = None
    has_more: bool

    @classmethod
    def from_page(cls, page_obj: Page) -> PaginatedResponse:
        return cls(
            items=page_obj.items,
            cursor=page_obj.cursor,
            has_more=page_obj.has_more,
        )
