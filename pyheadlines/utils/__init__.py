from pyheadlines.utils.exceptions import (
    HeadlinesError,
    FetchFailure,
    NotFoundFailure,
    CreateFailure,
    UpdateFailure,
    DeleteFailure,
    SearchFailure,
    NotConnected,
)
from pyheadlines.utils.pagination import Page, PageRequest
from pyheadlines.utils.types import (
    FilterSpec,
    HeadlineId,
    QueryDocument,
    build_filter_query,
)

__all__ = [
    "HeadlinesError",
    "FetchFailure",
    "NotFoundFailure",
    "CreateFailure",
    "UpdateFailure",
    "DeleteFailure",
    "SearchFailure",
    "NotConnected",
    "Page",
    "PageRequest",
    "FilterSpec",
    "HeadlineId",
    "QueryDocument",
    "build_filter_query",
]
