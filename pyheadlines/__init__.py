from pyheadlines.core import (
    Headline,
    HeadlineSource,
    HeadlinesRepository,
    PollingStream,
    StreamState,
    Lookup,
    LookupKind,
    MongoHeadlineSource,
    connect,
    disconnect,
    get_database,
    get_client,
)
from pyheadlines.lifecycle import (
    enable_tracing,
    disable_tracing,
    OperationEvent,
    add_listener,
)
from pyheadlines.utils import (
    HeadlinesError,
    FetchFailure,
    NotFoundFailure,
    CreateFailure,
    UpdateFailure,
    DeleteFailure,
    SearchFailure,
    NotConnected,
    FilterSpec,
    Page,
    PageRequest,
)

__all__ = [
    # Core
    "Headline",
    "HeadlineSource",
    "HeadlinesRepository",
    "PollingStream",
    "StreamState",
    "Lookup",
    "LookupKind",
    "MongoHeadlineSource",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    # Lifecycle
    "enable_tracing",
    "disable_tracing",
    "OperationEvent",
    "add_listener",
    # Utils
    "HeadlinesError",
    "FetchFailure",
    "NotFoundFailure",
    "CreateFailure",
    "UpdateFailure",
    "DeleteFailure",
    "SearchFailure",
    "NotConnected",
    "FilterSpec",
    "Page",
    "PageRequest",
]
