from pyheadlines.lifecycle.observability import (
    enable_tracing,
    disable_tracing,
    OperationEvent,
    add_listener,
    remove_listener,
    get_events,
    clear_events,
    track_operation,
)

__all__ = [
    "enable_tracing",
    "disable_tracing",
    "OperationEvent",
    "add_listener",
    "remove_listener",
    "get_events",
    "clear_events",
    "track_operation",
]
