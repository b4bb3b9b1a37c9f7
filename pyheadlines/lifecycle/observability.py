from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger("pyheadlines")


@dataclass(frozen=True)
class OperationEvent:
    """Represents a single repository operation for tracing."""

    operation: str
    source: str
    filter: dict[str, Any] | None = None
    duration_ms: float = 0.0
    result_count: int | None = None
    cursor: str | None = None
    has_more: bool | None = None
    error: str | None = None


class _ObservabilityState:
    """Global mutable state for observability."""

    def __init__(self) -> None:
        self.enabled: bool = False
        self.slow_operation_threshold_ms: float = 100.0
        self.listeners: list[Callable[[OperationEvent], Any]] = []
        self.events: list[OperationEvent] = []
        self.capture_events: bool = False


_state = _ObservabilityState()


def enable_tracing(slow_operation_ms: float = 100.0, capture_events: bool = False) -> None:
    """Enable operation tracing and observability."""
    _state.enabled = True
    _state.slow_operation_threshold_ms = slow_operation_ms
    _state.capture_events = capture_events


def disable_tracing() -> None:
    """Disable tracing and clear all state."""
    _state.enabled = False
    _state.slow_operation_threshold_ms = 100.0
    _state.listeners.clear()
    _state.events.clear()
    _state.capture_events = False


def get_events() -> list[OperationEvent]:
    """Return captured events."""
    return list(_state.events)


def clear_events() -> None:
    """Clear captured events."""
    _state.events.clear()


def add_listener(callback: Callable[[OperationEvent], Any]) -> None:
    """Register a listener that receives an OperationEvent per operation."""
    _state.listeners.append(callback)


def remove_listener(callback: Callable[[OperationEvent], Any]) -> None:
    """Remove a previously registered listener."""
    _state.listeners.remove(callback)


def emit_event(event: OperationEvent) -> None:
    """Emit an operation event: store, log slow operations, notify listeners."""
    if not _state.enabled:
        return

    if _state.capture_events:
        _state.events.append(event)

    if event.duration_ms > _state.slow_operation_threshold_ms:
        logger.warning(
            "Slow headlines %s via %s took %.1fms (threshold: %.1fms)",
            event.operation,
            event.source,
            event.duration_ms,
            _state.slow_operation_threshold_ms,
        )

    for listener in _state.listeners:
        listener(event)

    _try_emit_otel_span(event)


def _try_emit_otel_span(event: OperationEvent) -> None:
    """Attempt to emit an OpenTelemetry span if the library is available."""
    try:
        from opentelemetry import trace
    except ImportError:
        return

    tracer = trace.get_tracer("pyheadlines")
    with tracer.start_as_current_span(f"pyheadlines.{event.operation}") as span:
        span.set_attribute("headlines.source", event.source)
        span.set_attribute("headlines.operation", event.operation)
        if event.duration_ms:
            span.set_attribute("headlines.duration_ms", event.duration_ms)
        if event.result_count is not None:
            span.set_attribute("headlines.result_count", event.result_count)
        if event.cursor is not None:
            span.set_attribute("headlines.page.cursor", event.cursor)
        if event.has_more is not None:
            span.set_attribute("headlines.page.has_more", event.has_more)
        if event.error is not None:
            span.set_attribute("headlines.error", event.error)


@asynccontextmanager
async def track_operation(operation: str, source: str, filter: dict | None = None):
    """Context manager that times an operation and emits an OperationEvent.

    The yielded dict lets the caller report ``result_count`` and, for paged
    reads, the ``cursor`` and ``has_more`` of the page it built. Exceptions
    are recorded on the event and re-raised.
    """
    if not _state.enabled:
        yield {}
        return

    start = time.perf_counter()
    ctx: dict[str, Any] = {"result_count": None, "cursor": None, "has_more": None}
    error: str | None = None
    try:
        yield ctx
    except Exception as exc:
        error = f"{type(exc).__name__}: {exc}"
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        event = OperationEvent(
            operation=operation,
            source=source,
            filter=filter,
            duration_ms=duration_ms,
            result_count=ctx.get("result_count"),
            cursor=ctx.get("cursor"),
            has_more=ctx.get("has_more"),
            error=error,
        )
        emit_event(event)
