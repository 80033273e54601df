"""Span helpers for the access services.

traced() wraps the async fetch and load paths; span() is the same thing as a
context manager for code that is not a whole function. Both are no-ops
without a configured tracer provider.
"""

import inspect
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from app.domain.exceptions import AccessCoreException

T = TypeVar("T")

TRACER_NAME = "bizdesk_access"

# Call kwargs copied onto spans as arg.<name>; tokens and identities never are.
SPAN_ARG_KEYS = frozenset({"capability", "context", "code", "force", "path"})


@contextmanager
def span(name: str, **attributes: str | int | float | bool) -> Iterator[trace.Span]:
    """Run the block inside a span; exceptions mark it ERROR and propagate.

    AccessCoreException also sets error.code so failed fetches can be
    filtered by cause.
    """
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as current:
        for key, value in attributes.items():
            current.set_attribute(key, value)
        try:
            yield current
        except Exception as e:
            if isinstance(e, AccessCoreException):
                current.set_attribute("error.code", e.error_code)
            current.record_exception(e)
            current.set_status(Status(StatusCode.ERROR, str(e)))
            raise
        current.set_status(Status(StatusCode.OK))


def traced(
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorate a coroutine function so every call runs inside span(operation_name).

    Keyword arguments named in SPAN_ARG_KEYS are recorded as attributes.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() expects a coroutine function, got {func!r}")
        name = operation_name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attrs = {f"arg.{k}": str(v) for k, v in kwargs.items() if k in SPAN_ARG_KEYS}
            with span(name, **attrs):
                return await func(*args, **kwargs)

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Set attributes on the current span when it is recording."""
    current = trace.get_current_span()
    if current.is_recording():
        for key, value in attributes.items():
            current.set_attribute(key, value)


def add_span_event(name: str, attributes: dict | None = None) -> None:
    current = trace.get_current_span()
    if current.is_recording():
        current.add_event(name, attributes=attributes or {})


def get_trace_id() -> str | None:
    """Current trace id as 32 hex chars, or None outside a valid span."""
    ctx = trace.get_current_span().get_span_context()
    return format(ctx.trace_id, "032x") if ctx.is_valid else None
