"""Observability utilities."""

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


def observe_exception(exc: Exception, span: trace.Span | None = None) -> None:
    """Mark `span` (the current span by default) as failed by `exc`.

    The exception type goes to the ``error.type`` attribute so failed storage requests can be
    grouped by cause, e.g. ``ConnectError`` or ``ReadTimeout``.
    """
    target = span or trace.get_current_span()
    target.record_exception(exc)
    target.set_attribute("error.type", type(exc).__qualname__)
    target.set_status(Status(StatusCode.ERROR, f"{type(exc).__name__}: {exc}"))
