"""Tracing adapter for step execution.

The runner wraps every step-function call in a span obtained from a
*span-start function*::

    StartSpanFunc = (TaskContext, span_name) -> (TaskContext, Span)

The default, :func:`noop_start_span`, returns OpenTelemetry's
non-recording ``INVALID_SPAN``, so the runner always talks to a span and
never branches on whether tracing is enabled.  :func:`otel_start_span`
builds a real adapter over an OpenTelemetry tracer.

Example::

    from opentelemetry import trace
    from taskflow import Runner
    from taskflow.tracing import otel_start_span

    runner = Runner().set_start_span_func(otel_start_span(trace.get_tracer("billing")))
"""

from __future__ import annotations

from collections.abc import Callable

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode, Tracer

from taskflow.context import TaskContext
from taskflow.settings import get_settings

StartSpanFunc = Callable[[TaskContext, str], tuple[TaskContext, Span]]


def noop_start_span(ctx: TaskContext, span_name: str) -> tuple[TaskContext, Span]:
    """Span-start function used when no tracing is configured."""
    return ctx, trace.INVALID_SPAN


def otel_start_span(tracer: Tracer | None = None, tracer_name: str | None = None) -> StartSpanFunc:
    """Build a span-start function backed by an OpenTelemetry tracer.

    Spans are parented on ``ctx.trace_context``; the returned carrier holds
    the new span's context so nested instrumentation inside the step
    attaches to it.  Without an explicit tracer one is taken from the
    global provider under ``tracer_name`` (default: ``settings.tracer_name``).
    """
    tracer = tracer or trace.get_tracer(tracer_name or get_settings().tracer_name)

    def start_span(ctx: TaskContext, span_name: str) -> tuple[TaskContext, Span]:
        span = tracer.start_span(span_name, context=ctx.trace_context)
        span_context = trace.set_span_in_context(span, ctx.trace_context)
        return ctx.with_trace_context(span_context), span

    return start_span


def end_step_span(span: Span, code: str, err: BaseException | None) -> None:
    """Annotate a step span with its outcome and end it."""
    span.add_event("StepCode", {"code": code})
    if err is not None:
        span.record_exception(err)
        span.set_status(Status(StatusCode.ERROR, str(err)))
    span.end()


__all__ = ["StartSpanFunc", "noop_start_span", "otel_start_span", "end_step_span"]
