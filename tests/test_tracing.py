"""Tests for the tracing adapter.

Spans are exported to the OpenTelemetry SDK's in-memory exporter so
names, events, status and parentage can be asserted directly.
"""

from __future__ import annotations

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from demo_tasks import FuncTask, returning, two_step_task
from taskflow import Runner, StepCode, StepConfig, StepError, TaskContext
from taskflow.tracing import noop_start_span, otel_start_span


@pytest.fixture
def exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracer(exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider.get_tracer("taskflow.tests")


def _step_code_events(span) -> list[str]:
    return [event.attributes["code"] for event in span.events if event.name == "StepCode"]


class TestNoopStartSpan:
    def test_returns_context_and_invalid_span(self):
        ctx = TaskContext.create("demo")

        new_ctx, span = noop_start_span(ctx, "RunStep first")

        assert new_ctx is ctx
        assert span is trace.INVALID_SPAN
        assert not span.is_recording()

    def test_runner_default_needs_no_tracer(self):
        runner = Runner()

        runner.run_task(two_step_task(), None, None)

        assert len(runner.run_steps) == 2


class TestOtelStartSpan:
    def test_one_span_per_step(self, tracer, exporter):
        runner = Runner(start_span=otel_start_span(tracer))

        runner.run_task(two_step_task(), None, None)

        spans = exporter.get_finished_spans()
        assert [span.name for span in spans] == ["RunStep first", "RunStep second"]
        assert all(_step_code_events(span) == ["SUCCESS"] for span in spans)
        assert all(span.status.status_code == StatusCode.UNSET for span in spans)

    def test_set_start_span_func_is_fluent(self, tracer, exporter):
        runner = Runner()

        assert runner.set_start_span_func(otel_start_span(tracer)) is runner
        runner.run_task(two_step_task(), None, None)

        assert len(exporter.get_finished_spans()) == 2

    def test_every_attempt_gets_a_span(self, tracer, exporter, sleeps):
        calls = []

        def flaky(ctx):
            calls.append(1)
            if len(calls) < 3:
                raise StepError("transient")
            return StepCode.SUCCESS

        task = FuncTask({"first": StepConfig(step_func=flaky, retry_count=2)})
        Runner(start_span=otel_start_span(tracer)).run_task(task, None, None)

        spans = exporter.get_finished_spans()
        assert [span.name for span in spans] == ["RunStep first"] * 3
        assert [_step_code_events(span) for span in spans] == [[""], [""], ["SUCCESS"]]
        assert [span.status.status_code for span in spans] == [
            StatusCode.ERROR,
            StatusCode.ERROR,
            StatusCode.UNSET,
        ]
        assert spans[0].status.description == "transient"
        assert any(event.name == "exception" for event in spans[0].events)

    def test_crash_marks_span_failed(self, tracer, exporter):
        def crash(ctx):
            raise RuntimeError("boom")

        task = FuncTask({"first": StepConfig(step_func=crash)})
        Runner(start_span=otel_start_span(tracer)).run_task(task, None, None)

        (span,) = exporter.get_finished_spans()
        assert _step_code_events(span) == [StepCode.FAILURE]
        assert span.status.status_code == StatusCode.ERROR
        assert "boom" in span.status.description

    def test_step_receives_span_context(self, tracer, exporter):
        seen = []

        def step(ctx):
            seen.append(trace.get_current_span(ctx.trace_context).get_span_context().span_id)
            return StepCode.SUCCESS

        task = FuncTask({"first": StepConfig(step_func=step)})
        Runner(start_span=otel_start_span(tracer)).run_task(task, None, None)

        (span,) = exporter.get_finished_spans()
        assert seen == [span.context.span_id]

    def test_spans_parented_on_callers_context(self, tracer, exporter):
        task = FuncTask({"first": StepConfig(step_func=returning(StepCode.SUCCESS))})
        runner = Runner(start_span=otel_start_span(tracer))

        with tracer.start_as_current_span("request") as parent:
            parent_ctx = trace.set_span_in_context(parent)
            runner.run_task(task, None, None, ctx=TaskContext.create("func").with_trace_context(parent_ctx))

        step_span = [span for span in exporter.get_finished_spans() if span.name == "RunStep first"][0]
        assert step_span.parent.span_id == parent.get_span_context().span_id

    def test_default_tracer_from_global_provider(self):
        start_span = otel_start_span()

        ctx, span = start_span(TaskContext.create("demo"), "RunStep first")
        span.end()

        assert ctx.trace_context is not None
