"""Tests for TaskContext."""

from __future__ import annotations

import uuid

from structlog.testing import capture_logs

from taskflow import TaskContext


class TestCreate:
    def test_generates_run_id(self):
        ctx = TaskContext.create("demo")

        assert ctx.task_name == "demo"
        uuid.UUID(ctx.run_id)
        assert TaskContext.create("demo").run_id != ctx.run_id

    def test_explicit_values(self):
        ctx = TaskContext.create("demo", run_id="r1", metadata={"tenant": "acme"})

        assert ctx.run_id == "r1"
        assert ctx.get("tenant") == "acme"
        assert ctx.get("missing", "default") == "default"
        assert ctx.trace_context is None

    def test_repr(self):
        assert repr(TaskContext.create("demo", run_id="r1")) == "TaskContext(run_id='r1', task='demo')"


class TestCopyOnWrite:
    def test_with_metadata(self):
        ctx = TaskContext.create("demo", metadata={"a": 1})

        updated = ctx.with_metadata(b=2)

        assert updated.metadata == {"a": 1, "b": 2}
        assert ctx.metadata == {"a": 1}

    def test_with_trace_context(self):
        ctx = TaskContext.create("demo")
        marker = object()

        updated = ctx.with_trace_context(marker)

        assert updated.trace_context is marker
        assert ctx.trace_context is None
        assert updated.run_id == ctx.run_id

    def test_bind_adds_logger_fields(self):
        with capture_logs() as logs:
            ctx = TaskContext.create("demo").bind(step="first")
            ctx.logger.info("step.start")

        assert logs[0]["step"] == "first"
        assert logs[0]["event"] == "step.start"
