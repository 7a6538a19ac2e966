"""Tests for the taskflow error hierarchy."""

from __future__ import annotations

from taskflow.errors import (
    ErrorCategory,
    ErrorContext,
    StepConfigError,
    StepError,
    StepPanicError,
    TaskflowError,
    TaskInitError,
    TaskLoadError,
    TraceDecodeError,
)


def _raise_and_catch(exc: BaseException) -> BaseException:
    try:
        raise exc
    except BaseException as caught:
        return caught


class TestCategories:
    def test_default_categories(self):
        assert TaskflowError("x").category == ErrorCategory.UNKNOWN
        assert StepConfigError("x").category == ErrorCategory.CONFIG
        assert TaskInitError("x").category == ErrorCategory.TASK
        assert StepError("x").category == ErrorCategory.STEP
        assert StepPanicError("x").category == ErrorCategory.INTERNAL
        assert TraceDecodeError("x").category == ErrorCategory.PARSE
        assert TaskLoadError("x").category == ErrorCategory.CONFIG

    def test_category_override(self):
        assert StepError("x", category=ErrorCategory.INTERNAL).category == ErrorCategory.INTERNAL

    def test_hierarchy(self):
        assert issubclass(StepPanicError, StepError)
        for cls in (StepConfigError, TaskInitError, StepError, TraceDecodeError, TaskLoadError):
            assert issubclass(cls, TaskflowError)


class TestErrorContext:
    def test_to_dict_skips_unset(self):
        assert ErrorContext().to_dict() == {}
        assert ErrorContext(task="demo", metadata={"attempt": 2}).to_dict() == {"task": "demo", "attempt": 2}

    def test_with_context_sets_fields_and_metadata(self):
        err = StepError("boom").with_context(step="first", run_id="r1", attempt=3)

        assert err.context.step == "first"
        assert err.context.run_id == "r1"
        assert err.context.metadata == {"attempt": 3}


class TestSerialization:
    def test_to_dict(self):
        cause = ValueError("inner")
        err = TaskflowError("outer", cause=cause).with_context(task="demo")

        assert err.to_dict() == {
            "error_type": "TaskflowError",
            "message": "outer",
            "category": "UNKNOWN",
            "context": {"task": "demo"},
            "cause": "ValueError('inner')",
        }
        assert err.__cause__ is cause

    def test_step_error_includes_code(self):
        err = StepError("declined", code="DECLINED")

        assert err.code == "DECLINED"
        assert err.to_dict()["code"] == "DECLINED"

    def test_step_error_code_defaults_empty(self):
        assert StepError("transient").code == ""

    def test_repr(self):
        assert repr(StepConfigError("bad")) == "StepConfigError('bad', category=CONFIG)"


class TestFromException:
    def test_task_init_error(self):
        original = _raise_and_catch(TypeError("wrong carrier"))

        err = TaskInitError.from_exception("demo", original)

        assert err.cause is original
        assert err.context.task == "demo"
        assert "wrong carrier" in err.message
        assert "TypeError: wrong carrier" in err.stack

    def test_step_panic_error(self):
        original = _raise_and_catch(RuntimeError("crash"))

        err = StepPanicError.from_exception("second", original, "FAILURE")

        assert err.code == "FAILURE"
        assert err.context.step == "second"
        assert "RuntimeError: crash" in err.stack
        assert err.to_dict()["category"] == "INTERNAL"
