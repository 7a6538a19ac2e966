"""
Structured error types for taskflow.

Every error raised by the engine carries a category, a structured
context (task, step, run id) and an optional chained cause, so that the
driver can log it as a flat dict and callers can tell configuration
problems apart from step failures.

Manifesto:
    - **Typed hierarchy:** one class per failure kind the driver reacts to
    - **Rich context:** errors carry task/step metadata for logging
    - **Error chaining:** the original exception is kept as ``cause``

Architecture:
    ::

        TaskflowError  (category, context, cause)
        ├── StepConfigError     CONFIG    invalid StepConfig values
        ├── TaskInitError       TASK      Task.init raised
        ├── StepError           STEP      raised by a step function, carries ``code``
        │   └── StepPanicError  INTERNAL  unexpected exception inside a step
        ├── TraceDecodeError    PARSE     malformed serialized run trace
        └── TaskLoadError       CONFIG    bad ``module:attr`` task reference

    Only :class:`TaskInitError` ever escapes ``Runner.run_task``.  Step
    errors are converted into result codes and flow through routing.

Examples:
    A step reporting a transient failure (the runner may retry it):

    >>> raise StepError("upstream timed out")

    A step reporting a classified failure that routes immediately:

    >>> raise StepError("validation failed", code="INVALID")

Tags:
    error-handling, exception-hierarchy, taskflow

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Coarse classification used in logs and CLI output."""

    CONFIG = "CONFIG"  # bad StepConfig or task reference
    TASK = "TASK"  # Task.init rejected the carriers
    STEP = "STEP"  # step raised StepError
    PARSE = "PARSE"  # serialized trace unreadable
    INTERNAL = "INTERNAL"  # step crashed
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Where an error happened.

    Attributes:
        task: Task name
        step: Step key
        run_id: Run identifier from the TaskContext
        metadata: Anything else worth logging (attempt numbers, refs)
    """

    task: str | None = None
    step: str | None = None
    run_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if f.name != "metadata")

    def to_dict(self) -> dict[str, Any]:
        """Set fields plus metadata, flattened for a log line."""
        located = {name: getattr(self, name) for name in ("task", "step", "run_id")}
        return {**{k: v for k, v in located.items() if v is not None}, **self.metadata}


class TaskflowError(Exception):
    """
    Root of every error taskflow raises.

    ``cause`` is also stored as ``__cause__`` so tracebacks show the
    chain even when the error is raised without ``from``.
    """

    default_category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = self.default_category if category is None else category
        self.context = ErrorContext() if context is None else context
        self.cause = cause
        self.__cause__ = cause

    def with_context(self, **values: Any) -> TaskflowError:
        """
        Fill in context fields; unknown keys go to ``metadata``.

            raise TaskInitError("bad input").with_context(task="demo", attempt=2)
        """
        known = ErrorContext.field_names()
        for key, value in values.items():
            if key in known:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Flat representation for structured logging."""
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if context := self.context.to_dict():
            data["context"] = context
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


class StepConfigError(TaskflowError):
    """A StepConfig was built with invalid values."""

    default_category = ErrorCategory.CONFIG


class TaskInitError(TaskflowError):
    """
    ``Task.init`` raised; the run was aborted before any step executed.

    ``stack`` holds the formatted traceback of the original exception.
    """

    default_category = ErrorCategory.TASK

    def __init__(self, message: str, *, stack: str = "", **kwargs: Any):
        super().__init__(message, **kwargs)
        self.stack = stack

    @classmethod
    def from_exception(cls, task_name: str, exc: BaseException) -> TaskInitError:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        error = cls(
            f"init task {task_name!r} failed: {exc!r}",
            stack=stack,
            cause=exc,
        )
        error.context.task = task_name
        return error


class StepError(TaskflowError):
    """
    Explicit failure raised by a step function.

    ``code`` selects how the runner treats it:

    * empty code: unclassified, transient failure. The runner retries the
      step when its config allows, then falls back to ``FAILURE``.
    * non-empty code: a defined failure branch. Routing follows the code
      at once, with no retry.
    """

    default_category = ErrorCategory.STEP

    def __init__(self, message: str, *, code: str = "", **kwargs: Any):
        super().__init__(message, **kwargs)
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["code"] = self.code
        return result


class StepPanicError(StepError):
    """
    An unexpected exception escaped a step function.

    The runner recovers it, codes the attempt as ``FAILURE`` and keeps
    the traceback in ``stack`` for diagnostics.
    """

    default_category = ErrorCategory.INTERNAL

    def __init__(self, message: str, *, stack: str = "", **kwargs: Any):
        super().__init__(message, **kwargs)
        self.stack = stack

    @classmethod
    def from_exception(cls, step_key: str, exc: BaseException, code: str) -> StepPanicError:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        error = cls(
            f"recovered from {exc!r} in step {step_key!r}",
            code=code,
            stack=stack,
            cause=exc,
        )
        error.context.step = step_key
        return error


class TraceDecodeError(TaskflowError):
    """A serialized run trace could not be decoded."""

    default_category = ErrorCategory.PARSE


class TaskLoadError(TaskflowError):
    """A ``module:attr`` task reference could not be resolved."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TaskflowError",
    "StepConfigError",
    "TaskInitError",
    "StepError",
    "StepPanicError",
    "TraceDecodeError",
    "TaskLoadError",
]
