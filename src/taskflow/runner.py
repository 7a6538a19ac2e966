"""Runner - walks a task's step graph and records the Run Trace.

The Runner takes a :class:`~taskflow.task.Task`, initializes it with the
caller's input/output carriers and executes steps one at a time,
following each step's route map by result code.  It handles:

- **Routing** by result code, ending on an empty or unknown target
- **Retries** for unclassified failures (``StepError`` with no code)
- **Recovery** of unexpected exceptions into ``FAILURE``
- **Failure hooks** (``StepConfig.step_failed_func``)
- **Spans** around every step-function attempt via the tracing adapter
- **Run Trace** accumulation and Mermaid rendering of it

Only initialization failures escape :meth:`Runner.run_task` (as
:class:`~taskflow.errors.TaskInitError`).  Everything a step does wrong
becomes a result code; callers inspect ``task.error()`` and
:attr:`Runner.run_steps` afterwards.

Example::

    from taskflow import Runner

    runner = Runner()
    runner.run_task(checkout, order, receipt)

    for run_step in runner.run_steps:
        print(run_step.step_key, run_step.step_code)

    print(runner.task_graph_run_steps(checkout))
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

from taskflow.context import TaskContext
from taskflow.errors import StepError, StepPanicError, TaskInitError
from taskflow.graph import GraphConfig, render_graph, render_graph_from_json, render_graph_with_trace
from taskflow.run_step import RunStep
from taskflow.settings import get_settings
from taskflow.task import StepCode, StepConfig, Task
from taskflow.tracing import StartSpanFunc, end_step_span, noop_start_span


class Runner:
    """Executes tasks step by step.

    A Runner keeps the Run Trace of every task it has run; reusing one
    Runner across ``run_task`` calls appends to the same trace until
    :meth:`clear_run_steps` is called.  Not thread-safe.
    """

    def __init__(
        self,
        graph_config: GraphConfig | None = None,
        start_span: StartSpanFunc | None = None,
    ) -> None:
        """Initialise the runner.

        Args:
            graph_config: Styling for the ``task_graph*`` helpers.
            start_span: Span-start function wrapped around each step
                attempt.  Defaults to :func:`~taskflow.tracing.noop_start_span`.
        """
        self.graph_config = graph_config or GraphConfig()
        self._start_span: StartSpanFunc = start_span or noop_start_span
        self._run_steps: list[RunStep] = []

    def set_start_span_func(self, start_span: StartSpanFunc) -> Runner:
        """Replace the span-start function (fluent)."""
        self._start_span = start_span
        return self

    @property
    def run_steps(self) -> list[RunStep]:
        """Copy of the accumulated Run Trace, in execution order."""
        return list(self._run_steps)

    def clear_run_steps(self) -> None:
        """Forget every recorded RunStep."""
        self._run_steps.clear()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_task(
        self,
        task: Task,
        input: Any,
        output: Any,
        ctx: TaskContext | None = None,
    ) -> None:
        """
        Run a task to completion.

        Args:
            task: The task to run
            input: Caller's input carrier, handed to ``task.init``
            output: Caller's output carrier, handed to ``task.init``
            ctx: Carrier passed to step functions (created if omitted)

        Raises:
            TaskInitError: ``task.init`` raised; no step was executed
        """
        if ctx is None:
            ctx = TaskContext.create(task_name=task.name)
        ctx = ctx.bind(task=task.name, run_id=ctx.run_id)
        log = ctx.logger

        log.info("task.start")
        try:
            self._init_task(task, input, output)

            step_config_map = task.step_config_map()
            if not step_config_map:
                log.warning("task.empty_step_map")
                return

            step_key = task.first_step_key()
            if step_key not in step_config_map:
                log.error("task.first_step_missing", step=step_key)
                return

            while True:
                step_config = step_config_map[step_key]

                task.before_step(step_key)
                code = self._run_step(ctx, step_key, step_config)
                task.after_step(step_key)

                self._run_steps.append(RunStep(step_key=step_key, step_code=code))

                next_step_key = step_config.next_step_key(code)
                log.info("step.end", step=step_key, code=code, next_step=next_step_key)

                if not next_step_key:
                    break
                if next_step_key not in step_config_map:
                    log.warning(
                        "step.next_step_missing",
                        step=step_key,
                        code=code,
                        next_step=next_step_key,
                    )
                    break
                step_key = next_step_key
        finally:
            log.info("task.end", run_steps=[run_step.to_dict() for run_step in self._run_steps])

    def _init_task(self, task: Task, input: Any, output: Any) -> None:
        try:
            task.init(input, output)
        except Exception as e:
            raise TaskInitError.from_exception(task.name, e) from e

    def _run_step(self, ctx: TaskContext, step_key: str, step_config: StepConfig) -> str:
        """Execute one step, retrying and falling back to FAILURE as configured."""
        log = ctx.logger
        log.info("step.start", step=step_key)

        code, err = self._run_step_func(ctx, step_key, step_config)
        if err is not None:
            log.error("step.error", step=step_key, **err.to_dict())
            if not code:
                if step_config.retry_count > 0:
                    code, err = self._retry_step(ctx, step_key, step_config)
                else:
                    code = StepCode.FAILURE

        if code == StepCode.FAILURE and step_config.step_failed_func is not None:
            log.info("step.failed_hook", step=step_key)
            step_config.step_failed_func(step_key, err)

        return code

    def _run_step_func(
        self, ctx: TaskContext, step_key: str, step_config: StepConfig
    ) -> tuple[str, StepError | None]:
        """Call the step function once inside its span.

        Returns ``(code, error)``; unexpected exceptions are recovered as
        ``(FAILURE, StepPanicError)``.
        """
        span_ctx, span = self._start_span(ctx, f"RunStep {step_key}")
        code = ""
        err: StepError | None = None
        try:
            result = step_config.step_func(span_ctx)
            if result is None:
                result = ""
            if not isinstance(result, str):
                raise TypeError(f"step returned {type(result).__name__}, expected str")
            code = result
        except StepError as e:
            code = e.code
            err = e.with_context(step=step_key, run_id=ctx.run_id)
        except Exception as e:
            code = StepCode.FAILURE
            err = StepPanicError.from_exception(step_key, e, code).with_context(run_id=ctx.run_id)
            ctx.logger.error("step.panic", step=step_key, error=repr(e), stack=err.stack)
        finally:
            end_step_span(span, code, err)

        return code, err

    def _retry_step(
        self, ctx: TaskContext, step_key: str, step_config: StepConfig
    ) -> tuple[str, StepError | None]:
        """Re-run a step after unclassified failures.

        Stops at the first success or the first classified error;
        exhausting every retry yields ``FAILURE``.
        """
        log = ctx.logger
        err: StepError | None = None
        for retry_no in range(1, step_config.retry_count + 1):
            log.info(
                "step.retry_wait",
                step=step_key,
                delay_seconds=step_config.retry_delay,
            )
            time.sleep(step_config.retry_delay)

            log.info(
                "step.retry",
                step=step_key,
                retry_no=retry_no,
                retry_count=step_config.retry_count,
            )
            code, err = self._run_step_func(ctx, step_key, step_config)
            if err is None:
                return code, None

            log.error("step.error", step=step_key, retry_no=retry_no, **err.to_dict())
            if code:
                return code, err

        return StepCode.FAILURE, err

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------

    def task_graph(self, task: Task, codes: Iterable[str] | None = None) -> str:
        """Mermaid markup of the task's routes."""
        return render_graph(task, codes, self.graph_config)

    def task_graph_run_steps(
        self,
        task: Task,
        run_steps: Iterable[RunStep] | None = None,
        codes: Iterable[str] | None = None,
    ) -> str:
        """Mermaid markup with ``run_steps`` (default: this Runner's trace) highlighted."""
        if run_steps is None:
            run_steps = self._run_steps
        return render_graph_with_trace(task, run_steps, codes, self.graph_config)

    def task_graph_run_steps_from_json(
        self,
        task: Task,
        data: str | bytes,
        codes: Iterable[str] | None = None,
    ) -> str:
        """Like :meth:`task_graph_run_steps` for a JSON-encoded trace.

        Raises:
            TraceDecodeError: ``data`` is not a valid serialized trace
        """
        return render_graph_from_json(task, data, codes, self.graph_config)


def get_runner(start_span: StartSpanFunc | None = None) -> Runner:
    """Get a Runner styled from the current settings."""
    return Runner(graph_config=GraphConfig.from_settings(get_settings()), start_span=start_span)


__all__ = ["Runner", "get_runner"]
