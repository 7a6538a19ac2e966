"""
taskflow - step-oriented task execution engine.

A task is a graph of named steps.  Each step returns a result code and
the code selects the next step; the :class:`Runner` walks the graph,
retries transient failures, recovers crashes into ``FAILURE`` and
records what happened as a Run Trace that can be drawn as a Mermaid
flowchart.

Example::

    from taskflow import BaseTask, Runner, StepCode, StepConfig

    class Greet(BaseTask):
        name = "greet"

        def step_config_map(self):
            return {
                "hello": StepConfig(step_func=self.hello, route_map={StepCode.SUCCESS: ""}),
            }

        def first_step_key(self):
            return "hello"

        def hello(self, ctx):
            ctx.logger.info("hello", who=self.input)
            return StepCode.SUCCESS

    runner = Runner()
    runner.run_task(Greet(), "world", None)
    print(runner.task_graph_run_steps(Greet()))
"""

from taskflow.context import TaskContext
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
from taskflow.graph import GraphConfig, render_graph, render_graph_from_json, render_graph_with_trace
from taskflow.run_step import RunStep, run_steps_from_json, run_steps_to_json
from taskflow.runner import Runner, get_runner
from taskflow.task import BaseTask, StepCode, StepConfig, StepFailedFunc, StepFunc, Task
from taskflow.tracing import StartSpanFunc, noop_start_span, otel_start_span

__version__ = "0.1.0"

__all__ = [
    # Task definition
    "Task",
    "BaseTask",
    "StepCode",
    "StepConfig",
    "StepFunc",
    "StepFailedFunc",
    "TaskContext",
    # Execution
    "Runner",
    "get_runner",
    "RunStep",
    "run_steps_to_json",
    "run_steps_from_json",
    # Tracing
    "StartSpanFunc",
    "noop_start_span",
    "otel_start_span",
    # Graphs
    "GraphConfig",
    "render_graph",
    "render_graph_with_trace",
    "render_graph_from_json",
    # Errors
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
