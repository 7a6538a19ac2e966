"""Task and step definitions.

A task is a graph of named steps.  Each step is described by a
:class:`StepConfig` (function, retry policy, failure hook, routes) and
the task exposes the whole map plus the key of the first step.  The
runner walks the map by result code; nothing here executes anything.

ARCHITECTURE
────────────
::

    Task (protocol)                      BaseTask (convenience base)
      ├── name                             ├── init() stores input/output,
      ├── init(input, output)              │   checks input_type/output_type
      ├── step_config_map() ──┐            ├── before_step()/after_step() no-op
      ├── first_step_key()    │            └── error() -> last_error
      ├── before_step(key)    │
      ├── after_step(key)     ▼
      └── error()           StepConfig
                              ├── step_func(ctx) -> code
                              ├── retry_count / retry_delay
                              ├── step_failed_func(key, err)
                              └── route_map {code: next_step_key}

Example::

    class Checkout(BaseTask):
        name = "checkout"
        input_type = Order
        output_type = Receipt

        def step_config_map(self):
            return {
                "reserve": StepConfig(
                    step_func=self.reserve,
                    retry_count=2,
                    retry_delay=0.5,
                    route_map={StepCode.SUCCESS: "charge", StepCode.FAILURE: "release"},
                ),
                "charge": StepConfig(step_func=self.charge, route_map={StepCode.SUCCESS: ""}),
                "release": StepConfig(step_func=self.release),
            }

        def first_step_key(self):
            return "reserve"

Tags:
    taskflow, task, step-config, routing

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from taskflow.errors import StepConfigError

if TYPE_CHECKING:
    from taskflow.context import TaskContext


class StepCode:
    """Conventional step result codes.

    Codes are plain strings and the engine treats them as opaque, except
    ``FAILURE``, which it produces itself when a step crashes or runs out
    of retries.
    """

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    JUMP1 = "JUMP1"
    JUMP2 = "JUMP2"
    JUMP3 = "JUMP3"


StepFunc = Callable[["TaskContext"], str]
StepFailedFunc = Callable[[str, "Exception | None"], None]


@dataclass(frozen=True)
class StepConfig:
    """
    Static description of one step.

    Attributes:
        step_func: Work function, called with the TaskContext, returning a code
        retry_count: Additional attempts after an unclassified failure
        retry_delay: Seconds to wait before each retry
        step_failed_func: Hook called with (step_key, error) when the final code is FAILURE
        route_map: Result code -> next step key ("" ends the run)
    """

    step_func: StepFunc
    retry_count: int = 0
    retry_delay: float = 0.0
    step_failed_func: StepFailedFunc | None = None
    route_map: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not callable(self.step_func):
            raise StepConfigError(f"step_func must be callable, got {type(self.step_func).__name__}")
        if not isinstance(self.retry_count, int) or isinstance(self.retry_count, bool):
            raise StepConfigError(f"retry_count must be an int, got {type(self.retry_count).__name__}")
        if not isinstance(self.retry_delay, (int, float)) or isinstance(self.retry_delay, bool):
            raise StepConfigError(f"retry_delay must be a number, got {type(self.retry_delay).__name__}")
        if self.retry_count < 0:
            raise StepConfigError(f"retry_count must be >= 0, got {self.retry_count}")
        if self.retry_delay < 0:
            raise StepConfigError(f"retry_delay must be >= 0, got {self.retry_delay}")
        if self.step_failed_func is not None and not callable(self.step_failed_func):
            raise StepConfigError("step_failed_func must be callable")

    def next_step_key(self, code: str) -> str:
        """Route a result code; unknown codes end the run."""
        return self.route_map.get(code, "")


@runtime_checkable
class Task(Protocol):
    """
    Protocol every workflow definition satisfies.

    ``init`` may raise to reject the caller's carriers; the runner turns
    that into :class:`~taskflow.errors.TaskInitError`.  Route targets do
    not have to exist in ``step_config_map()``: the runner stops at a
    dangling target.
    """

    name: str

    def init(self, input: Any, output: Any) -> None: ...

    def step_config_map(self) -> Mapping[str, StepConfig]: ...

    def first_step_key(self) -> str: ...

    def before_step(self, step_key: str) -> None: ...

    def after_step(self, step_key: str) -> None: ...

    def error(self) -> Exception | None: ...


class BaseTask(ABC):
    """
    Base class implementing the Task bookkeeping.

    Subclasses provide ``step_config_map`` and ``first_step_key``.  If
    ``input_type`` / ``output_type`` are set, ``init`` rejects carriers of
    any other type.  Steps record a task-level failure by assigning
    ``self.last_error``; callers read it through ``error()`` once the run
    returns.
    """

    name: ClassVar[str] = "task"
    input_type: ClassVar[type | None] = None
    output_type: ClassVar[type | None] = None

    def __init__(self) -> None:
        self.input: Any = None
        self.output: Any = None
        self.last_error: Exception | None = None

    def init(self, input: Any, output: Any) -> None:
        """Bind the caller's input and output carriers."""
        if self.input_type is not None and not isinstance(input, self.input_type):
            raise TypeError(
                f"{self.name}: input must be {self.input_type.__name__}, got {type(input).__name__}"
            )
        if self.output_type is not None and not isinstance(output, self.output_type):
            raise TypeError(
                f"{self.name}: output must be {self.output_type.__name__}, got {type(output).__name__}"
            )
        self.input = input
        self.output = output
        self.last_error = None

    @abstractmethod
    def step_config_map(self) -> Mapping[str, StepConfig]:
        """Return the full step-key -> StepConfig map."""

    @abstractmethod
    def first_step_key(self) -> str:
        """Return the key of the step the run starts from."""

    def before_step(self, step_key: str) -> None:
        pass

    def after_step(self, step_key: str) -> None:
        pass

    def error(self) -> Exception | None:
        return self.last_error


__all__ = [
    "StepCode",
    "StepFunc",
    "StepFailedFunc",
    "StepConfig",
    "Task",
    "BaseTask",
]
