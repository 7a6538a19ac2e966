"""
Task Context - the carrier threaded through every step call.

A ``TaskContext`` bundles what a step function needs from its
surroundings without coupling it to the runner: a structured logger, the
run identifier, and the OpenTelemetry context of the enclosing span.
The runner hands it to each step; a tracing adapter may return a new
carrier (with the step span's context) that the step receives instead.

Design Principles:
- Copy-on-write: ``bind`` and ``with_trace_context`` return new carriers
- Business data lives on the Task, not here

Example:
    from taskflow import TaskContext

    def charge_card(self, ctx: TaskContext) -> str:
        ctx.logger.info("charge.start", amount=self.input.amount)
        ...
        return StepCode.SUCCESS

Tags:
    taskflow, context, logger, tracing

Doc-Types:
    api-reference
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any

from opentelemetry.context import Context as OtelContext

from taskflow.logging import get_logger


@dataclass(frozen=True)
class TaskContext:
    """
    Carrier passed to every step function.

    Attributes:
        run_id: Unique identifier for this run
        task_name: Name of the task being run
        logger: structlog logger, already bound to run/task fields by the runner
        trace_context: OpenTelemetry context of the current span (None outside tracing)
        metadata: Free-form caller data (request ids, tenant, dry-run flags)
    """

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    task_name: str = ""
    logger: Any = field(default_factory=lambda: get_logger("taskflow"))
    trace_context: OtelContext | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        task_name: str = "",
        *,
        run_id: str | None = None,
        logger: Any = None,
        metadata: dict[str, Any] | None = None,
    ) -> TaskContext:
        """
        Create a new context for one run.

        Args:
            task_name: Name of the task
            run_id: Optional run ID (generated if not provided)
            logger: Optional logger (defaults to the ``taskflow`` logger)
            metadata: Optional caller metadata
        """
        return cls(
            run_id=run_id or str(uuid.uuid4()),
            task_name=task_name,
            logger=logger if logger is not None else get_logger("taskflow"),
            metadata=dict(metadata or {}),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a metadata value."""
        return self.metadata.get(key, default)

    def bind(self, **fields: Any) -> TaskContext:
        """Return a new context whose logger carries ``fields``."""
        return replace(self, logger=self.logger.bind(**fields))

    def with_trace_context(self, trace_context: OtelContext | None) -> TaskContext:
        """Return a new context parented on ``trace_context``."""
        return replace(self, trace_context=trace_context)

    def with_metadata(self, **updates: Any) -> TaskContext:
        """Return a new context with metadata merged."""
        return replace(self, metadata={**self.metadata, **updates})

    def __repr__(self) -> str:
        return f"TaskContext(run_id={self.run_id!r}, task={self.task_name!r})"
