"""
Structured logging for taskflow.

The runner emits dotted events (``task.start``, ``step.retry``,
``task.first_step_missing``) as key-value pairs.  Library code only
calls :func:`get_logger`; an application calls :func:`configure_logging`
once, and anything it leaves unset comes from :class:`TaskflowSettings`
(``TASKFLOW_LOG_LEVEL``, ``TASKFLOW_LOG_JSON``, ``TASKFLOW_SERVICE_NAME``).

Architecture:
    ::

        configure_logging()                 TASKFLOW_* settings fill gaps
            │
            ▼
        build_processors(json_format, add_timestamp)
          TimeStamper(iso, utc) ─► merge_contextvars ─► add_log_level
          ─► add_logger_name ─► ServiceMetadata(service) ─► renderer
                                                   JSONRenderer | ConsoleRenderer
            │
            ▼
        stdlib logging handlers (structlog.stdlib.LoggerFactory)

Examples:
    >>> from taskflow.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="billing-tasks")
    >>> get_logger(__name__).info("task.start", task="invoice")

    Fields scoped to a block, restored afterwards:

    >>> with LogContext(request_id="req-9"):
    ...     runner.run_task(task, order, receipt)

Tags:
    logging, structlog, observability, taskflow

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from taskflow.settings import get_settings


class ServiceMetadata:
    """Processor stamping ``service.name`` on every event."""

    def __init__(self, service: str):
        self.service = service

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", self.service)
        return event_dict


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def build_processors(
    *,
    json_format: bool,
    service: str = "taskflow",
    add_timestamp: bool = True,
) -> list[Processor]:
    """Return the processor chain used by :func:`configure_logging`."""
    processors: list[Processor] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        ServiceMetadata(service),
    ]

    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    return processors


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    service: str | None = None,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog (and the stdlib root logger) for the process.

    Args:
        level: Minimum level; defaults to ``settings.log_level``
        json_format: JSON lines when True, colored console when False.
            ``None`` uses ``settings.log_json`` and, if that is unset too,
            JSON whenever stdout is not a tty
        service: ``service.name`` value; defaults to ``settings.service_name``
        add_timestamp: Prefix events with an ISO-8601 UTC timestamp
    """
    settings = get_settings()
    min_level = _resolve_level(level if level is not None else settings.log_level)
    if json_format is None:
        json_format = settings.log_json
    if json_format is None:
        json_format = not sys.stdout.isatty()

    structlog.configure(
        processors=build_processors(
            json_format=json_format,
            service=service or settings.service_name,
            add_timestamp=add_timestamp,
        ),
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=min_level)


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, usually ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**fields: Any) -> None:
    """Attach ``fields`` to every later event in this context."""
    structlog.contextvars.bind_contextvars(**fields)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    Values bound before the block are restored on exit, so nested
    contexts may shadow a key temporarily.
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> LogContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


__all__ = [
    "ServiceMetadata",
    "build_processors",
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
