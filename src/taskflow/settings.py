"""Centralized settings for taskflow.

``TaskflowSettings`` reads ``TASKFLOW_*`` environment variables (and an
optional ``.env`` file) into one validated object.  The logging setup,
the OpenTelemetry tracer name and the default graph styling all come
from here, so a deployment can restyle diagrams or switch to JSON logs
without code changes.

Examples:
    >>> from taskflow.settings import get_settings
    >>> settings = get_settings()
    >>> settings.graph_finish_step_key
    'finish'

    Environment override::

        TASKFLOW_LOG_LEVEL=DEBUG TASKFLOW_GRAPH_DIRECTION=LR taskflow graph ...

Tags:
    settings, configuration, pydantic, environment, taskflow

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskflowSettings(BaseSettings):
    """taskflow configuration.

    Fields
    ──────
    log_level      : structlog level
    log_json       : JSON output; ``None`` auto-detects (JSON when not a tty)
    service_name   : ``service.name`` stamped on every log line
    tracer_name    : OpenTelemetry instrumentation scope for step spans
    graph_*        : defaults for :class:`taskflow.graph.GraphConfig`
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_json: bool | None = Field(default=None)
    service_name: str = Field(default="taskflow")
    tracer_name: str = Field(default="taskflow")

    # ── Graph rendering ──────────────────────────────────────────
    graph_finish_step_key: str = Field(default="finish", min_length=1)
    graph_start_color: str = Field(default="#b57edc")
    graph_finish_color: str = Field(default="#74c365")
    graph_run_step_color: str = Field(default="#ff9966")
    graph_direction: Literal["TD", "TB", "BT", "LR", "RL"] = Field(default="TD")
    graph_sort_keys: bool = Field(default=False)


_settings_cache: dict[str, TaskflowSettings] = {}


def get_settings(*, _force_reload: bool = False) -> TaskflowSettings:
    """Load, validate, and cache a :class:`TaskflowSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = TaskflowSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (tests, config reloads)."""
    _settings_cache.clear()


__all__ = ["TaskflowSettings", "get_settings", "clear_settings_cache"]
