"""
Shared pytest fixtures and configuration for taskflow tests.

This module provides:
- Settings / logging-context cleanup for test isolation
- A sleep recorder so retry delays never block
- A ``make_task`` factory for ad-hoc step graphs

The demo tasks live in ``tests/demo_tasks.py`` so the loader and CLI
tests can import them by ``module:attr`` reference.
"""

import sys
from collections.abc import Callable, Generator, Mapping
from pathlib import Path

import pytest
import structlog

# Ensure taskflow and the demo task module are importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from demo_tasks import FuncTask
from taskflow.settings import clear_settings_cache
from taskflow.task import StepConfig


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so env monkeypatching takes effect."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry delays instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr("taskflow.runner.time.sleep", recorded.append)
    return recorded


# =============================================================================
# Task Factories
# =============================================================================


@pytest.fixture
def make_task() -> Callable[..., FuncTask]:
    """Build a :class:`FuncTask` from ``{key: StepConfig}``."""

    def _make(step_config_map: Mapping[str, StepConfig], first_step_key: str = "first") -> FuncTask:
        return FuncTask(step_config_map, first_step_key)

    return _make
