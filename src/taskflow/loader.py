"""Resolve ``'package.module:Attr'`` references to Task instances.

Used by the CLI so tasks defined in application code can be drawn
without writing a script.  The attribute may be a Task class, a
zero-argument factory returning a Task, or a ready Task instance.
"""

from __future__ import annotations

import importlib
from typing import Any

from taskflow.errors import TaskLoadError
from taskflow.task import Task


def resolve_ref(ref: str) -> Any:
    """Import and return the object identified by ``'module:qualname'``.

    Raises:
        TaskLoadError: malformed reference, unknown module or attribute.
    """
    module_path, _, attr_path = ref.partition(":")
    if not module_path or not attr_path:
        raise TaskLoadError(f"Invalid task ref (expected 'module:attr'): {ref!r}")

    try:
        mod = importlib.import_module(module_path)
    except ImportError as e:
        raise TaskLoadError(f"Cannot import module {module_path!r}: {e}", cause=e) from e

    obj: Any = mod
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TaskLoadError(f"{ref!r}: no attribute {part!r}", cause=e) from e
    return obj


def load_task(ref: str) -> Task:
    """Resolve ``ref`` and return a Task instance.

    Classes and factories are called without arguments.

    Raises:
        TaskLoadError: the reference cannot be resolved, construction
            fails, or the result does not implement the Task protocol.
    """
    obj = resolve_ref(ref)

    if isinstance(obj, type) or (callable(obj) and not isinstance(obj, Task)):
        try:
            obj = obj()
        except Exception as e:
            raise TaskLoadError(f"Cannot construct task from {ref!r}: {e!r}", cause=e) from e

    if not isinstance(obj, Task):
        raise TaskLoadError(f"{ref!r} resolved to {type(obj).__name__}, which is not a Task")
    return obj


__all__ = ["resolve_ref", "load_task"]
