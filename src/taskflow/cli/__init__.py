"""
taskflow CLI - ``taskflow graph``, ``taskflow trace``, ``taskflow config``.

Entry point: ``taskflow = "taskflow.cli.app:app"``
"""
