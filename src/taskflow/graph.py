"""Graph renderer - draw a task's routes as a Mermaid flowchart.

Every ``(code, next_step)`` pair of every step's route map becomes one
labelled edge.  An empty target is drawn as the synthetic finish node.
With a Run Trace supplied, edges whose ``(step_key, code)`` pair was
executed are drawn thick ("taken") and the rest dotted.

Architecture::

    Task.step_config_map()
        │  step key ─► route_map {code: next_step}
        ▼
    render_graph(task)                    first --SUCCESS--> second
    render_graph_with_trace(task, trace)  first ==SUCCESS==> second
                                          second -.JUMP2.-> jump
    render_graph_from_json(task, data)    (decodes the trace first)

    Node styles:
    - first step       → start color
    - traced step keys → visited color (trace graphs only)
    - finish node      → finish color

Edges follow the insertion order of the task's step map and route maps;
``GraphConfig(sort_keys=True)`` sorts both for byte-stable output.

Example::

    from taskflow.graph import render_graph

    print(render_graph(checkout, codes=["SUCCESS", "FAILURE"]))
    # ```mermaid
    # flowchart TD
    # reserve --SUCCESS--> charge
    # reserve --FAILURE--> release
    # charge --SUCCESS--> finish
    # style reserve fill:#b57edc
    # style finish fill:#74c365
    # ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from taskflow.run_step import RunStep, run_steps_from_json
from taskflow.settings import TaskflowSettings, get_settings
from taskflow.task import Task

_EdgeFunc = Callable[[str, str, str], str]


@dataclass(frozen=True)
class GraphConfig:
    """
    Styling of rendered graphs.

    Attributes:
        finish_step_key: Node name drawn for an empty route target
        start_style_color: Fill of the first step
        finish_style_color: Fill of the finish node
        run_step_style_color: Fill of every step present in a trace
        direction: Mermaid flowchart direction (TD, TB, BT, LR, RL)
        sort_keys: Sort step keys and codes instead of insertion order
    """

    finish_step_key: str = "finish"
    start_style_color: str = "#b57edc"
    finish_style_color: str = "#74c365"
    run_step_style_color: str = "#ff9966"
    direction: str = "TD"
    sort_keys: bool = False

    @classmethod
    def from_settings(cls, settings: TaskflowSettings | None = None) -> GraphConfig:
        """Build a config from the ``graph_*`` settings."""
        settings = settings or get_settings()
        return cls(
            finish_step_key=settings.graph_finish_step_key,
            start_style_color=settings.graph_start_color,
            finish_style_color=settings.graph_finish_color,
            run_step_style_color=settings.graph_run_step_color,
            direction=settings.graph_direction,
            sort_keys=settings.graph_sort_keys,
        )


def _graph_content(
    task: Task,
    codes: Iterable[str] | None,
    config: GraphConfig,
    edge: _EdgeFunc,
) -> list[str]:
    """One edge line per routed transition kept by the code filter."""
    code_filter = {codes} if codes and isinstance(codes, str) else set(codes or ())
    step_config_map = task.step_config_map()

    step_keys = list(step_config_map)
    if config.sort_keys:
        step_keys.sort()

    lines: list[str] = []
    for step_key in step_keys:
        route_map = step_config_map[step_key].route_map
        route_codes = list(route_map)
        if config.sort_keys:
            route_codes.sort()

        for code in route_codes:
            if code_filter and code not in code_filter:
                continue
            next_step_key = route_map[code] or config.finish_step_key
            lines.append(edge(step_key, code, next_step_key))
    return lines


def _style(step_key: str, color: str) -> str:
    return f"style {step_key} fill:{color}"


def _draw_graph(content: list[str], styles: list[str], config: GraphConfig) -> str:
    styles = styles + [_style(config.finish_step_key, config.finish_style_color)]
    body = "".join(f"{line}\n" for line in content + styles)
    return f"```mermaid\nflowchart {config.direction}\n{body}```"


def render_graph(
    task: Task,
    codes: Iterable[str] | None = None,
    config: GraphConfig | None = None,
) -> str:
    """Render the task's routes as Mermaid markup.

    Args:
        task: Task whose step map is drawn
        codes: Only draw edges with these codes (all when empty); a single string is one code
        config: Styling (defaults to ``GraphConfig()``)
    """
    config = config or GraphConfig()

    def edge(step_key: str, code: str, next_step_key: str) -> str:
        return f"{step_key} --{code}--> {next_step_key}"

    styles = [_style(task.first_step_key(), config.start_style_color)]
    return _draw_graph(_graph_content(task, codes, config, edge), styles, config)


def render_graph_with_trace(
    task: Task,
    run_steps: Iterable[RunStep],
    codes: Iterable[str] | None = None,
    config: GraphConfig | None = None,
) -> str:
    """Render the task's routes with an executed trace highlighted.

    An edge is drawn taken (``==code==>``) when the trace holds a RunStep
    for the same step key and code, de-emphasized (``-.code.->``)
    otherwise.
    """
    config = config or GraphConfig()
    run_steps = list(run_steps)
    taken = {(run_step.step_key, run_step.step_code) for run_step in run_steps}

    def edge(step_key: str, code: str, next_step_key: str) -> str:
        if (step_key, code) in taken:
            return f"{step_key} =={code}==> {next_step_key}"
        return f"{step_key} -.{code}.-> {next_step_key}"

    styles = [_style(task.first_step_key(), config.start_style_color)]
    visited: set[str] = set()
    for run_step in run_steps:
        if run_step.step_key in visited:
            continue
        visited.add(run_step.step_key)
        styles.append(_style(run_step.step_key, config.run_step_style_color))

    return _draw_graph(_graph_content(task, codes, config, edge), styles, config)


def render_graph_from_json(
    task: Task,
    data: str | bytes,
    codes: Iterable[str] | None = None,
    config: GraphConfig | None = None,
) -> str:
    """Decode a JSON run trace and render it with :func:`render_graph_with_trace`.

    Raises:
        TraceDecodeError: ``data`` is not a valid serialized trace
    """
    return render_graph_with_trace(task, run_steps_from_json(data), codes, config)


__all__ = ["GraphConfig", "render_graph", "render_graph_with_trace", "render_graph_from_json"]
