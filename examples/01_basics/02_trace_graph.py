#!/usr/bin/env python3
"""Trace Graph - drawing the executed path.

The same route maps that drive execution render as a Mermaid
flowchart.  With a run trace, executed edges are drawn thick and the
rest dotted; traced steps get the visited color.

    reserve ==SUCCESS==> charge        (taken)
    reserve -.OUT_OF_STOCK.-> backorder (not taken)

Traces round-trip through JSON ([{"StepKey": ..., "StepCode": ...}])
so a trace logged in production can be drawn later:

    taskflow graph shop.tasks:OrderTask --trace run.json

Run: python examples/01_basics/02_trace_graph.py
"""
import importlib.util
from pathlib import Path

from taskflow import GraphConfig, Runner, run_steps_to_json

_spec = importlib.util.spec_from_file_location("order_task", Path(__file__).with_name("01_order_task.py"))
order_task = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(order_task)


def main() -> None:
    runner = Runner(graph_config=GraphConfig(direction="LR"))
    task = order_task.OrderTask()
    runner.run_task(task, order_task.Order("widget", 2), order_task.Receipt())

    print("=== Task graph ===")
    print(runner.task_graph(task))

    data = run_steps_to_json(runner.run_steps)
    print("\n=== Run trace ===")
    print(data)

    print("\n=== Trace graph ===")
    print(runner.task_graph_run_steps_from_json(task, data))


if __name__ == "__main__":
    main()
