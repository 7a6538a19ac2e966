#!/usr/bin/env python3
"""Order Task - routing steps by result code.

HOW A TASK RUNS
───────────────
Every step returns a code.  The step's route map turns the code into
the key of the next step; an empty key (or a code with no route) ends
the run.  The Runner records one RunStep per executed step.

ARCHITECTURE
────────────
    reserve ──SUCCESS──▶ charge ──SUCCESS──▶ (end)
       │                   │
       │ OUT_OF_STOCK      │ FAILURE
       ▼                   ▼
    backorder ──▶ (end)  release ──▶ (end)

    A step reports:
    • return "SUCCESS"                       → routed normally
    • raise StepError("timeout")             → retried, then FAILURE
    • raise StepError("...", code="X")       → routed on X at once
    • any other exception                    → FAILURE, never retried

Run: python examples/01_basics/01_order_task.py

See Also:
    02_trace_graph - draw the executed path as Mermaid
"""
from dataclasses import dataclass, field

from taskflow import BaseTask, Runner, StepCode, StepConfig, StepError, TaskContext
from taskflow.logging import configure_logging


@dataclass
class Order:
    sku: str
    quantity: int
    in_stock: int = 10


@dataclass
class Receipt:
    status: str = "pending"
    notes: list[str] = field(default_factory=list)


class OrderTask(BaseTask):
    name = "order"
    input_type = Order
    output_type = Receipt

    def __init__(self) -> None:
        super().__init__()
        self.charge_attempts = 0

    def step_config_map(self):
        return {
            "reserve": StepConfig(
                step_func=self.reserve,
                route_map={StepCode.SUCCESS: "charge", "OUT_OF_STOCK": "backorder"},
            ),
            "charge": StepConfig(
                step_func=self.charge,
                retry_count=2,
                retry_delay=0.1,
                step_failed_func=self.on_failed,
                route_map={StepCode.SUCCESS: "", StepCode.FAILURE: "release"},
            ),
            "backorder": StepConfig(step_func=self.backorder),
            "release": StepConfig(step_func=self.release),
        }

    def first_step_key(self) -> str:
        return "reserve"

    def reserve(self, ctx: TaskContext) -> str:
        if self.input.quantity > self.input.in_stock:
            raise StepError(f"only {self.input.in_stock} left", code="OUT_OF_STOCK")
        self.output.notes.append(f"reserved {self.input.quantity} x {self.input.sku}")
        return StepCode.SUCCESS

    def charge(self, ctx: TaskContext) -> str:
        self.charge_attempts += 1
        if self.charge_attempts == 1:
            raise StepError("payment gateway timeout")
        self.output.status = "paid"
        return StepCode.SUCCESS

    def backorder(self, ctx: TaskContext) -> str:
        self.output.status = "backordered"
        return StepCode.SUCCESS

    def release(self, ctx: TaskContext) -> str:
        self.output.status = "released"
        return StepCode.SUCCESS

    def on_failed(self, step_key: str, err: Exception | None) -> None:
        self.last_error = err


def main() -> None:
    configure_logging(level="WARNING", json_format=False)

    for order in (Order("widget", 2), Order("widget", 50)):
        runner = Runner()
        task, receipt = OrderTask(), Receipt()
        runner.run_task(task, order, receipt)

        print(f"\n  order {order.quantity} x {order.sku}: {receipt.status}")
        for run_step in runner.run_steps:
            print(f"    {run_step.step_key:<10} {run_step.step_code}")
        if task.error():
            print(f"    error: {task.error()}")


if __name__ == "__main__":
    main()
