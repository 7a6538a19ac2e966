#!/usr/bin/env python3
"""Tracing - one OpenTelemetry span per step attempt.

The Runner calls a span-start function around every step-function
call, retries included.  Spans are named "RunStep <key>", carry a
"StepCode" event and are marked ERROR when the attempt failed.

Requires the SDK for the console exporter:  pip install opentelemetry-sdk

Run: python examples/01_basics/03_tracing.py
"""
import importlib.util
from pathlib import Path

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from taskflow import Runner
from taskflow.tracing import otel_start_span

_spec = importlib.util.spec_from_file_location("order_task", Path(__file__).with_name("01_order_task.py"))
order_task = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(order_task)


def main() -> None:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    runner = Runner(start_span=otel_start_span(provider.get_tracer("examples.orders")))
    runner.run_task(order_task.OrderTask(), order_task.Order("widget", 2), order_task.Receipt())

    provider.shutdown()


if __name__ == "__main__":
    main()
