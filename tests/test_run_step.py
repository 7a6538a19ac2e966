"""Tests for RunStep and the run trace JSON form."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from taskflow import RunStep, TraceDecodeError, run_steps_from_json, run_steps_to_json
from taskflow.errors import ErrorCategory


class TestRunStep:
    def test_construct_by_name_or_alias(self):
        by_name = RunStep(step_key="first", step_code="SUCCESS")
        by_alias = RunStep(StepKey="first", StepCode="SUCCESS")

        assert by_name == by_alias

    def test_to_dict_uses_wire_names(self):
        assert RunStep(step_key="first", step_code="SUCCESS").to_dict() == {
            "StepKey": "first",
            "StepCode": "SUCCESS",
        }

    def test_frozen(self):
        run_step = RunStep(step_key="first", step_code="SUCCESS")

        with pytest.raises(ValidationError):
            run_step.step_code = "FAILURE"

    def test_str(self):
        assert str(RunStep(step_key="first", step_code="JUMP1")) == "first:JUMP1"


class TestEncode:
    def test_wire_format(self):
        data = run_steps_to_json([RunStep(step_key="first", step_code="SUCCESS")])

        assert json.loads(data) == [{"StepKey": "first", "StepCode": "SUCCESS"}]

    def test_empty_trace(self):
        assert json.loads(run_steps_to_json([])) == []

    def test_round_trip_keeps_order_and_repeats(self):
        trace = [
            RunStep(step_key="first", step_code=""),
            RunStep(step_key="first", step_code="JUMP1"),
            RunStep(step_key="jump", step_code="SUCCESS"),
        ]

        assert run_steps_from_json(run_steps_to_json(trace, indent=2)) == trace


class TestDecode:
    def test_decodes_bytes_and_whitespace(self):
        data = b"""
        [
            {"StepKey": "first", "StepCode": "JUMP1"},
            {"StepKey": "jump", "StepCode": "SUCCESS"}
        ]
        """

        assert run_steps_from_json(data) == [
            RunStep(step_key="first", step_code="JUMP1"),
            RunStep(step_key="jump", step_code="SUCCESS"),
        ]

    def test_null_is_empty_trace(self):
        assert run_steps_from_json("null") == []
        assert run_steps_from_json(b" null ") == []

    def test_extra_fields_ignored(self):
        data = '[{"StepKey": "a", "StepCode": "b", "Attempts": 3}]'

        assert run_steps_from_json(data) == [RunStep(step_key="a", step_code="b")]

    @pytest.mark.parametrize(
        "data",
        [
            "",
            "{not json",
            '{"StepKey": "a", "StepCode": "b"}',
            '[{"StepKey": "a"}]',
            '[{"StepKey": 1, "StepCode": "b"}]',
            '[{"StepKey": "a", "StepCode": null}]',
            '["first"]',
        ],
    )
    def test_malformed_raises(self, data):
        with pytest.raises(TraceDecodeError) as exc_info:
            run_steps_from_json(data)

        assert exc_info.value.category == ErrorCategory.PARSE
        assert exc_info.value.cause is not None
