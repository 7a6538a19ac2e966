"""Run trace records and their JSON form.

The runner appends one :class:`RunStep` per executed step, in execution
order; the same key can appear several times when routes loop or jump
back.  The serialized form is a JSON array of objects with exactly two
string fields, ``StepKey`` and ``StepCode``::

    [
        {"StepKey": "first", "StepCode": "SUCCESS"},
        {"StepKey": "second", "StepCode": "JUMP2"}
    ]
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from taskflow.errors import TraceDecodeError


class RunStep(BaseModel):
    """One executed step and the code it finished with."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    step_key: str = Field(alias="StepKey")
    step_code: str = Field(alias="StepCode")

    def to_dict(self) -> dict[str, str]:
        """Serialize with the wire field names."""
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        return f"{self.step_key}:{self.step_code}"


_RUN_STEPS = TypeAdapter(list[RunStep])
_RUN_STEPS_OR_NULL = TypeAdapter(list[RunStep] | None)


def run_steps_to_json(run_steps: Iterable[RunStep], *, indent: int | None = None) -> str:
    """Encode a run trace as a JSON array."""
    return _RUN_STEPS.dump_json(list(run_steps), by_alias=True, indent=indent).decode()


def run_steps_from_json(data: str | bytes) -> list[RunStep]:
    """Decode a JSON run trace; ``null`` decodes to an empty trace.

    Raises:
        TraceDecodeError: invalid JSON, not an array, or an entry missing
            ``StepKey``/``StepCode`` or holding a non-string value.
    """
    try:
        return _RUN_STEPS_OR_NULL.validate_json(data) or []
    except ValidationError as exc:
        raise TraceDecodeError(
            f"invalid run steps json: {exc.error_count()} error(s): {exc.errors()[0]['msg']}",
            cause=exc,
        ) from exc


__all__ = ["RunStep", "run_steps_to_json", "run_steps_from_json"]
