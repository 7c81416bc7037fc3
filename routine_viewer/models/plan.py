from __future__ import annotations

from typing import List
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class Exercise(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    sets: int = Field(..., ge=1)
    reps: str = Field(..., description="Free-form, e.g. '10' or '8-12'")

    @field_validator("reps", mode="before")
    @classmethod
    def _reps_as_text(cls, v: object) -> object:
        # Hand-written URLs often carry "reps": 12
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v


class DayRoutine(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: str
    title: str
    exercises: List[Exercise]


WorkoutPlan = List[DayRoutine]

PLAN_ADAPTER: TypeAdapter[List[DayRoutine]] = TypeAdapter(List[DayRoutine])


def validate_plan(data: object) -> WorkoutPlan:
    """Validate raw JSON data into a plan. Raises ``ValueError`` when it is not
    a non-empty array of day objects."""
    if not isinstance(data, list) or not data:
        raise ValueError("plan must be a non-empty JSON array")
    return PLAN_ADAPTER.validate_python(data)


def dump_plan(plan: WorkoutPlan) -> list:
    return PLAN_ADAPTER.dump_python(plan, mode="json")
