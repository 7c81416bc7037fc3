from .plan import Exercise, DayRoutine, WorkoutPlan, PLAN_ADAPTER, validate_plan, dump_plan
from .llm_io import PlanEditResponse

__all__ = [
    "Exercise",
    "DayRoutine",
    "WorkoutPlan",
    "PLAN_ADAPTER",
    "validate_plan",
    "dump_plan",
    "PlanEditResponse",
]
