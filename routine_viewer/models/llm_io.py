from __future__ import annotations

from typing import List
from pydantic import BaseModel, Field

from .plan import DayRoutine


class PlanEditResponse(BaseModel):
    # Strict structured output needs an object root; the array is the plan itself
    plan: List[DayRoutine] = Field(..., min_length=1)
