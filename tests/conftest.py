from __future__ import annotations

from typing import Iterator

import pytest

from routine_viewer.config import get_settings
from routine_viewer.models import DayRoutine, Exercise, WorkoutPlan


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_plan(days: int = 3) -> WorkoutPlan:
    labels = ["Lunes", "Miércoles", "Viernes", "Sábado", "Domingo"]
    return [
        DayRoutine(
            day=labels[i % len(labels)],
            title=f"Sesión {i + 1}",
            exercises=[
                Exercise(name="Sentadilla", sets=4, reps="8-10"),
                Exercise(name="Press Banca", sets=3, reps="12"),
            ],
        )
        for i in range(days)
    ]


@pytest.fixture
def plan() -> WorkoutPlan:
    return make_plan(3)


@pytest.fixture
def plan_factory():
    return make_plan
