from __future__ import annotations

from html import escape

from routine_viewer.models.plan import DayRoutine, Exercise


def exercise_line(exercise: Exercise) -> str:
    return f"{exercise.name} · {exercise.sets} Series · {exercise.reps} Reps"


def exercise_count_label(day: DayRoutine) -> str:
    n = len(day.exercises)
    return f"{n} Ejercicio Total" if n == 1 else f"{n} Ejercicios Totales"


def render_day_card(day: DayRoutine) -> str:
    """HTML for one day: label, title, numbered exercise rows, total count."""
    rows = []
    for idx, ex in enumerate(day.exercises, start=1):
        rows.append(
            "<div class='ex-row'>"
            f"<div class='ex-num'>{idx}</div>"
            "<div>"
            f"<div class='ex-name'>{escape(ex.name)}</div>"
            f"<div class='ex-meta'><span class='chip'>{ex.sets} Series</span>"
            f"<span class='chip'>{escape(ex.reps)} Reps</span></div>"
            "</div>"
            "</div>"
        )
    if not rows:
        rows.append("<div class='ex-empty'>Día de descanso</div>")
    return (
        "<div class='day-card'>"
        "<div class='day-head'>"
        f"<div class='day-label'>{escape(day.day)}</div>"
        f"<h2 class='day-title'>{escape(day.title)}</h2>"
        "</div>"
        f"<div class='ex-list'>{''.join(rows)}</div>"
        f"<div class='day-foot'>{exercise_count_label(day)}</div>"
        "</div>"
    )
