"""EXP award formula for completed exercises."""

from __future__ import annotations

from typing import Iterable

from progression_engine.exceptions import ValidationError
from progression_engine.models.enums import EXP_BASE_PER_SET, Difficulty
from progression_engine.models.plan import PlanItem


def calculate_exp(difficulty: Difficulty | str, sets: int, reps: int | None = None) -> int:
    """EXP earned for one exercise: ``base(difficulty) * sets``.

    Reps are accepted for call-site symmetry but do not enter the formula.

    Args:
        difficulty: Exercise difficulty (enum or its stored string value).
        sets: Number of sets completed.
        reps: Ignored.

    Returns:
        Integer EXP award.
    """
    if sets < 0:
        raise ValidationError(f"sets must be non-negative, got {sets}")
    try:
        tier = Difficulty(difficulty)
    except ValueError as exc:
        raise ValidationError(f"Unknown difficulty: {difficulty!r}") from exc
    return EXP_BASE_PER_SET[tier] * sets


def total_exp(items: Iterable[PlanItem]) -> int:
    """Sum ``calculate_exp`` over checked-off plan items."""
    return sum(
        calculate_exp(item.exercise.difficulty, item.sets, item.reps) for item in items
    )
