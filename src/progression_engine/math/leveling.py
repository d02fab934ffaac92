"""Leveling curve: resolves an EXP award against the current level state.

The curve is geometric. Each level costs 1.2x the previous one, floored to
an integer:

    100, 120, 144, 172, 206, 247, ...

The floor is computed with integer arithmetic so the curve is bit-for-bit
reproducible regardless of float rounding.
"""

from __future__ import annotations

from progression_engine.exceptions import ValidationError
from progression_engine.models.enums import (
    LEVEL_GROWTH_DENOMINATOR,
    LEVEL_GROWTH_NUMERATOR,
    STARTING_LEVEL,
)
from progression_engine.models.progress import LevelResult, LevelState


def next_threshold(exp_to_next_level: int) -> int:
    """Grow a level threshold by the fixed x1.2 factor, floored.

    Args:
        exp_to_next_level: The threshold of the level just completed.

    Returns:
        The threshold for the following level.
    """
    return exp_to_next_level * LEVEL_GROWTH_NUMERATOR // LEVEL_GROWTH_DENOMINATOR


def apply_exp(state: LevelState, award: int) -> LevelResult:
    """Add an EXP award and roll over as many levels as it pays for.

    While ``exp >= exp_to_next_level`` the threshold is subtracted, the
    level increments and the threshold grows. Post-condition:
    ``result.state.exp < result.state.exp_to_next_level``.

    Args:
        state: Current (exp, level, exp_to_next_level).
        award: Non-negative EXP to add. 0 is a no-op.

    Returns:
        A LevelResult with the new state and the level before the award.

    Raises:
        ValidationError: If the award is negative or the state is malformed.
    """
    if award < 0:
        raise ValidationError(f"EXP award must be non-negative, got {award}")
    if state.exp_to_next_level <= 0:
        raise ValidationError(
            f"exp_to_next_level must be positive, got {state.exp_to_next_level}"
        )
    if state.level < STARTING_LEVEL or state.exp < 0:
        raise ValidationError(f"Invalid level state: {state}")

    exp = state.exp + award
    level = state.level
    threshold = state.exp_to_next_level

    while exp >= threshold:
        exp -= threshold
        level += 1
        threshold = next_threshold(threshold)

    return LevelResult(
        state=LevelState(exp=exp, level=level, exp_to_next_level=threshold),
        previous_level=state.level,
        award=award,
    )
