"""User profile — the durable per-user progression record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from progression_engine.models.enums import STARTING_EXP_TO_NEXT_LEVEL, STARTING_LEVEL
from progression_engine.models.progress import LevelState, StreakState


@dataclass(frozen=True)
class Profile:
    """Immutable snapshot of a user's profile row.

    The store owns the authoritative copy. ``version`` is bumped by the
    store on every write and is the token for conditional updates.
    """

    user_id: str

    # Progression
    level: int = STARTING_LEVEL
    exp: int = 0
    exp_to_next_level: int = STARTING_EXP_TO_NEXT_LEVEL

    # Streak
    streak_current: int = 0
    streak_freeze_count: int = 0
    last_streak_date: date | None = None

    # Plan generation inputs
    focus_area: str | None = None
    fitness_level: str | None = None
    workout_days: tuple[str, ...] = field(default_factory=tuple)

    # Onboarding attributes (not used by the engine)
    username: str | None = None
    workout_reason: str | None = None
    activity_level: str | None = None
    gender: str | None = None
    age: int | None = None
    height: float | None = None
    weight: float | None = None
    target_weight: float | None = None
    workout_time: str | None = None

    version: int = 0

    @property
    def level_state(self) -> LevelState:
        return LevelState(
            exp=self.exp,
            level=self.level,
            exp_to_next_level=self.exp_to_next_level,
        )

    @property
    def streak_state(self) -> StreakState:
        return StreakState(
            streak_current=self.streak_current,
            streak_freeze_count=self.streak_freeze_count,
            last_streak_date=self.last_streak_date,
        )

    @property
    def progress_fraction(self) -> float:
        """Fraction of the current level already earned, 0.0-1.0."""
        return min(self.exp / self.exp_to_next_level, 1.0)
