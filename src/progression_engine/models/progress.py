"""Level and streak state snapshots passed through the pure math modules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from progression_engine.models.enums import StreakAction


@dataclass(frozen=True)
class LevelState:
    """The three numbers that define where a user sits on the leveling curve."""

    exp: int
    level: int
    exp_to_next_level: int


@dataclass(frozen=True)
class LevelResult:
    """Output of a single EXP award resolution."""

    state: LevelState
    previous_level: int
    award: int

    @property
    def leveled_up(self) -> bool:
        return self.state.level > self.previous_level

    @property
    def levels_gained(self) -> int:
        return self.state.level - self.previous_level


@dataclass(frozen=True)
class StreakState:
    """Streak counters as stored on the profile."""

    streak_current: int = 0
    streak_freeze_count: int = 0
    last_streak_date: date | None = None  # last day credited by a completion or a freeze


@dataclass(frozen=True)
class StreakResult:
    """Output of a streak check or completion."""

    state: StreakState
    action: StreakAction
    freezes_consumed: int = 0
    missed_days: int = 0
