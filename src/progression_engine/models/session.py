"""Workout session — one execution instance of a plan."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from progression_engine.models.enums import SessionStatus


@dataclass(frozen=True)
class WorkoutSession:
    """Session row. Never mutated once ``status`` is COMPLETED."""

    user_id: str
    plan_id: str
    started_at: datetime
    status: SessionStatus = SessionStatus.IN_PROGRESS
    ended_at: datetime | None = None
    exp_earned: int = 0
    id: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED
