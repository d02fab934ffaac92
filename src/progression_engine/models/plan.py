"""Workout plan models: PlanItem and WorkoutPlan."""

from __future__ import annotations

from dataclasses import dataclass, field

from progression_engine.models.enums import DEFAULT_PLAN_NAME, DEFAULT_REST_SECONDS
from progression_engine.models.exercise import Exercise


@dataclass(frozen=True)
class PlanItem:
    """One prescribed exercise within a plan.

    ``id`` is None until the plan store has persisted the item.
    """

    exercise: Exercise
    sets: int
    reps: int
    order_index: int
    rest_seconds: int = DEFAULT_REST_SECONDS
    id: str | None = None


@dataclass(frozen=True)
class WorkoutPlan:
    """An ordered list of plan items owned by one user."""

    id: str
    user_id: str
    name: str = DEFAULT_PLAN_NAME
    items: tuple[PlanItem, ...] = field(default_factory=tuple)
    is_active: bool = True

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def ordered_items(self) -> tuple[PlanItem, ...]:
        """Items sorted by ``order_index``."""
        return tuple(sorted(self.items, key=lambda i: i.order_index))

    def item_by_id(self, item_id: str) -> PlanItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None
