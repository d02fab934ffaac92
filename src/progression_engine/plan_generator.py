"""Rule-based workout plan generation from profile attributes."""

from __future__ import annotations

import logging
from typing import Iterable

from progression_engine.exceptions import ValidationError
from progression_engine.models.enums import (
    BEGINNER_REPS,
    BEGINNER_SETS,
    DEFAULT_MUSCLE_GROUPS,
    DEFAULT_PLAN_NAME,
    FOCUS_AREA_MUSCLE_GROUPS,
    PLAN_EXERCISE_COUNT,
    STANDARD_REPS,
    STANDARD_SETS,
    FitnessLevel,
    MuscleGroup,
)
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import PlanItem, WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.stores import ExerciseCatalog, PlanStore, ProfileStore, UnitOfWork

logger = logging.getLogger(__name__)

_REQUIRED_ATTRIBUTES = ("focus_area", "fitness_level")


def muscle_groups_for(focus_area: str) -> frozenset[MuscleGroup]:
    """Eligible muscle groups for a focus area; unmapped values get Full Body."""
    return FOCUS_AREA_MUSCLE_GROUPS.get(focus_area, DEFAULT_MUSCLE_GROUPS)


def volume_for(fitness_level: str) -> tuple[int, int]:
    """(sets, reps) prescribed for every item at a fitness level."""
    if fitness_level == FitnessLevel.BEGINNER.value:
        return BEGINNER_SETS, BEGINNER_REPS
    return STANDARD_SETS, STANDARD_REPS


def validate_profile(profile: Profile) -> None:
    """Raise ValidationError if a generation attribute is missing."""
    missing = [name for name in _REQUIRED_ATTRIBUTES if not getattr(profile, name)]
    if missing:
        raise ValidationError(
            f"Profile {profile.user_id} is missing required attributes: {', '.join(missing)}"
        )


def select_plan_items(
    exercises: Iterable[Exercise],
    focus_area: str,
    fitness_level: str,
    count: int = PLAN_EXERCISE_COUNT,
) -> list[PlanItem]:
    """Pick and prescribe the plan's exercises.

    Exercises outside the focus area's muscle groups are dropped, the rest
    are ordered by (name, id) so the selection is reproducible, and the
    first ``count`` become plan items.

    Args:
        exercises: Candidate catalog exercises.
        focus_area: Profile focus area, e.g. "Full Body".
        fitness_level: Profile fitness level, e.g. "Beginner".
        count: Maximum number of items.

    Returns:
        Plan items with ``order_index`` 0..n-1. Empty if nothing matches.
    """
    groups = muscle_groups_for(focus_area)
    eligible = sorted(
        (ex for ex in exercises if ex.muscle_group in groups),
        key=lambda ex: (ex.name, ex.id),
    )
    sets, reps = volume_for(fitness_level)
    return [
        PlanItem(exercise=ex, sets=sets, reps=reps, order_index=index)
        for index, ex in enumerate(eligible[:count])
    ]


class PlanGenerator:
    """Builds and persists a user's active plan from their profile.

    Usage:
        generator = PlanGenerator(profiles=store, catalog=store, plans=store, uow=store)
        plan = generator.generate("user-1")
    """

    def __init__(
        self,
        profiles: ProfileStore,
        catalog: ExerciseCatalog,
        plans: PlanStore,
        uow: UnitOfWork,
        count: int = PLAN_EXERCISE_COUNT,
    ) -> None:
        self.profiles = profiles
        self.catalog = catalog
        self.plans = plans
        self.uow = uow
        self.count = count

    def generate(self, user_id: str, name: str = DEFAULT_PLAN_NAME) -> WorkoutPlan:
        """Create a new active plan for ``user_id``.

        The previous active plan (if any) is deactivated in the same unit
        of work. A plan with zero items is returned when the catalog has
        nothing eligible.

        Raises:
            NotFound: The profile does not exist.
            ValidationError: focus_area or fitness_level is missing.
        """
        profile = self.profiles.get_profile(user_id)
        validate_profile(profile)
        focus_area: str = profile.focus_area  # type: ignore[assignment]
        fitness_level: str = profile.fitness_level  # type: ignore[assignment]

        candidates = self.catalog.list_by_muscle_groups(muscle_groups_for(focus_area))
        items = select_plan_items(candidates, focus_area, fitness_level, self.count)

        with self.uow.atomic():
            plan = self.plans.create_plan(user_id, name)
            if items:
                plan = self.plans.add_items(plan.id, items)

        if plan.is_empty:
            logger.warning(
                "No exercises found for focus_area=%r; created empty plan %s",
                profile.focus_area,
                plan.id,
            )
        else:
            logger.info(
                "Generated plan %s for %s with %d items", plan.id, user_id, len(plan.items)
            )
        return plan


def filter_exercises(
    exercises: Iterable[Exercise],
    muscle_group: MuscleGroup | None = None,
    query: str = "",
) -> list[Exercise]:
    """Catalog browsing: filter by muscle group and name substring, sorted by name."""
    needle = query.strip().lower()
    result = [
        ex
        for ex in exercises
        if (muscle_group is None or ex.muscle_group == muscle_group)
        and (not needle or needle in ex.name.lower())
    ]
    return sorted(result, key=lambda ex: ex.name)
