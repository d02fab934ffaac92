"""Workout session lifecycle: NoSession -> InProgress -> Completed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable

from progression_engine.exceptions import InvalidSessionState, NotFound, ValidationError
from progression_engine.math.exp import calculate_exp, total_exp
from progression_engine.math.leveling import apply_exp
from progression_engine.math.streak import record_completion
from progression_engine.models.enums import SessionStatus
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import PlanItem, WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.models.progress import LevelResult, StreakResult
from progression_engine.models.session import WorkoutSession
from progression_engine.stores import PlanStore, ProfileStore, SessionStore, UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionOutcome:
    """Everything that changed when a session was finished."""

    session: WorkoutSession
    profile: Profile
    level: LevelResult
    streak: StreakResult

    @property
    def exp_earned(self) -> int:
        return self.session.exp_earned


@dataclass(frozen=True)
class ExerciseLogResult:
    """Result of logging a single free-choice exercise."""

    exp_earned: int
    profile: Profile
    level: LevelResult


def _level_fields(result: LevelResult) -> dict[str, int]:
    return {
        "exp": result.state.exp,
        "level": result.state.level,
        "exp_to_next_level": result.state.exp_to_next_level,
    }


class SessionLifecycle:
    """Drives a session through its plan and settles EXP and streak.

    Finishing is a single unit of work: the session row, the level state
    and the streak counters commit together or not at all. On failure the
    session remains in_progress and the error propagates for retry.
    """

    def __init__(
        self,
        profiles: ProfileStore,
        plans: PlanStore,
        sessions: SessionStore,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.profiles = profiles
        self.plans = plans
        self.sessions = sessions
        self.uow = uow
        self.clock = clock

    def start(self, user_id: str) -> WorkoutSession:
        """Open an in_progress session against the user's active plan.

        Raises:
            NotFound: The user has no active plan.
        """
        plan = self.plans.get_active_plan(user_id)
        if plan is None:
            raise NotFound(f"No active plan for user {user_id}")

        session = self.sessions.create_session(
            WorkoutSession(
                user_id=user_id,
                plan_id=plan.id,
                started_at=self.clock(),
                status=SessionStatus.IN_PROGRESS,
            )
        )
        logger.info("Started session %s on plan %s for %s", session.id, plan.id, user_id)
        return session

    def finish(self, session_id: str, checked_item_ids: Iterable[str]) -> SessionOutcome:
        """Complete a session, award EXP for the checked-off items and credit the streak.

        Args:
            session_id: The in_progress session to finish.
            checked_item_ids: Plan item ids the user marked as done.

        Raises:
            NotFound: Unknown session, plan or profile.
            InvalidSessionState: The session is already completed.
            ValidationError: A checked id is not an item of the session's plan.
            TransportError: A write failed; nothing was committed.
        """
        checked = set(checked_item_ids)
        now = self.clock()

        with self.uow.atomic():
            session = self.sessions.get_session(session_id)
            if session.status != SessionStatus.IN_PROGRESS:
                raise InvalidSessionState(session_id, session.status.value)

            plan = self.plans.get_plan(session.plan_id)
            earned = total_exp(self._checked_items(plan, checked))

            finished = self.sessions.update_session(
                session_id,
                {
                    "status": SessionStatus.COMPLETED,
                    "ended_at": now,
                    "exp_earned": earned,
                },
            )

            profile = self.profiles.get_profile(session.user_id)
            level = apply_exp(profile.level_state, earned)
            streak = record_completion(profile.streak_state, now.date())

            fields: dict[str, object] = _level_fields(level)
            fields.update(
                streak_current=streak.state.streak_current,
                streak_freeze_count=streak.state.streak_freeze_count,
                last_streak_date=streak.state.last_streak_date,
            )
            updated = self.profiles.update_profile(
                session.user_id, fields, expected_version=profile.version
            )

        logger.info(
            "Finished session %s: +%d EXP, level %d, streak %d (%s)",
            session_id,
            earned,
            updated.level,
            updated.streak_current,
            streak.action.value,
        )
        if level.leveled_up:
            logger.info("User %s reached level %d", session.user_id, updated.level)
        return SessionOutcome(session=finished, profile=updated, level=level, streak=streak)

    def log_exercise(
        self, user_id: str, exercise: Exercise, sets: int, reps: int
    ) -> ExerciseLogResult:
        """Award EXP for one freely chosen exercise. No session, no streak credit."""
        earned = calculate_exp(exercise.difficulty, sets, reps)
        with self.uow.atomic():
            profile = self.profiles.get_profile(user_id)
            level = apply_exp(profile.level_state, earned)
            updated = self.profiles.update_profile(
                user_id, _level_fields(level), expected_version=profile.version
            )
        logger.info("User %s logged %s: +%d EXP", user_id, exercise.name, earned)
        return ExerciseLogResult(exp_earned=earned, profile=updated, level=level)

    def todays_session(self, user_id: str, today: date | None = None) -> WorkoutSession | None:
        """Most recent session started today, if any."""
        day = today or self.clock().date()
        todays = [s for s in self.sessions.list_sessions(user_id) if s.started_at.date() == day]
        return max(todays, key=lambda s: s.started_at, default=None)

    @staticmethod
    def _checked_items(plan: WorkoutPlan, checked: set[str]) -> list[PlanItem]:
        found = {item_id: plan.item_by_id(item_id) for item_id in checked}
        unknown = sorted(item_id for item_id, item in found.items() if item is None)
        if unknown:
            raise ValidationError(f"Items {unknown} are not part of plan {plan.id}")
        return [item for item in plan.ordered_items() if item.id in found]
