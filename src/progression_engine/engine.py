"""ProgressionEngine — the facade that wires the components over one store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable

from progression_engine.math.ranks import rank_for_level, rank_name
from progression_engine.models.enums import MuscleGroup, RankTier
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.models.progress import StreakResult
from progression_engine.models.session import WorkoutSession
from progression_engine.plan_generator import PlanGenerator, filter_exercises
from progression_engine.session import ExerciseLogResult, SessionLifecycle, SessionOutcome
from progression_engine.shop import OwnedItem, PurchaseReceipt, ShopEconomy
from progression_engine.stores import ProgressionStore
from progression_engine.streak_tracker import StreakTracker


@dataclass(frozen=True)
class ProfileStatus:
    """Dashboard summary of a profile."""

    profile: Profile
    rank: RankTier
    rank_name: str
    progress_fraction: float


class ProgressionEngine:
    """Single entry point for plan generation, sessions, the shop and streaks.

    Usage:
        engine = ProgressionEngine(store)
        engine.generate_plan("user-1")
        session = engine.start_workout("user-1")
        outcome = engine.finish_workout(session.id, checked_item_ids)
    """

    def __init__(
        self,
        store: ProgressionStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.clock = clock
        self.plans = PlanGenerator(profiles=store, catalog=store, plans=store, uow=store)
        self.sessions = SessionLifecycle(
            profiles=store, plans=store, sessions=store, uow=store, clock=clock
        )
        self.shop = ShopEconomy(profiles=store, shop=store, uow=store)
        self.streaks = StreakTracker(profiles=store, uow=store)

    # ------------------------------------------------------------------
    # Plans
    # ------------------------------------------------------------------

    def generate_plan(self, user_id: str) -> WorkoutPlan:
        return self.plans.generate(user_id)

    def active_plan(self, user_id: str) -> WorkoutPlan | None:
        return self.store.get_active_plan(user_id)

    def browse_exercises(
        self, muscle_group: MuscleGroup | None = None, query: str = ""
    ) -> list[Exercise]:
        return filter_exercises(self.store.list_exercises(), muscle_group, query)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start_workout(self, user_id: str) -> WorkoutSession:
        return self.sessions.start(user_id)

    def finish_workout(self, session_id: str, checked_item_ids: Iterable[str]) -> SessionOutcome:
        return self.sessions.finish(session_id, checked_item_ids)

    def log_exercise(
        self, user_id: str, exercise: Exercise, sets: int, reps: int
    ) -> ExerciseLogResult:
        return self.sessions.log_exercise(user_id, exercise, sets, reps)

    def todays_session(self, user_id: str) -> WorkoutSession | None:
        return self.sessions.todays_session(user_id)

    # ------------------------------------------------------------------
    # Shop
    # ------------------------------------------------------------------

    def purchase(self, user_id: str, item_id: str) -> PurchaseReceipt:
        return self.shop.purchase(user_id, item_id)

    def inventory(self, user_id: str) -> list[OwnedItem]:
        return self.shop.inventory(user_id)

    # ------------------------------------------------------------------
    # Streaks & status
    # ------------------------------------------------------------------

    def check_streak(self, user_id: str, today: date | None = None) -> StreakResult:
        return self.streaks.check(user_id, today or self.clock().date())

    def status(self, user_id: str) -> ProfileStatus:
        profile = self.store.get_profile(user_id)
        return ProfileStatus(
            profile=profile,
            rank=rank_for_level(profile.level),
            rank_name=rank_name(profile.level),
            progress_fraction=profile.progress_fraction,
        )
