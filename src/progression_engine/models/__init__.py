"""Data models for the progression engine."""

from progression_engine.models.enums import (
    Difficulty,
    FitnessLevel,
    ItemType,
    MuscleGroup,
    RankTier,
    SessionStatus,
    StreakAction,
)
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import PlanItem, WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.models.progress import (
    LevelResult,
    LevelState,
    StreakResult,
    StreakState,
)
from progression_engine.models.session import WorkoutSession
from progression_engine.models.shop import InventoryEntry, ShopItem

__all__ = [
    "Difficulty",
    "Exercise",
    "FitnessLevel",
    "InventoryEntry",
    "ItemType",
    "LevelResult",
    "LevelState",
    "MuscleGroup",
    "PlanItem",
    "Profile",
    "RankTier",
    "SessionStatus",
    "ShopItem",
    "StreakAction",
    "StreakResult",
    "StreakState",
    "WorkoutPlan",
    "WorkoutSession",
]
