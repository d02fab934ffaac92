"""Enumerations and tuning constants for the progression engine.

Stored values match the strings persisted by the profile/catalog tables,
so every enum here is a ``str`` enum.
"""

from enum import Enum


class Difficulty(str, Enum):
    """Exercise difficulty tier — drives the EXP base per set."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class FitnessLevel(str, Enum):
    """Self-reported fitness level captured during onboarding."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class MuscleGroup(str, Enum):
    """Muscle group tag carried by every catalog exercise."""

    CHEST = "Chest"
    BACK = "Back"
    LEGS = "Legs"
    CORE = "Core"
    ARMS = "Arms"
    SHOULDERS = "Shoulders"
    FULL_BODY = "Full Body"


class SessionStatus(str, Enum):
    """Lifecycle status persisted on a workout session row."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ItemType(str, Enum):
    """Shop item categories."""

    STREAK_FREEZE = "streak_freeze"
    COSMETIC = "cosmetic"


class StreakAction(str, Enum):
    """Outcome of a streak check or completion."""

    KEPT = "kept"
    FROZEN = "frozen"
    RESET = "reset"
    INCREMENTED = "incremented"
    ALREADY_COUNTED = "already_counted"


class RankTier(str, Enum):
    """Cosmetic rank labels derived from level thresholds."""

    E = "E"
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"


# ---------------------------------------------------------------------------
# Leveling curve
# ---------------------------------------------------------------------------
STARTING_LEVEL = 1
STARTING_EXP_TO_NEXT_LEVEL = 100

# exp_to_next_level grows by 6/5 (x1.2) per level, floored.
# Kept as an integer ratio so the floor is exact.
LEVEL_GROWTH_NUMERATOR = 6
LEVEL_GROWTH_DENOMINATOR = 5

# ---------------------------------------------------------------------------
# EXP award
# ---------------------------------------------------------------------------
# Per-set EXP base by difficulty. Reps do not contribute.
EXP_BASE_PER_SET: dict[Difficulty, int] = {
    Difficulty.BEGINNER: 10,
    Difficulty.INTERMEDIATE: 20,
    Difficulty.ADVANCED: 30,
}

# ---------------------------------------------------------------------------
# Rank tiers: upper bound (exclusive) on level for each tier
# ---------------------------------------------------------------------------
RANK_LEVEL_CEILINGS: tuple[tuple[int, RankTier], ...] = (
    (10, RankTier.E),
    (20, RankTier.D),
    (30, RankTier.C),
    (40, RankTier.B),
    (50, RankTier.A),
)

# Gradient (start, end) colors per rank, consumed by the dashboard.
RANK_COLORS: dict[RankTier, tuple[str, str]] = {
    RankTier.E: ("#2c3e50", "#000000"),
    RankTier.D: ("#2980b9", "#2c3e50"),
    RankTier.C: ("#27ae60", "#2980b9"),
    RankTier.B: ("#f1c40f", "#d35400"),
    RankTier.A: ("#e74c3c", "#c0392b"),
    RankTier.S: ("#8e44ad", "#2c3e50"),
}

# ---------------------------------------------------------------------------
# Plan generation
# ---------------------------------------------------------------------------
PLAN_EXERCISE_COUNT = 5
DEFAULT_PLAN_NAME = "System Generated Plan"
DEFAULT_REST_SECONDS = 60

BEGINNER_SETS = 3
BEGINNER_REPS = 10
STANDARD_SETS = 4
STANDARD_REPS = 12

# Focus area → eligible muscle groups. Unmapped focus areas fall back to
# DEFAULT_MUSCLE_GROUPS.
FOCUS_AREA_MUSCLE_GROUPS: dict[str, frozenset[MuscleGroup]] = {
    "Full Body": frozenset({
        MuscleGroup.CHEST,
        MuscleGroup.LEGS,
        MuscleGroup.BACK,
        MuscleGroup.CORE,
        MuscleGroup.FULL_BODY,
    }),
    "Upper Body": frozenset({MuscleGroup.CHEST, MuscleGroup.BACK, MuscleGroup.CORE}),
    "Lower Body": frozenset({MuscleGroup.LEGS, MuscleGroup.CORE}),
    "Cardio": frozenset({MuscleGroup.FULL_BODY, MuscleGroup.LEGS}),
}
DEFAULT_MUSCLE_GROUPS: frozenset[MuscleGroup] = frozenset({MuscleGroup.FULL_BODY})
