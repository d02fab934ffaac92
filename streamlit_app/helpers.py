"""Utility helpers bridging the Streamlit UI and the progression engine.

Formatting, table and form helpers, plus the finish step of the quest runner.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, MutableMapping

import pandas as pd

from progression_engine import InvalidSessionState, NotFound, ProgressionEngine
from progression_engine.math.ranks import rank_colors, rank_name
from progression_engine.models.enums import Difficulty, FitnessLevel, ItemType
from progression_engine.models.profile import Profile
from progression_engine.models.session import WorkoutSession
from progression_engine.session import SessionOutcome
from progression_engine.shop import OwnedItem

# ---------------------------------------------------------------------------
# Onboarding choices
# ---------------------------------------------------------------------------

FOCUS_AREAS = ["Full Body", "Upper Body", "Lower Body", "Cardio"]
FITNESS_LEVELS = [level.value for level in FitnessLevel]
WORKOUT_REASONS = ["Lose weight", "Build muscle", "Stay healthy", "Improve endurance"]
ACTIVITY_LEVELS = ["Sedentary", "Lightly active", "Active", "Very active"]
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# ---------------------------------------------------------------------------
# Color maps
# ---------------------------------------------------------------------------

DIFFICULTY_COLORS: dict[Difficulty, str] = {
    Difficulty.BEGINNER: "#2ecc71",
    Difficulty.INTERMEDIATE: "#f39c12",
    Difficulty.ADVANCED: "#e74c3c",
}

ITEM_ICONS: dict[ItemType, str] = {
    ItemType.STREAK_FREEZE: "❄️",
    ItemType.COSMETIC: "📦",
}

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_exp(profile: Profile) -> str:
    """e.g. ``'EXP 40 / 120'``."""
    return f"EXP {profile.exp} / {profile.exp_to_next_level}"


def rank_banner_html(profile: Profile) -> str:
    """Gradient banner showing level and rank, colored by rank tier."""
    start, end = rank_colors(profile.level)
    return (
        f'<div style="background:linear-gradient(135deg,{start},{end});'
        f'padding:16px;border-radius:12px;color:#fff;">'
        f'<h2 style="margin:0;">Level {profile.level}</h2>'
        f'<span>{rank_name(profile.level)}</span>'
        f'<span style="float:right;">🔥 {profile.streak_current}</span></div>'
    )


def format_duration(session: WorkoutSession) -> str:
    """Session length as ``'12m'``, or ``'--'`` while in progress."""
    if session.ended_at is None:
        return "--"
    minutes = int((session.ended_at - session.started_at).total_seconds()) // 60
    return f"{minutes}m"


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def inventory_frame(owned: Iterable[OwnedItem]) -> pd.DataFrame:
    rows = [
        {
            "Item": f"{ITEM_ICONS.get(o.item.type, '')} {o.item.name}".strip(),
            "Type": o.item.type.value,
            "Quantity": o.quantity,
        }
        for o in owned
    ]
    return pd.DataFrame(rows, columns=["Item", "Type", "Quantity"])


def session_history_frame(sessions: Iterable[WorkoutSession]) -> pd.DataFrame:
    """Completed sessions, newest first."""
    rows = [
        {
            "Date": s.started_at.date().isoformat(),
            "Duration": format_duration(s),
            "EXP": s.exp_earned,
        }
        for s in sorted(sessions, key=lambda s: s.started_at, reverse=True)
        if s.is_completed
    ]
    return pd.DataFrame(rows, columns=["Date", "Duration", "EXP"])


# ---------------------------------------------------------------------------
# Onboarding form
# ---------------------------------------------------------------------------


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def profile_fields_from_form(form: Mapping[str, Any]) -> dict[str, Any]:
    """Convert raw onboarding/edit form values into profile update fields.

    Blank numeric inputs become None; ``workout_days`` keeps week order.
    """
    days = set(form.get("workout_days") or ())
    return {
        "username": form.get("username") or None,
        "workout_reason": form.get("workout_reason") or None,
        "focus_area": form.get("focus_area") or None,
        "fitness_level": form.get("fitness_level") or None,
        "activity_level": form.get("activity_level") or None,
        "gender": form.get("gender") or None,
        "age": _to_int(form.get("age")),
        "height": _to_float(form.get("height")),
        "weight": _to_float(form.get("weight")),
        "target_weight": _to_float(form.get("target_weight")),
        "workout_days": tuple(d for d in DAY_NAMES if d in days),
        "workout_time": form.get("workout_time") or None,
    }


# ---------------------------------------------------------------------------
# Session runner
# ---------------------------------------------------------------------------


def finish_tracked_session(
    engine: ProgressionEngine, state: MutableMapping[str, Any], checked: Iterable[str]
) -> SessionOutcome:
    """Finish the session whose id is kept under ``state["session_id"]``.

    The id is dropped once the session is completed, or when it can no
    longer be completed (e.g. finished from another device). Any other
    failure keeps the id so the user can retry.
    """
    session_id = state["session_id"]
    try:
        outcome = engine.finish_workout(session_id, checked)
    except (InvalidSessionState, NotFound):
        state.pop("session_id", None)
        raise
    state.pop("session_id", None)
    return outcome
