"""Row <-> model conversion for the stores.

All functions are pure (no I/O). Dates and datetimes are stored as ISO
strings, ``workout_days`` as a JSON array, enums by value.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping

from progression_engine.exceptions import ValidationError
from progression_engine.models.enums import Difficulty, ItemType, MuscleGroup, SessionStatus
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import PlanItem
from progression_engine.models.profile import Profile
from progression_engine.models.session import WorkoutSession
from progression_engine.models.shop import InventoryEntry, ShopItem

# Profile columns a caller may write. Identity and version are store-owned.
PROFILE_UPDATABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(Profile) if f.name not in ("user_id", "version")
)
SESSION_UPDATABLE_FIELDS = frozenset({"status", "ended_at", "exp_earned"})


def check_profile_fields(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - PROFILE_UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update profile fields: {sorted(unknown)}")


def check_session_fields(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - SESSION_UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update session fields: {sorted(unknown)}")


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_value(value: Any) -> Any:
    """Convert a model value into something sqlite3 can bind."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (tuple, list)):
        return json.dumps(list(value))
    return value


def encode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {key: encode_value(value) for key, value in fields.items()}


def profile_to_row(profile: Profile) -> dict[str, Any]:
    return encode_fields(dataclasses.asdict(profile))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def profile_from_row(row: Mapping[str, Any]) -> Profile:
    data = dict(row)
    data["workout_days"] = tuple(json.loads(data.get("workout_days") or "[]"))
    data["last_streak_date"] = _parse_date(data.get("last_streak_date"))
    return Profile(**data)


def exercise_from_row(row: Mapping[str, Any]) -> Exercise:
    return Exercise(
        id=row["id"],
        name=row["name"],
        muscle_group=MuscleGroup(row["muscle_group"]),
        difficulty=Difficulty(row["difficulty"]),
        type=row["type"],
        description=row["description"] or "",
    )


def plan_item_from_row(row: Mapping[str, Any], exercise: Exercise) -> PlanItem:
    return PlanItem(
        id=row["id"],
        exercise=exercise,
        sets=row["sets"],
        reps=row["reps"],
        order_index=row["order_index"],
        rest_seconds=row["rest_seconds"],
    )


def session_from_row(row: Mapping[str, Any]) -> WorkoutSession:
    return WorkoutSession(
        id=row["id"],
        user_id=row["user_id"],
        plan_id=row["plan_id"],
        started_at=datetime.fromisoformat(row["started_at"]),
        status=SessionStatus(row["status"]),
        ended_at=_parse_datetime(row["ended_at"]),
        exp_earned=row["exp_earned"],
    )


def shop_item_from_row(row: Mapping[str, Any]) -> ShopItem:
    return ShopItem(
        id=row["id"],
        name=row["name"],
        cost_exp=row["cost_exp"],
        type=ItemType(row["type"]),
        description=row["description"] or "",
    )


def inventory_from_row(row: Mapping[str, Any]) -> InventoryEntry:
    return InventoryEntry(
        user_id=row["user_id"],
        item_id=row["item_id"],
        quantity=row["quantity"],
    )
