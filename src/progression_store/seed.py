"""Starter catalog and shop stock, plus loading them from a JSON seed file.

Seed file layout::

    {
      "exercises": [{"id": "...", "name": "...", "muscle_group": "Chest",
                     "difficulty": "Beginner", "type": "strength"}],
      "shop_items": [{"id": "...", "name": "...", "cost_exp": 50,
                      "type": "streak_freeze", "description": "..."}]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from progression_engine.exceptions import ValidationError
from progression_engine.models.enums import Difficulty, ItemType, MuscleGroup
from progression_engine.models.exercise import Exercise
from progression_engine.models.shop import ShopItem
from progression_store.rows import exercise_from_row, shop_item_from_row

logger = logging.getLogger(__name__)

_B, _I, _A = Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.ADVANCED

DEFAULT_EXERCISES: tuple[Exercise, ...] = (
    Exercise("push-ups", "Push-ups", MuscleGroup.CHEST, _B, "strength"),
    Exercise("diamond-push-ups", "Diamond Push-ups", MuscleGroup.ARMS, _I, "strength"),
    Exercise("decline-push-ups", "Decline Push-ups", MuscleGroup.CHEST, _I, "strength"),
    Exercise("pull-ups", "Pull-ups", MuscleGroup.BACK, _A, "strength"),
    Exercise("inverted-rows", "Inverted Rows", MuscleGroup.BACK, _B, "strength"),
    Exercise("squats", "Squats", MuscleGroup.LEGS, _B, "strength"),
    Exercise("lunges", "Lunges", MuscleGroup.LEGS, _B, "strength"),
    Exercise("pistol-squats", "Pistol Squats", MuscleGroup.LEGS, _A, "strength"),
    Exercise("plank", "Plank", MuscleGroup.CORE, _B, "isometric"),
    Exercise("sit-ups", "Sit-ups", MuscleGroup.CORE, _B, "strength"),
    Exercise("hanging-leg-raises", "Hanging Leg Raises", MuscleGroup.CORE, _A, "strength"),
    Exercise("pike-push-ups", "Pike Push-ups", MuscleGroup.SHOULDERS, _I, "strength"),
    Exercise("burpees", "Burpees", MuscleGroup.FULL_BODY, _I, "cardio"),
    Exercise("jumping-jacks", "Jumping Jacks", MuscleGroup.FULL_BODY, _B, "cardio"),
    Exercise("mountain-climbers", "Mountain Climbers", MuscleGroup.FULL_BODY, _I, "cardio"),
)

DEFAULT_SHOP_ITEMS: tuple[ShopItem, ...] = (
    ShopItem(
        "streak-freeze",
        "Streak Freeze",
        50,
        ItemType.STREAK_FREEZE,
        "Keeps your streak alive through one missed day.",
    ),
    ShopItem("shadow-aura", "Shadow Aura", 200, ItemType.COSMETIC, "A dark aura for your avatar."),
    ShopItem("hunter-badge", "Hunter Badge", 500, ItemType.COSMETIC, "Proof of a true hunter."),
)


class SeedTarget(Protocol):
    def add_exercise(self, exercise: Exercise) -> None: ...

    def add_shop_item(self, item: ShopItem) -> None: ...


def load_seed(path: Path | str) -> tuple[list[Exercise], list[ShopItem]]:
    """Parse a JSON seed file into exercises and shop items.

    Raises:
        ValidationError: The file cannot be read or is not valid JSON, or a
            record has an unknown enum value or misses a key.
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Cannot read seed file {path}: {exc}") from exc

    try:
        exercises = [
            exercise_from_row({"type": "strength", "description": "", **row})
            for row in data.get("exercises", [])
        ]
        items = [
            shop_item_from_row({"description": "", **row})
            for row in data.get("shop_items", [])
        ]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid seed file {path}: {exc}") from exc
    return exercises, items


def seed_store(
    store: SeedTarget,
    exercises: tuple[Exercise, ...] | list[Exercise] = DEFAULT_EXERCISES,
    shop_items: tuple[ShopItem, ...] | list[ShopItem] = DEFAULT_SHOP_ITEMS,
) -> None:
    """Insert (or replace) catalog exercises and shop items."""
    for exercise in exercises:
        store.add_exercise(exercise)
    for item in shop_items:
        store.add_shop_item(item)
    logger.info("Seeded %d exercises and %d shop items", len(exercises), len(shop_items))
