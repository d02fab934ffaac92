"""Catalog exercise record."""

from __future__ import annotations

from dataclasses import dataclass

from progression_engine.models.enums import Difficulty, MuscleGroup


@dataclass(frozen=True)
class Exercise:
    """A single exercise from the read-only catalog."""

    id: str
    name: str
    muscle_group: MuscleGroup
    difficulty: Difficulty
    type: str = "strength"
    description: str = ""
