"""Shared test fixtures: catalog, shop stock, profiles, stores and a fixed clock."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable

import pytest

from progression_engine.engine import ProgressionEngine
from progression_engine.models.enums import Difficulty, ItemType, MuscleGroup
from progression_engine.models.exercise import Exercise
from progression_engine.models.profile import Profile
from progression_engine.models.shop import ShopItem
from progression_store.memory import InMemoryStore


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def catalog() -> list[Exercise]:
    """Catalog spanning every muscle group and difficulty, names deliberately unsorted."""
    return [
        Exercise("ex-squat", "Squats", MuscleGroup.LEGS, Difficulty.BEGINNER),
        Exercise("ex-pushup", "Push-ups", MuscleGroup.CHEST, Difficulty.BEGINNER),
        Exercise("ex-pullup", "Pull-ups", MuscleGroup.BACK, Difficulty.ADVANCED),
        Exercise("ex-plank", "Plank", MuscleGroup.CORE, Difficulty.BEGINNER, "isometric"),
        Exercise("ex-burpee", "Burpees", MuscleGroup.FULL_BODY, Difficulty.INTERMEDIATE, "cardio"),
        Exercise("ex-curl", "Bicep Curls", MuscleGroup.ARMS, Difficulty.BEGINNER),
        Exercise("ex-lunge", "Lunges", MuscleGroup.LEGS, Difficulty.INTERMEDIATE),
        Exercise("ex-press", "Overhead Press", MuscleGroup.SHOULDERS, Difficulty.INTERMEDIATE),
        Exercise("ex-row", "Inverted Rows", MuscleGroup.BACK, Difficulty.BEGINNER),
        Exercise("ex-jacks", "Jumping Jacks", MuscleGroup.FULL_BODY, Difficulty.BEGINNER, "cardio"),
    ]


@pytest.fixture
def shop_items() -> list[ShopItem]:
    return [
        ShopItem("freeze", "Streak Freeze", 50, ItemType.STREAK_FREEZE, "Protects one day."),
        ShopItem("aura", "Shadow Aura", 50, ItemType.COSMETIC, "Cosmetic aura."),
        ShopItem("badge", "Hunter Badge", 500, ItemType.COSMETIC),
    ]


@pytest.fixture
def profile_factory() -> Callable[..., Profile]:
    """Factory fixture for profiles with sensible onboarding defaults.

    Usage:
        profile = profile_factory(exp=90, focus_area="Upper Body")
    """

    def _make(user_id: str = "user-1", **overrides) -> Profile:
        defaults = dict(focus_area="Full Body", fitness_level="Beginner")
        defaults.update(overrides)
        return Profile(user_id=user_id, **defaults)

    return _make


@pytest.fixture
def store(catalog, shop_items, profile_factory) -> InMemoryStore:
    """In-memory store holding the catalog, the shop and one Full Body beginner."""
    s = InMemoryStore(exercises=catalog, shop_items=shop_items)
    s.add_profile(profile_factory())
    return s


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 10, 18, 0))


@pytest.fixture
def today(clock) -> date:
    return clock.now.date()


@pytest.fixture
def engine(store, clock) -> ProgressionEngine:
    return ProgressionEngine(store, clock=clock)
