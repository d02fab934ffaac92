"""Collaborator interfaces the engine reads and writes through.

The engine owns no storage. Concrete stores (see ``progression_store``)
implement these protocols; a single object usually implements all of them.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Iterable, Mapping, Protocol

from progression_engine.models.exercise import Exercise
from progression_engine.models.enums import MuscleGroup
from progression_engine.models.plan import PlanItem, WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.models.session import WorkoutSession
from progression_engine.models.shop import InventoryEntry, ShopItem


class ProfileStore(Protocol):
    def get_profile(self, user_id: str) -> Profile:
        """Return the profile or raise NotFound."""
        ...

    def update_profile(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> Profile:
        """Apply a partial update and bump ``version``.

        When ``expected_version`` is given the write is conditional and
        raises ConcurrentUpdateError on mismatch.
        """
        ...


class ExerciseCatalog(Protocol):
    def list_by_muscle_groups(self, groups: Iterable[MuscleGroup]) -> list[Exercise]:
        ...

    def list_exercises(self) -> list[Exercise]:
        ...


class PlanStore(Protocol):
    def get_active_plan(self, user_id: str) -> WorkoutPlan | None:
        ...

    def get_plan(self, plan_id: str) -> WorkoutPlan:
        """Return the plan with its items or raise NotFound."""
        ...

    def create_plan(self, user_id: str, name: str) -> WorkoutPlan:
        """Create an empty active plan, deactivating any previous one."""
        ...

    def add_items(self, plan_id: str, items: Iterable[PlanItem]) -> WorkoutPlan:
        ...


class SessionStore(Protocol):
    def create_session(self, session: WorkoutSession) -> WorkoutSession:
        ...

    def get_session(self, session_id: str) -> WorkoutSession:
        ...

    def update_session(self, session_id: str, fields: Mapping[str, Any]) -> WorkoutSession:
        ...

    def list_sessions(self, user_id: str) -> list[WorkoutSession]:
        ...


class ShopStore(Protocol):
    def list_items(self) -> list[ShopItem]:
        ...

    def get_item(self, item_id: str) -> ShopItem:
        ...

    def get_inventory_entry(self, user_id: str, item_id: str) -> InventoryEntry | None:
        ...

    def upsert_inventory(self, entry: InventoryEntry) -> InventoryEntry:
        ...

    def list_inventory(self, user_id: str) -> list[InventoryEntry]:
        ...


class UnitOfWork(Protocol):
    def atomic(self) -> AbstractContextManager[None]:
        """Scope whose writes all commit together or all roll back."""
        ...


class ProgressionStore(
    ProfileStore,
    ExerciseCatalog,
    PlanStore,
    SessionStore,
    ShopStore,
    UnitOfWork,
    Protocol,
):
    """Everything the engine facade needs from a single backing store."""
