"""In-process store implementing every engine collaborator protocol.

Used by tests and demos. All state lives in plain dicts guarded by a
re-entrant lock; ``atomic()`` snapshots that state on entry and restores
it if the block raises.
"""

from __future__ import annotations

import dataclasses
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Mapping

from progression_engine.exceptions import ConcurrentUpdateError, InvalidSessionState, NotFound
from progression_engine.models.enums import MuscleGroup
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import PlanItem, WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.models.session import WorkoutSession
from progression_engine.models.shop import InventoryEntry, ShopItem
from progression_store.rows import check_profile_fields, check_session_fields


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryStore:
    """Dict-backed ProgressionStore."""

    def __init__(
        self,
        exercises: Iterable[Exercise] = (),
        shop_items: Iterable[ShopItem] = (),
    ) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self._profiles: dict[str, Profile] = {}
        self._exercises: dict[str, Exercise] = {ex.id: ex for ex in exercises}
        self._plans: dict[str, WorkoutPlan] = {}
        self._sessions: dict[str, WorkoutSession] = {}
        self._items: dict[str, ShopItem] = {item.id: item for item in shop_items}
        self._inventory: dict[tuple[str, str], InventoryEntry] = {}

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            snapshot = self._snapshot() if self._depth == 0 else None
            self._depth += 1
            try:
                yield
            except BaseException:
                if snapshot is not None:
                    self._restore(snapshot)
                raise
            finally:
                self._depth -= 1

    def _snapshot(self) -> dict[str, Any]:
        return {
            "profiles": dict(self._profiles),
            "plans": dict(self._plans),
            "sessions": dict(self._sessions),
            "inventory": dict(self._inventory),
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        self._profiles = snapshot["profiles"]
        self._plans = snapshot["plans"]
        self._sessions = snapshot["sessions"]
        self._inventory = snapshot["inventory"]

    # ------------------------------------------------------------------
    # Seeding (not part of the engine protocols)
    # ------------------------------------------------------------------

    def add_profile(self, profile: Profile) -> Profile:
        with self._lock:
            self._profiles[profile.user_id] = profile
            return profile

    def add_exercise(self, exercise: Exercise) -> None:
        with self._lock:
            self._exercises[exercise.id] = exercise

    def add_shop_item(self, item: ShopItem) -> None:
        with self._lock:
            self._items[item.id] = item

    def list_user_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._profiles)

    # ------------------------------------------------------------------
    # ProfileStore
    # ------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Profile:
        with self._lock:
            try:
                return self._profiles[user_id]
            except KeyError:
                raise NotFound(f"No profile for user {user_id}") from None

    def update_profile(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> Profile:
        check_profile_fields(fields)
        with self._lock:
            current = self.get_profile(user_id)
            if expected_version is not None and current.version != expected_version:
                raise ConcurrentUpdateError(user_id, expected_version, current.version)
            updated = dataclasses.replace(current, **fields, version=current.version + 1)
            self._profiles[user_id] = updated
            return updated

    # ------------------------------------------------------------------
    # ExerciseCatalog
    # ------------------------------------------------------------------

    def list_exercises(self) -> list[Exercise]:
        with self._lock:
            return list(self._exercises.values())

    def list_by_muscle_groups(self, groups: Iterable[MuscleGroup]) -> list[Exercise]:
        wanted = set(groups)
        return [ex for ex in self.list_exercises() if ex.muscle_group in wanted]

    # ------------------------------------------------------------------
    # PlanStore
    # ------------------------------------------------------------------

    def get_active_plan(self, user_id: str) -> WorkoutPlan | None:
        with self._lock:
            for plan in self._plans.values():
                if plan.user_id == user_id and plan.is_active:
                    return plan
            return None

    def get_plan(self, plan_id: str) -> WorkoutPlan:
        with self._lock:
            try:
                return self._plans[plan_id]
            except KeyError:
                raise NotFound(f"No plan {plan_id}") from None

    def create_plan(self, user_id: str, name: str) -> WorkoutPlan:
        with self.atomic():
            previous = self.get_active_plan(user_id)
            if previous is not None:
                self._plans[previous.id] = dataclasses.replace(previous, is_active=False)
            plan = WorkoutPlan(id=_new_id(), user_id=user_id, name=name, is_active=True)
            self._plans[plan.id] = plan
            return plan

    def add_items(self, plan_id: str, items: Iterable[PlanItem]) -> WorkoutPlan:
        with self._lock:
            plan = self.get_plan(plan_id)
            stored = tuple(dataclasses.replace(item, id=_new_id()) for item in items)
            updated = dataclasses.replace(plan, items=plan.items + stored)
            self._plans[plan_id] = updated
            return updated

    # ------------------------------------------------------------------
    # SessionStore
    # ------------------------------------------------------------------

    def create_session(self, session: WorkoutSession) -> WorkoutSession:
        with self._lock:
            created = dataclasses.replace(session, id=_new_id())
            self._sessions[created.id] = created  # type: ignore[index]
            return created

    def get_session(self, session_id: str) -> WorkoutSession:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise NotFound(f"No session {session_id}") from None

    def update_session(self, session_id: str, fields: Mapping[str, Any]) -> WorkoutSession:
        check_session_fields(fields)
        with self._lock:
            current = self.get_session(session_id)
            if current.is_completed:
                raise InvalidSessionState(session_id, current.status.value)
            updated = dataclasses.replace(current, **fields)
            self._sessions[session_id] = updated
            return updated

    def list_sessions(self, user_id: str) -> list[WorkoutSession]:
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.user_id == user_id]
        return sorted(sessions, key=lambda s: s.started_at)

    # ------------------------------------------------------------------
    # ShopStore
    # ------------------------------------------------------------------

    def list_items(self) -> list[ShopItem]:
        with self._lock:
            return list(self._items.values())

    def get_item(self, item_id: str) -> ShopItem:
        with self._lock:
            try:
                return self._items[item_id]
            except KeyError:
                raise NotFound(f"No shop item {item_id}") from None

    def get_inventory_entry(self, user_id: str, item_id: str) -> InventoryEntry | None:
        with self._lock:
            return self._inventory.get((user_id, item_id))

    def upsert_inventory(self, entry: InventoryEntry) -> InventoryEntry:
        with self._lock:
            self._inventory[(entry.user_id, entry.item_id)] = entry
            return entry

    def list_inventory(self, user_id: str) -> list[InventoryEntry]:
        with self._lock:
            return [e for (owner, _), e in self._inventory.items() if owner == user_id]
