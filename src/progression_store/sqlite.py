"""Durable SQLite store implementing every engine collaborator protocol.

All sqlite3 calls go through :meth:`SQLiteStore._safe_call`, which turns
driver errors into TransportError. ``atomic()`` maps to ``BEGIN IMMEDIATE``
at the outermost level and to savepoints when nested, so the write lock is
taken before the first read inside a unit of work.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping

from progression_engine.exceptions import (
    ConcurrentUpdateError,
    InvalidSessionState,
    NotFound,
    TransportError,
)
from progression_engine.models.enums import MuscleGroup, SessionStatus
from progression_engine.models.exercise import Exercise
from progression_engine.models.plan import PlanItem, WorkoutPlan
from progression_engine.models.profile import Profile
from progression_engine.models.session import WorkoutSession
from progression_engine.models.shop import InventoryEntry, ShopItem
from progression_store.rows import (
    check_profile_fields,
    check_session_fields,
    encode_fields,
    encode_value,
    exercise_from_row,
    inventory_from_row,
    plan_item_from_row,
    profile_from_row,
    profile_to_row,
    session_from_row,
    shop_item_from_row,
)

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS profiles (
    user_id TEXT PRIMARY KEY,
    level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
    exp INTEGER NOT NULL DEFAULT 0 CHECK (exp >= 0),
    exp_to_next_level INTEGER NOT NULL DEFAULT 100 CHECK (exp_to_next_level > 0),
    streak_current INTEGER NOT NULL DEFAULT 0 CHECK (streak_current >= 0),
    streak_freeze_count INTEGER NOT NULL DEFAULT 0 CHECK (streak_freeze_count >= 0),
    last_streak_date TEXT,
    focus_area TEXT,
    fitness_level TEXT,
    workout_days TEXT NOT NULL DEFAULT '[]',
    username TEXT,
    workout_reason TEXT,
    activity_level TEXT,
    gender TEXT,
    age INTEGER,
    height REAL,
    weight REAL,
    target_weight REAL,
    workout_time TEXT,
    version INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    muscle_group TEXT NOT NULL,
    difficulty TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'strength',
    description TEXT
);

CREATE TABLE IF NOT EXISTS workout_plans (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES profiles(user_id),
    name TEXT NOT NULL,
    is_active INTEGER NOT NULL DEFAULT 1
);

CREATE UNIQUE INDEX IF NOT EXISTS one_active_plan_per_user
    ON workout_plans(user_id) WHERE is_active = 1;

CREATE TABLE IF NOT EXISTS plan_exercises (
    id TEXT PRIMARY KEY,
    plan_id TEXT NOT NULL REFERENCES workout_plans(id),
    exercise_id TEXT NOT NULL REFERENCES exercises(id),
    sets INTEGER NOT NULL,
    reps INTEGER NOT NULL,
    rest_seconds INTEGER NOT NULL DEFAULT 60,
    order_index INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS workout_sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES profiles(user_id),
    plan_id TEXT NOT NULL REFERENCES workout_plans(id),
    started_at TEXT NOT NULL,
    ended_at TEXT,
    status TEXT NOT NULL,
    exp_earned INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS shop_items (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    cost_exp INTEGER NOT NULL CHECK (cost_exp >= 0),
    type TEXT NOT NULL,
    description TEXT
);

CREATE TABLE IF NOT EXISTS inventory (
    user_id TEXT NOT NULL REFERENCES profiles(user_id),
    item_id TEXT NOT NULL REFERENCES shop_items(id),
    quantity INTEGER NOT NULL CHECK (quantity >= 1),
    PRIMARY KEY (user_id, item_id)
);
"""


def _new_id() -> str:
    return uuid.uuid4().hex


class SQLiteStore:
    """ProgressionStore backed by a single SQLite database file."""

    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self._db_path = str(db_path)
        self._lock = threading.RLock()
        self._depth = 0
        try:
            self._conn = sqlite3.connect(
                self._db_path, isolation_level=None, check_same_thread=False
            )
        except sqlite3.Error as exc:
            raise TransportError(f"Cannot open database {self._db_path}: {exc}") from exc
        self._conn.row_factory = sqlite3.Row
        self._safe_call(self._conn.execute, "PRAGMA foreign_keys = ON")
        self._safe_call(self._conn.executescript, _SCHEMA)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            savepoint = f"sp_{self._depth}"
            if self._depth == 0:
                self._execute("BEGIN IMMEDIATE")
            else:
                self._execute(f"SAVEPOINT {savepoint}")
            self._depth += 1
            try:
                yield
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    self._execute("ROLLBACK")
                else:
                    self._execute(f"ROLLBACK TO {savepoint}")
                    self._execute(f"RELEASE {savepoint}")
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    self._execute("COMMIT")
                else:
                    self._execute(f"RELEASE {savepoint}")

    # ------------------------------------------------------------------
    # Seeding (not part of the engine protocols)
    # ------------------------------------------------------------------

    def add_profile(self, profile: Profile) -> Profile:
        row = profile_to_row(profile)
        columns = ", ".join(row)
        placeholders = ", ".join(f":{name}" for name in row)
        self._execute(f"INSERT INTO profiles ({columns}) VALUES ({placeholders})", row)
        return profile

    def add_exercise(self, exercise: Exercise) -> None:
        self._execute(
            "INSERT OR REPLACE INTO exercises (id, name, muscle_group, difficulty, type, description) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                exercise.id,
                exercise.name,
                exercise.muscle_group.value,
                exercise.difficulty.value,
                exercise.type,
                exercise.description,
            ),
        )

    def add_shop_item(self, item: ShopItem) -> None:
        self._execute(
            "INSERT OR REPLACE INTO shop_items (id, name, cost_exp, type, description) "
            "VALUES (?, ?, ?, ?, ?)",
            (item.id, item.name, item.cost_exp, item.type.value, item.description),
        )

    def list_user_ids(self) -> list[str]:
        rows = self._fetchall("SELECT user_id FROM profiles ORDER BY user_id")
        return [row["user_id"] for row in rows]

    # ------------------------------------------------------------------
    # ProfileStore
    # ------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Profile:
        row = self._fetchone("SELECT * FROM profiles WHERE user_id = ?", (user_id,))
        if row is None:
            raise NotFound(f"No profile for user {user_id}")
        return profile_from_row(row)

    def update_profile(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        expected_version: int | None = None,
    ) -> Profile:
        check_profile_fields(fields)
        values = encode_fields(fields)
        assignments = ", ".join(f"{name} = :{name}" for name in values)
        if assignments:
            assignments += ", "
        sql = f"UPDATE profiles SET {assignments}version = version + 1 WHERE user_id = :_user_id"
        params = dict(values, _user_id=user_id)
        if expected_version is not None:
            sql += " AND version = :_expected_version"
            params["_expected_version"] = expected_version

        with self.atomic():
            cursor = self._execute(sql, params)
            if cursor.rowcount == 0:
                current = self.get_profile(user_id)
                logger.warning(
                    "Conditional update of %s rejected: expected version %s, found %d",
                    user_id,
                    expected_version,
                    current.version,
                )
                raise ConcurrentUpdateError(user_id, expected_version or 0, current.version)
            return self.get_profile(user_id)

    # ------------------------------------------------------------------
    # ExerciseCatalog
    # ------------------------------------------------------------------

    def list_exercises(self) -> list[Exercise]:
        return [exercise_from_row(r) for r in self._fetchall("SELECT * FROM exercises")]

    def list_by_muscle_groups(self, groups: Iterable[MuscleGroup]) -> list[Exercise]:
        values = sorted(encode_value(g) for g in groups)
        if not values:
            return []
        placeholders = ", ".join("?" for _ in values)
        rows = self._fetchall(
            f"SELECT * FROM exercises WHERE muscle_group IN ({placeholders})", values
        )
        return [exercise_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # PlanStore
    # ------------------------------------------------------------------

    def get_active_plan(self, user_id: str) -> WorkoutPlan | None:
        row = self._fetchone(
            "SELECT id FROM workout_plans WHERE user_id = ? AND is_active = 1", (user_id,)
        )
        return self.get_plan(row["id"]) if row is not None else None

    def get_plan(self, plan_id: str) -> WorkoutPlan:
        plan_row = self._fetchone("SELECT * FROM workout_plans WHERE id = ?", (plan_id,))
        if plan_row is None:
            raise NotFound(f"No plan {plan_id}")
        item_rows = self._fetchall(
            "SELECT pe.id, pe.sets, pe.reps, pe.rest_seconds, pe.order_index, "
            "e.id AS exercise_id, e.name, e.muscle_group, e.difficulty, e.type, e.description "
            "FROM plan_exercises pe JOIN exercises e ON e.id = pe.exercise_id "
            "WHERE pe.plan_id = ? ORDER BY pe.order_index",
            (plan_id,),
        )
        items = tuple(
            plan_item_from_row(r, exercise_from_row({**dict(r), "id": r["exercise_id"]}))
            for r in item_rows
        )
        return WorkoutPlan(
            id=plan_row["id"],
            user_id=plan_row["user_id"],
            name=plan_row["name"],
            items=items,
            is_active=bool(plan_row["is_active"]),
        )

    def create_plan(self, user_id: str, name: str) -> WorkoutPlan:
        plan_id = _new_id()
        with self.atomic():
            self._execute(
                "UPDATE workout_plans SET is_active = 0 WHERE user_id = ? AND is_active = 1",
                (user_id,),
            )
            self._execute(
                "INSERT INTO workout_plans (id, user_id, name, is_active) VALUES (?, ?, ?, 1)",
                (plan_id, user_id, name),
            )
        return WorkoutPlan(id=plan_id, user_id=user_id, name=name, is_active=True)

    def add_items(self, plan_id: str, items: Iterable[PlanItem]) -> WorkoutPlan:
        with self.atomic():
            for item in items:
                self._execute(
                    "INSERT INTO plan_exercises "
                    "(id, plan_id, exercise_id, sets, reps, rest_seconds, order_index) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        _new_id(),
                        plan_id,
                        item.exercise.id,
                        item.sets,
                        item.reps,
                        item.rest_seconds,
                        item.order_index,
                    ),
                )
            return self.get_plan(plan_id)

    # ------------------------------------------------------------------
    # SessionStore
    # ------------------------------------------------------------------

    def create_session(self, session: WorkoutSession) -> WorkoutSession:
        session_id = _new_id()
        self._execute(
            "INSERT INTO workout_sessions "
            "(id, user_id, plan_id, started_at, ended_at, status, exp_earned) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                session_id,
                session.user_id,
                session.plan_id,
                encode_value(session.started_at),
                encode_value(session.ended_at),
                session.status.value,
                session.exp_earned,
            ),
        )
        return self.get_session(session_id)

    def get_session(self, session_id: str) -> WorkoutSession:
        row = self._fetchone("SELECT * FROM workout_sessions WHERE id = ?", (session_id,))
        if row is None:
            raise NotFound(f"No session {session_id}")
        return session_from_row(row)

    def update_session(self, session_id: str, fields: Mapping[str, Any]) -> WorkoutSession:
        check_session_fields(fields)
        values = encode_fields(fields)
        with self.atomic():
            current = self.get_session(session_id)
            if current.is_completed:
                raise InvalidSessionState(session_id, current.status.value)
            if values:
                assignments = ", ".join(f"{name} = :{name}" for name in values)
                self._execute(
                    f"UPDATE workout_sessions SET {assignments} "
                    "WHERE id = :_id AND status = :_in_progress",
                    dict(values, _id=session_id, _in_progress=SessionStatus.IN_PROGRESS.value),
                )
            return self.get_session(session_id)

    def list_sessions(self, user_id: str) -> list[WorkoutSession]:
        rows = self._fetchall(
            "SELECT * FROM workout_sessions WHERE user_id = ? ORDER BY started_at", (user_id,)
        )
        return [session_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # ShopStore
    # ------------------------------------------------------------------

    def list_items(self) -> list[ShopItem]:
        return [shop_item_from_row(r) for r in self._fetchall("SELECT * FROM shop_items")]

    def get_item(self, item_id: str) -> ShopItem:
        row = self._fetchone("SELECT * FROM shop_items WHERE id = ?", (item_id,))
        if row is None:
            raise NotFound(f"No shop item {item_id}")
        return shop_item_from_row(row)

    def get_inventory_entry(self, user_id: str, item_id: str) -> InventoryEntry | None:
        row = self._fetchone(
            "SELECT * FROM inventory WHERE user_id = ? AND item_id = ?", (user_id, item_id)
        )
        return inventory_from_row(row) if row is not None else None

    def upsert_inventory(self, entry: InventoryEntry) -> InventoryEntry:
        self._execute(
            "INSERT INTO inventory (user_id, item_id, quantity) VALUES (?, ?, ?) "
            "ON CONFLICT (user_id, item_id) DO UPDATE SET quantity = excluded.quantity",
            (entry.user_id, entry.item_id, entry.quantity),
        )
        return entry

    def list_inventory(self, user_id: str) -> list[InventoryEntry]:
        rows = self._fetchall("SELECT * FROM inventory WHERE user_id = ?", (user_id,))
        return [inventory_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _execute(self, sql: str, params: Any = ()) -> sqlite3.Cursor:
        with self._lock:
            return self._safe_call(self._conn.execute, sql, params)

    def _fetchone(self, sql: str, params: Any = ()) -> sqlite3.Row | None:
        with self._lock:
            return self._safe_call(self._conn.execute, sql, params).fetchone()

    def _fetchall(self, sql: str, params: Any = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._safe_call(self._conn.execute, sql, params).fetchall()

    def _safe_call(self, fn: Callable, *args: Any) -> Any:
        """Call *fn*, converting any sqlite3 error into TransportError."""
        try:
            return fn(*args)
        except sqlite3.Error as exc:
            logger.error("SQLite call failed on %s: %s", self._db_path, exc)
            raise TransportError(str(exc)) from exc
