"""Tests for the workout session lifecycle."""

from __future__ import annotations

from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest

from progression_engine.exceptions import (
    ConcurrentUpdateError,
    InvalidSessionState,
    NotFound,
    TransportError,
    ValidationError,
)
from progression_engine.models.enums import Difficulty, MuscleGroup, SessionStatus, StreakAction
from progression_engine.models.exercise import Exercise
from progression_engine.plan_generator import PlanGenerator
from progression_engine.session import SessionLifecycle


@pytest.fixture
def lifecycle(store, clock) -> SessionLifecycle:
    return SessionLifecycle(profiles=store, plans=store, sessions=store, uow=store, clock=clock)


@pytest.fixture
def plan(store):
    return PlanGenerator(store, store, store, store).generate("user-1")


class TestStart:
    def test_opens_in_progress_session(self, lifecycle, plan, clock) -> None:
        session = lifecycle.start("user-1")
        assert session.id is not None
        assert session.status == SessionStatus.IN_PROGRESS
        assert session.plan_id == plan.id
        assert session.started_at == clock.now

    def test_requires_active_plan(self, lifecycle) -> None:
        with pytest.raises(NotFound, match="No active plan"):
            lifecycle.start("user-1")


class TestFinish:
    def test_awards_exp_for_checked_items(self, lifecycle, plan, store, clock) -> None:
        # Burpees is Intermediate (3 sets -> 60), Inverted Rows Beginner (3 sets -> 30)
        burpees, rows = plan.ordered_items()[:2]
        session = lifecycle.start("user-1")
        clock.advance(minutes=25)

        outcome = lifecycle.finish(session.id, [burpees.id, rows.id])

        assert outcome.exp_earned == 90
        assert outcome.session.status == SessionStatus.COMPLETED
        assert outcome.session.ended_at == clock.now
        assert outcome.profile.exp == 90
        assert outcome.profile.level == 1
        assert store.get_session(session.id).exp_earned == 90

    def test_level_up_on_finish(self, lifecycle, plan, store) -> None:
        store.update_profile("user-1", {"exp": 90})
        session = lifecycle.start("user-1")
        burpees = plan.ordered_items()[0]

        outcome = lifecycle.finish(session.id, [burpees.id])

        assert outcome.level.leveled_up
        assert outcome.profile.level == 2
        assert outcome.profile.exp == 50
        assert outcome.profile.exp_to_next_level == 120

    def test_nothing_checked_still_completes_and_credits_streak(self, lifecycle, plan, today) -> None:
        session = lifecycle.start("user-1")
        outcome = lifecycle.finish(session.id, [])
        assert outcome.exp_earned == 0
        assert outcome.session.is_completed
        assert outcome.profile.streak_current == 1
        assert outcome.profile.last_streak_date == today
        assert outcome.streak.action == StreakAction.INCREMENTED

    def test_consecutive_days_extend_streak(self, lifecycle, plan, clock) -> None:
        lifecycle.finish(lifecycle.start("user-1").id, [])
        clock.advance(days=1)
        outcome = lifecycle.finish(lifecycle.start("user-1").id, [])
        assert outcome.profile.streak_current == 2

    def test_second_session_same_day_awards_exp_but_not_streak(self, lifecycle, plan, clock) -> None:
        item = plan.ordered_items()[0]
        lifecycle.finish(lifecycle.start("user-1").id, [item.id])
        clock.advance(hours=1)
        outcome = lifecycle.finish(lifecycle.start("user-1").id, [item.id])
        assert outcome.streak.action == StreakAction.ALREADY_COUNTED
        assert outcome.profile.streak_current == 1
        assert outcome.profile.exp == 120 - 100  # second 60 crossed level 1

    def test_finishing_twice_is_rejected(self, lifecycle, plan, store) -> None:
        item = plan.ordered_items()[0]
        session = lifecycle.start("user-1")
        lifecycle.finish(session.id, [item.id])
        with pytest.raises(InvalidSessionState):
            lifecycle.finish(session.id, [item.id])
        assert store.get_profile("user-1").exp == 60

    def test_unknown_item_rejected_without_side_effects(self, lifecycle, plan, store) -> None:
        session = lifecycle.start("user-1")
        with pytest.raises(ValidationError, match="not part of plan"):
            lifecycle.finish(session.id, ["bogus"])
        assert store.get_session(session.id).status == SessionStatus.IN_PROGRESS
        assert store.get_profile("user-1").exp == 0

    def test_error_names_only_unknown_items(self, lifecycle, plan) -> None:
        known = plan.ordered_items()[0]
        session = lifecycle.start("user-1")
        with pytest.raises(ValidationError) as excinfo:
            lifecycle.finish(session.id, [known.id, "zz-missing"])
        assert "zz-missing" in str(excinfo.value)
        assert known.id not in str(excinfo.value)

    def test_duplicate_checks_count_once(self, lifecycle, plan) -> None:
        item = plan.ordered_items()[0]
        outcome = lifecycle.finish(lifecycle.start("user-1").id, [item.id, item.id])
        assert outcome.exp_earned == 60

    def test_unknown_session(self, lifecycle) -> None:
        with pytest.raises(NotFound):
            lifecycle.finish("missing", [])

    def test_failed_profile_write_leaves_session_in_progress(self, lifecycle, plan, store) -> None:
        item = plan.ordered_items()[0]
        session = lifecycle.start("user-1")
        with patch.object(store, "update_profile", side_effect=TransportError("connection lost")):
            with pytest.raises(TransportError):
                lifecycle.finish(session.id, [item.id])

        assert store.get_session(session.id).status == SessionStatus.IN_PROGRESS
        assert store.get_profile("user-1").exp == 0

        # Retry succeeds once the store recovers
        outcome = lifecycle.finish(session.id, [item.id])
        assert outcome.exp_earned == 60

    def test_concurrent_exp_change_is_not_overwritten(self, plan, store, clock) -> None:
        item = plan.ordered_items()[0]
        session = SessionLifecycle(store, store, store, store, clock=clock).start("user-1")
        stale = store.get_profile("user-1")
        # A purchase elsewhere changes the balance before finish writes
        store.update_profile("user-1", {"exp": 25})
        profiles = MagicMock(wraps=store)
        profiles.get_profile.side_effect = lambda user_id: stale
        lifecycle = SessionLifecycle(
            profiles=profiles, plans=store, sessions=store, uow=store, clock=clock
        )

        with pytest.raises(ConcurrentUpdateError):
            lifecycle.finish(session.id, [item.id])

        assert store.get_session(session.id).status == SessionStatus.IN_PROGRESS
        assert store.get_session(session.id).exp_earned == 0
        assert store.get_profile("user-1").exp == 25

    def test_streak_uses_session_end_date(self, lifecycle, plan, store, clock) -> None:
        store.update_profile(
            "user-1",
            {"streak_current": 4, "streak_freeze_count": 1, "last_streak_date": date(2026, 3, 8)},
        )
        outcome = lifecycle.finish(lifecycle.start("user-1").id, [])
        assert outcome.profile.streak_current == 5
        assert outcome.profile.streak_freeze_count == 0
        assert outcome.streak.freezes_consumed == 1


class TestLogExercise:
    def test_awards_exp_only(self, lifecycle, store) -> None:
        exercise = Exercise("x", "Muscle-ups", MuscleGroup.BACK, Difficulty.ADVANCED)
        result = lifecycle.log_exercise("user-1", exercise, sets=4, reps=5)
        assert result.exp_earned == 120
        assert result.profile.level == 2
        assert result.profile.exp == 20
        assert result.profile.streak_current == 0
        assert store.list_sessions("user-1") == []


class TestTodaysSession:
    def test_none_before_starting(self, lifecycle, plan) -> None:
        assert lifecycle.todays_session("user-1") is None

    def test_returns_latest_session_today(self, lifecycle, plan, clock) -> None:
        lifecycle.start("user-1")
        clock.advance(hours=2)
        latest = lifecycle.start("user-1")
        assert lifecycle.todays_session("user-1") == latest

    def test_ignores_other_days(self, lifecycle, plan, clock) -> None:
        lifecycle.start("user-1")
        assert lifecycle.todays_session("user-1", today=date(2026, 3, 11)) is None
        assert lifecycle.todays_session("user-1", today=clock.now.date()) is not None

    def test_sessions_are_listed_in_start_order(self, lifecycle, plan, store, clock) -> None:
        first = lifecycle.start("user-1")
        clock.now = datetime(2026, 3, 11, 7, 0)
        second = lifecycle.start("user-1")
        assert [s.id for s in store.list_sessions("user-1")] == [first.id, second.id]
