"""Tests for the dashboard helpers."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import patch

import pytest

from progression_engine import InvalidSessionState, NotFound, TransportError
from progression_engine.models.enums import ItemType, SessionStatus
from progression_engine.models.session import WorkoutSession
from progression_engine.models.shop import ShopItem
from progression_engine.shop import OwnedItem
from streamlit_app.helpers import (
    finish_tracked_session,
    format_duration,
    format_exp,
    inventory_frame,
    profile_fields_from_form,
    rank_banner_html,
    session_history_frame,
)


def _session(day: int, minutes: int | None, exp: int = 0) -> WorkoutSession:
    start = datetime(2026, 3, day, 7, 0)
    if minutes is None:
        return WorkoutSession(user_id="u", plan_id="p", started_at=start)
    return WorkoutSession(
        user_id="u",
        plan_id="p",
        started_at=start,
        status=SessionStatus.COMPLETED,
        ended_at=start.replace(minute=minutes),
        exp_earned=exp,
    )


class TestFormatting:
    def test_format_exp(self, profile_factory) -> None:
        assert format_exp(profile_factory(exp=40, exp_to_next_level=120)) == "EXP 40 / 120"

    def test_banner_shows_level_and_rank(self, profile_factory) -> None:
        html = rank_banner_html(profile_factory(level=23))
        assert "Level 23" in html
        assert "C-Rank" in html

    def test_duration(self) -> None:
        assert format_duration(_session(1, 45)) == "45m"
        assert format_duration(_session(1, None)) == "--"


class TestFrames:
    def test_inventory_frame(self) -> None:
        item = ShopItem("f", "Streak Freeze", 50, ItemType.STREAK_FREEZE)
        df = inventory_frame([OwnedItem(item=item, quantity=3)])
        assert list(df.columns) == ["Item", "Type", "Quantity"]
        assert df.iloc[0]["Quantity"] == 3
        assert df.iloc[0]["Type"] == "streak_freeze"

    def test_empty_inventory_frame_keeps_columns(self) -> None:
        assert list(inventory_frame([]).columns) == ["Item", "Type", "Quantity"]
        assert inventory_frame([]).empty

    def test_history_newest_first_completed_only(self) -> None:
        df = session_history_frame([_session(1, 30, 60), _session(3, None), _session(2, 20, 90)])
        assert df["Date"].tolist() == ["2026-03-02", "2026-03-01"]
        assert df["EXP"].tolist() == [90, 60]


class TestProfileForm:
    def test_blank_numbers_become_none(self) -> None:
        fields = profile_fields_from_form({"focus_area": "Cardio", "age": "", "weight": "72.5"})
        assert fields["age"] is None
        assert fields["weight"] == 72.5
        assert fields["focus_area"] == "Cardio"
        assert fields["username"] is None

    def test_workout_days_in_week_order(self) -> None:
        fields = profile_fields_from_form({"workout_days": ["Fri", "Mon", "Wed"]})
        assert fields["workout_days"] == ("Mon", "Wed", "Fri")

    def test_fields_are_all_updatable(self, store) -> None:
        fields = profile_fields_from_form({"focus_area": "Cardio", "fitness_level": "Advanced"})
        updated = store.update_profile("user-1", fields)
        assert updated.fitness_level == "Advanced"


class TestFinishTrackedSession:
    def test_completed_session_id_is_dropped(self, engine) -> None:
        engine.generate_plan("user-1")
        state = {"session_id": engine.start_workout("user-1").id}

        outcome = finish_tracked_session(engine, state, [])

        assert outcome.session.is_completed
        assert "session_id" not in state

    def test_session_finished_elsewhere_is_dropped(self, engine) -> None:
        engine.generate_plan("user-1")
        session = engine.start_workout("user-1")
        engine.finish_workout(session.id, [])
        state = {"session_id": session.id}

        with pytest.raises(InvalidSessionState):
            finish_tracked_session(engine, state, [])

        assert "session_id" not in state

    def test_unknown_session_is_dropped(self, engine) -> None:
        state = {"session_id": "gone"}
        with pytest.raises(NotFound):
            finish_tracked_session(engine, state, [])
        assert state == {}

    def test_store_failure_keeps_id_for_retry(self, engine) -> None:
        engine.generate_plan("user-1")
        session = engine.start_workout("user-1")
        state = {"session_id": session.id}

        with patch.object(engine.store, "update_profile", side_effect=TransportError("offline")):
            with pytest.raises(TransportError):
                finish_tracked_session(engine, state, [])

        assert state == {"session_id": session.id}
