"""End-to-end tests through the ProgressionEngine facade."""

from __future__ import annotations

from progression_engine import ProgressionEngine
from progression_engine.models.enums import MuscleGroup, RankTier, StreakAction


class TestEngineFlow:
    def test_full_loop(self, engine: ProgressionEngine, store, clock) -> None:
        plan = engine.generate_plan("user-1")
        assert engine.active_plan("user-1") == plan

        session = engine.start_workout("user-1")
        ids = [item.id for item in plan.ordered_items()]
        clock.advance(minutes=30)
        outcome = engine.finish_workout(session.id, ids)

        # Burpees 60 + Inverted Rows 30 + Jumping Jacks 30 + Lunges 60 + Plank 30
        assert outcome.exp_earned == 210
        assert outcome.profile.level == 2
        assert outcome.profile.exp == 110
        assert engine.todays_session("user-1").is_completed

        purchase = engine.purchase("user-1", "freeze")
        assert purchase.profile.exp == 60
        assert purchase.profile.streak_freeze_count == 1
        assert [(o.item.id, o.quantity) for o in engine.inventory("user-1")] == [("freeze", 1)]

    def test_freeze_protects_missed_day(self, engine, clock) -> None:
        engine.generate_plan("user-1")
        engine.finish_workout(engine.start_workout("user-1").id, [])
        engine.store.update_profile("user-1", {"exp": 50})
        engine.purchase("user-1", "freeze")

        clock.advance(days=2)
        result = engine.check_streak("user-1")

        assert result.action == StreakAction.FROZEN
        status = engine.status("user-1")
        assert status.profile.streak_current == 1
        assert status.profile.streak_freeze_count == 0

    def test_check_streak_explicit_day(self, engine, today) -> None:
        assert engine.check_streak("user-1", today).action == StreakAction.KEPT

    def test_status(self, engine, store) -> None:
        store.update_profile("user-1", {"level": 12, "exp": 30, "exp_to_next_level": 120})
        status = engine.status("user-1")
        assert status.rank == RankTier.D
        assert status.rank_name == "D-Rank"
        assert status.progress_fraction == 0.25

    def test_browse_exercises(self, engine) -> None:
        names = [ex.name for ex in engine.browse_exercises(MuscleGroup.LEGS)]
        assert names == ["Lunges", "Squats"]

    def test_log_exercise(self, engine, catalog) -> None:
        result = engine.log_exercise("user-1", catalog[0], 3, 10)
        assert result.exp_earned == 30
        assert engine.status("user-1").profile.exp == 30
