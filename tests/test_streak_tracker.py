"""Tests for persisted streak checks."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from progression_engine.exceptions import NotFound
from progression_engine.models.enums import StreakAction
from progression_engine.shop import ShopEconomy
from progression_engine.streak_tracker import StreakTracker

TODAY = date(2026, 3, 10)


@pytest.fixture
def tracker(store) -> StreakTracker:
    return StreakTracker(profiles=store, uow=store)


class TestStreakTracker:
    def test_kept_does_not_write(self, store, tracker) -> None:
        store.update_profile("user-1", {"streak_current": 3, "last_streak_date": date(2026, 3, 9)})
        version = store.get_profile("user-1").version

        result = tracker.check("user-1", TODAY)

        assert result.action == StreakAction.KEPT
        assert store.get_profile("user-1").version == version

    def test_freeze_consumed_and_persisted(self, store, tracker) -> None:
        store.update_profile(
            "user-1",
            {"streak_current": 5, "streak_freeze_count": 2, "last_streak_date": date(2026, 3, 8)},
        )

        result = tracker.check("user-1", TODAY)

        assert result.action == StreakAction.FROZEN
        profile = store.get_profile("user-1")
        assert profile.streak_current == 5
        assert profile.streak_freeze_count == 1
        assert profile.last_streak_date == date(2026, 3, 9)

    def test_reset_persisted(self, store, tracker) -> None:
        store.update_profile("user-1", {"streak_current": 5, "last_streak_date": date(2026, 3, 1)})

        result = tracker.check("user-1", TODAY)

        assert result.action == StreakAction.RESET
        assert store.get_profile("user-1").streak_current == 0
        assert store.get_profile("user-1").last_streak_date is None

    def test_freezes_bought_after_reset_survive_next_check(self, store, tracker) -> None:
        store.update_profile("user-1", {"streak_current": 1, "last_streak_date": date(2026, 3, 6)})
        assert tracker.check("user-1", date(2026, 3, 8)).action == StreakAction.RESET

        store.update_profile("user-1", {"exp": 100})
        shop = ShopEconomy(profiles=store, shop=store, uow=store)
        shop.purchase("user-1", "freeze")
        shop.purchase("user-1", "freeze")
        version = store.get_profile("user-1").version

        result = tracker.check("user-1", date(2026, 3, 9))

        assert result.action == StreakAction.KEPT
        profile = store.get_profile("user-1")
        assert profile.streak_freeze_count == 2
        assert profile.exp == 0
        assert profile.version == version

    def test_idle_user_is_not_rewritten_every_night(self, store, tracker) -> None:
        store.update_profile("user-1", {"streak_current": 3, "last_streak_date": date(2026, 3, 1)})
        tracker.check("user-1", TODAY)
        version = store.get_profile("user-1").version

        for day in (11, 12, 13):
            assert tracker.check("user-1", date(2026, 3, day)).action == StreakAction.KEPT
        assert store.get_profile("user-1").version == version

    def test_repeated_checks_are_stable(self, store, tracker) -> None:
        store.update_profile(
            "user-1",
            {"streak_current": 5, "streak_freeze_count": 1, "last_streak_date": date(2026, 3, 8)},
        )
        tracker.check("user-1", TODAY)
        assert tracker.check("user-1", TODAY).action == StreakAction.KEPT
        assert store.get_profile("user-1").streak_freeze_count == 0

    def test_unknown_user(self, tracker) -> None:
        with pytest.raises(NotFound):
            tracker.check("ghost", TODAY)

    def test_uses_version_check_on_write(self, store) -> None:
        profiles = MagicMock(wraps=store)
        tracker = StreakTracker(profiles=profiles, uow=store)
        store.update_profile("user-1", {"streak_current": 2, "last_streak_date": date(2026, 3, 1)})
        version = store.get_profile("user-1").version

        tracker.check("user-1", TODAY)

        _, kwargs = profiles.update_profile.call_args
        assert kwargs["expected_version"] == version
