"""Persisted streak checks for the scheduling collaborator."""

from __future__ import annotations

import logging
from datetime import date

from progression_engine.math.streak import check_streak
from progression_engine.models.enums import StreakAction
from progression_engine.models.progress import StreakResult
from progression_engine.stores import ProfileStore, UnitOfWork

logger = logging.getLogger(__name__)


class StreakTracker:
    """Settles missed days for one user: keep, consume freezes, or reset.

    Completions are credited by SessionLifecycle; this class only handles
    the passage of time, and is meant to be driven by a daily job.
    """

    def __init__(self, profiles: ProfileStore, uow: UnitOfWork) -> None:
        self.profiles = profiles
        self.uow = uow

    def check(self, user_id: str, today: date) -> StreakResult:
        """Evaluate and persist the streak for ``user_id`` as of ``today``."""
        with self.uow.atomic():
            profile = self.profiles.get_profile(user_id)
            result = check_streak(profile.streak_state, today)
            if result.action != StreakAction.KEPT:
                self.profiles.update_profile(
                    user_id,
                    {
                        "streak_current": result.state.streak_current,
                        "streak_freeze_count": result.state.streak_freeze_count,
                        "last_streak_date": result.state.last_streak_date,
                    },
                    expected_version=profile.version,
                )

        if result.action == StreakAction.FROZEN:
            logger.info(
                "User %s: %d freeze(s) consumed, streak kept at %d",
                user_id,
                result.freezes_consumed,
                result.state.streak_current,
            )
        elif result.action == StreakAction.RESET:
            logger.info(
                "User %s: streak reset after %d missed day(s)", user_id, result.missed_days
            )
        return result
