"""Streak bookkeeping: daily completion credit and freeze consumption.

A streak day is "credited" either by a completed session or by consuming a
streak freeze. ``last_streak_date`` is the most recent credited day. Days
strictly between that date and today are missed; today itself is never
missed because it can still be completed.
"""

from __future__ import annotations

import dataclasses
from datetime import date, timedelta

from progression_engine.models.enums import StreakAction
from progression_engine.models.progress import StreakResult, StreakState


def missed_days(last_streak_date: date | None, today: date) -> int:
    """Number of uncredited days between the last credited day and today."""
    if last_streak_date is None:
        return 0
    return max((today - last_streak_date).days - 1, 0)


def check_streak(state: StreakState, today: date) -> StreakResult:
    """Decide whether the streak survives the days since it was last credited.

    Each missed day costs one freeze. If the freezes cover every missed day
    they are consumed and the streak is carried through yesterday. Otherwise
    the streak resets to zero, the freezes are kept and ``last_streak_date``
    is cleared.

    Args:
        state: Current streak counters.
        today: The calendar day being evaluated.

    Returns:
        StreakResult with action KEPT, FROZEN or RESET.
    """
    missed = missed_days(state.last_streak_date, today)
    if missed == 0:
        return StreakResult(state=state, action=StreakAction.KEPT)

    if missed <= state.streak_freeze_count:
        frozen = dataclasses.replace(
            state,
            streak_freeze_count=state.streak_freeze_count - missed,
            last_streak_date=today - timedelta(days=1),
        )
        return StreakResult(
            state=frozen,
            action=StreakAction.FROZEN,
            freezes_consumed=missed,
            missed_days=missed,
        )

    # A zero streak has no credited day, so later checks stay KEPT.
    reset = dataclasses.replace(state, streak_current=0, last_streak_date=None)
    return StreakResult(state=reset, action=StreakAction.RESET, missed_days=missed)


def record_completion(state: StreakState, today: date) -> StreakResult:
    """Credit today's completed session to the streak.

    Missed days are settled first (freeze or reset). A second completion on
    the same day earns no extra streak credit.
    """
    settled = check_streak(state, today)
    current = settled.state

    if current.last_streak_date == today:
        return dataclasses.replace(settled, action=StreakAction.ALREADY_COUNTED)

    credited = dataclasses.replace(
        current,
        streak_current=current.streak_current + 1,
        last_streak_date=today,
    )
    return StreakResult(
        state=credited,
        action=StreakAction.INCREMENTED,
        freezes_consumed=settled.freezes_consumed,
        missed_days=settled.missed_days,
    )
