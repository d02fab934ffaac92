"""Rank tiers: cosmetic labels derived from level thresholds."""

from __future__ import annotations

from progression_engine.models.enums import RANK_COLORS, RANK_LEVEL_CEILINGS, RankTier


def rank_for_level(level: int) -> RankTier:
    """Map a level to its rank tier (E below 10, ..., S at 50 and above)."""
    for ceiling, tier in RANK_LEVEL_CEILINGS:
        if level < ceiling:
            return tier
    return RankTier.S


def rank_name(level: int) -> str:
    """Display label, e.g. ``"E-Rank"``."""
    return f"{rank_for_level(level).value}-Rank"


def rank_colors(level: int) -> tuple[str, str]:
    """Gradient (start, end) hex colors for the level's rank."""
    return RANK_COLORS[rank_for_level(level)]
