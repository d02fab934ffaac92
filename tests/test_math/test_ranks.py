"""Tests for rank tiers."""

from __future__ import annotations

import pytest

from progression_engine.math.ranks import rank_colors, rank_for_level, rank_name
from progression_engine.models.enums import RankTier


class TestRankForLevel:
    @pytest.mark.parametrize(
        "level, tier",
        [
            (1, RankTier.E),
            (9, RankTier.E),
            (10, RankTier.D),
            (19, RankTier.D),
            (20, RankTier.C),
            (30, RankTier.B),
            (40, RankTier.A),
            (49, RankTier.A),
            (50, RankTier.S),
            (120, RankTier.S),
        ],
    )
    def test_thresholds(self, level: int, tier: RankTier) -> None:
        assert rank_for_level(level) == tier

    def test_rank_name(self) -> None:
        assert rank_name(1) == "E-Rank"
        assert rank_name(55) == "S-Rank"

    def test_colors_are_hex_pairs(self) -> None:
        start, end = rank_colors(25)
        assert start.startswith("#") and end.startswith("#")
        assert rank_colors(1) == ("#2c3e50", "#000000")
