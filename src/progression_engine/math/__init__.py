"""Pure progression math: leveling curve, EXP award, rank tiers, streaks."""
