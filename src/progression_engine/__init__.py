"""Progression engine: leveling, plan generation, streaks and the EXP shop."""

from progression_engine.engine import ProfileStatus, ProgressionEngine
from progression_engine.exceptions import (
    ConcurrentUpdateError,
    InsufficientFunds,
    InvalidSessionState,
    NotFound,
    ProgressionError,
    TransportError,
    ValidationError,
)

__all__ = [
    "ConcurrentUpdateError",
    "InsufficientFunds",
    "InvalidSessionState",
    "NotFound",
    "ProfileStatus",
    "ProgressionEngine",
    "ProgressionError",
    "TransportError",
    "ValidationError",
]
