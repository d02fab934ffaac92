"""Custom exception hierarchy for the progression engine.

Every error is recoverable at the call site. The engine never retries on
its own; callers decide what to do with a failure.
"""

from __future__ import annotations


class ProgressionError(Exception):
    """Base exception for all progression_engine errors."""


class ValidationError(ProgressionError):
    """Input or stored state is missing required data or is malformed."""


class InvalidSessionState(ValidationError):
    """A session transition was requested from the wrong state."""

    def __init__(self, session_id: str, status: str) -> None:
        super().__init__(f"Session {session_id} is {status}, expected in_progress")
        self.session_id = session_id
        self.status = status


class InsufficientFunds(ProgressionError):
    """The profile's EXP balance does not cover the item's cost."""

    def __init__(self, balance: int, cost: int) -> None:
        super().__init__(f"Insufficient EXP: balance {balance}, cost {cost}")
        self.balance = balance
        self.cost = cost


class NotFound(ProgressionError):
    """A requested record (profile, plan, item, session) does not exist."""


class TransportError(ProgressionError):
    """The underlying store is unreachable or rejected a write."""


class ConcurrentUpdateError(TransportError):
    """A conditional write lost the race against another writer."""

    def __init__(self, user_id: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Profile {user_id} changed concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
        self.user_id = user_id
        self.expected_version = expected_version
        self.actual_version = actual_version
