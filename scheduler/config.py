"""Environment-variable-based configuration for the scheduler and dashboard."""

from __future__ import annotations

import os
from pathlib import Path

DB_PATH: Path = Path(os.environ.get("PROGRESSION_DB_PATH", "~/.progression/progression.db")).expanduser()
SEED_PATH: Path | None = (
    Path(os.environ["PROGRESSION_SEED_PATH"]) if os.environ.get("PROGRESSION_SEED_PATH") else None
)
NIGHTLY_HOUR: int = int(os.environ.get("SCHEDULER_HOUR", "23"))
NIGHTLY_MINUTE: int = int(os.environ.get("SCHEDULER_MINUTE", "30"))
