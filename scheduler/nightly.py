"""Nightly streak sweep — settles missed days for every user.

Usage:
    python -m scheduler.nightly --once      # single run (for cron)
    python -m scheduler.nightly --daemon    # APScheduler loop
"""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from datetime import date

from progression_engine import ProgressionEngine, ProgressionError
from progression_engine.models.enums import StreakAction
from progression_store import SQLiteStore, load_seed, seed_store

from scheduler.config import DB_PATH, NIGHTLY_HOUR, NIGHTLY_MINUTE, SEED_PATH

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def open_store() -> SQLiteStore:
    """Open the configured database, creating and seeding it if needed."""
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    store = SQLiteStore(DB_PATH)
    try:
        if SEED_PATH is not None:
            exercises, items = load_seed(SEED_PATH)
            seed_store(store, exercises, items)
        elif not store.list_exercises():
            seed_store(store)
    except ProgressionError:
        store.close()
        raise
    return store


def sweep_streaks(
    engine: ProgressionEngine, user_ids: list[str], today: date
) -> Counter[StreakAction]:
    """Run the streak check for each user; one user's failure does not stop the rest."""
    outcomes: Counter[StreakAction] = Counter()
    for user_id in user_ids:
        try:
            result = engine.check_streak(user_id, today)
        except ProgressionError as exc:
            logger.error("Streak check failed for %s: %s", user_id, exc)
            continue
        outcomes[result.action] += 1
    return outcomes


def nightly_job() -> None:
    """Execute one nightly cycle over every stored profile."""
    logger.info("Starting nightly streak sweep")

    try:
        store = open_store()
    except ProgressionError as exc:
        logger.error("Failed to open store at %s: %s", DB_PATH, exc)
        return

    try:
        engine = ProgressionEngine(store)
        today = date.today()
        outcomes = sweep_streaks(engine, store.list_user_ids(), today)
        summary = ", ".join(
            f"{action.value}={count}" for action, count in sorted(outcomes.items())
        )
        logger.info("Streak sweep for %s: %s", today.isoformat(), summary or "no users")
    finally:
        store.close()

    logger.info("Nightly job complete")


def main() -> None:
    parser = argparse.ArgumentParser(description="Progression nightly streak scheduler")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--once", action="store_true", help="Run once and exit")
    group.add_argument("--daemon", action="store_true", help="Run as APScheduler daemon")
    args = parser.parse_args()

    if args.once:
        nightly_job()
    else:
        from apscheduler.schedulers.blocking import BlockingScheduler

        scheduler = BlockingScheduler()
        scheduler.add_job(
            nightly_job,
            "cron",
            hour=NIGHTLY_HOUR,
            minute=NIGHTLY_MINUTE,
            id="nightly_job",
        )
        logger.info(
            "Scheduler started — nightly job at %02d:%02d",
            NIGHTLY_HOUR,
            NIGHTLY_MINUTE,
        )
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
