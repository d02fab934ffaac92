"""Concrete stores for the progression engine — all persistence I/O lives here."""

from progression_store.memory import InMemoryStore
from progression_store.seed import (
    DEFAULT_EXERCISES,
    DEFAULT_SHOP_ITEMS,
    load_seed,
    seed_store,
)
from progression_store.sqlite import SQLiteStore

__all__ = [
    "DEFAULT_EXERCISES",
    "DEFAULT_SHOP_ITEMS",
    "InMemoryStore",
    "SQLiteStore",
    "load_seed",
    "seed_store",
]
