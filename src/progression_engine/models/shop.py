"""Shop models: ShopItem and InventoryEntry."""

from __future__ import annotations

from dataclasses import dataclass

from progression_engine.models.enums import ItemType


@dataclass(frozen=True)
class ShopItem:
    """A purchasable item priced in EXP."""

    id: str
    name: str
    cost_exp: int
    type: ItemType
    description: str = ""


@dataclass(frozen=True)
class InventoryEntry:
    """Owned quantity of one item. (user_id, item_id) is unique."""

    user_id: str
    item_id: str
    quantity: int = 1
