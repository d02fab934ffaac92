"""Shop economy: spend EXP on items and credit the user's inventory."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from progression_engine.exceptions import InsufficientFunds
from progression_engine.models.enums import ItemType
from progression_engine.models.profile import Profile
from progression_engine.models.shop import InventoryEntry, ShopItem
from progression_engine.stores import ProfileStore, ShopStore, UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseReceipt:
    """Post-purchase state of the balance and the credited inventory entry."""

    item: ShopItem
    profile: Profile
    entry: InventoryEntry


@dataclass(frozen=True)
class OwnedItem:
    """An inventory entry joined with its shop item, for display."""

    item: ShopItem
    quantity: int


def can_afford(profile: Profile, item: ShopItem) -> bool:
    return profile.exp >= item.cost_exp


def credit_inventory(existing: InventoryEntry | None, user_id: str, item_id: str) -> InventoryEntry:
    """Increment an existing entry or start a new one at quantity 1."""
    if existing is None:
        return InventoryEntry(user_id=user_id, item_id=item_id, quantity=1)
    return dataclasses.replace(existing, quantity=existing.quantity + 1)


class ShopEconomy:
    """Validates affordability and applies purchases atomically.

    The debit, the inventory credit and the streak-freeze counter bump all
    happen inside one unit of work. The profile is re-read inside that unit
    and written with a version check, so a concurrent EXP change surfaces
    as ConcurrentUpdateError instead of a lost update.
    """

    def __init__(self, profiles: ProfileStore, shop: ShopStore, uow: UnitOfWork) -> None:
        self.profiles = profiles
        self.shop = shop
        self.uow = uow

    def list_items(self) -> list[ShopItem]:
        return sorted(self.shop.list_items(), key=lambda i: (i.cost_exp, i.name))

    def purchase(self, user_id: str, item_id: str) -> PurchaseReceipt:
        """Buy one unit of ``item_id`` for ``user_id``.

        Raises:
            NotFound: Unknown user or item.
            InsufficientFunds: Balance below the item's cost. Nothing is written.
            TransportError: The store rejected a write; the unit rolls back.
        """
        item = self.shop.get_item(item_id)

        with self.uow.atomic():
            profile = self.profiles.get_profile(user_id)
            if not can_afford(profile, item):
                raise InsufficientFunds(balance=profile.exp, cost=item.cost_exp)

            fields: dict[str, int] = {"exp": profile.exp - item.cost_exp}
            if item.type == ItemType.STREAK_FREEZE:
                fields["streak_freeze_count"] = profile.streak_freeze_count + 1

            updated = self.profiles.update_profile(
                user_id, fields, expected_version=profile.version
            )
            existing = self.shop.get_inventory_entry(user_id, item_id)
            entry = self.shop.upsert_inventory(credit_inventory(existing, user_id, item_id))

        logger.info(
            "User %s bought %s for %d EXP (balance %d, owned %d)",
            user_id,
            item.name,
            item.cost_exp,
            updated.exp,
            entry.quantity,
        )
        return PurchaseReceipt(item=item, profile=updated, entry=entry)

    def inventory(self, user_id: str) -> list[OwnedItem]:
        """The user's inventory joined with item details, ordered by item name."""
        items = {item.id: item for item in self.shop.list_items()}
        owned = [
            OwnedItem(item=items[entry.item_id], quantity=entry.quantity)
            for entry in self.shop.list_inventory(user_id)
            if entry.item_id in items
        ]
        return sorted(owned, key=lambda o: o.item.name)
