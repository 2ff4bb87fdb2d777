"""
Static economy data: the item catalog and the shop line-up per race.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Item:
    """A tradeable good. ``name`` is the catalog key."""
    name: str
    category: str
    base_price: float
    rarity: str = "Common"
    description: str = ""
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ShopTemplate:
    name: str
    type: str
    items: tuple[str, ...]


DEFAULT_ITEMS: tuple[Item, ...] = (
    Item("Bread", "Food", 5.0, "Common", "A fresh loaf from the village oven."),
    Item("Iron Sword", "Weapon", 50.0, "Common", "A dependable blade of forged iron."),
    Item("Health Potion", "Consumable", 25.0, "Common", "Restores vigour when drunk."),
    Item("Magic Staff", "Weapon", 150.0, "Uncommon", "A focus for channelling spells."),
    Item("Dragon Scale", "Material", 500.0, "Rare", "Near-impenetrable armour plating."),
    Item("Ancient Tome", "Book", 200.0, "Uncommon", "Forgotten lore in a crumbling binding."),
    Item("Goblin Ear", "Trophy", 10.0, "Common", "Proof of a goblin bounty."),
    Item("Spider Silk", "Material", 30.0, "Common", "Strong, light thread."),
    Item("Demon Horn", "Material", 100.0, "Uncommon", "Still warm to the touch."),
    Item("Vampire Fang", "Material", 75.0, "Uncommon", "Prized by alchemists."),
)

GENERAL_STORE = ShopTemplate(
    "General Store", "General", ("Bread", "Health Potion", "Iron Sword"),
)

RACE_SHOPS: dict[str, tuple[ShopTemplate, ...]] = {
    "Human": (
        ShopTemplate("Blacksmith", "Weapons", ("Iron Sword", "Magic Staff")),
        ShopTemplate("Alchemist", "Potions", ("Health Potion", "Ancient Tome")),
    ),
    "Goblin": (
        ShopTemplate("Scrap Trader", "Materials", ("Goblin Ear", "Spider Silk")),
    ),
    "Spider": (
        ShopTemplate("Silk Weaver", "Textiles", ("Spider Silk",)),
    ),
    "Demon": (
        ShopTemplate("Dark Merchant", "Dark Items", ("Demon Horn", "Magic Staff")),
    ),
    "Vampire": (
        ShopTemplate("Blood Bank", "Vampire Goods", ("Vampire Fang", "Ancient Tome")),
    ),
}


def shop_templates_for(race: str) -> tuple[ShopTemplate, ...]:
    """The general store plus any shops specific to a settlement's race."""
    return (GENERAL_STORE, *RACE_SHOPS.get(race, ()))
