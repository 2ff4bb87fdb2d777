"""Market economy: item catalog, shops and prices."""

from worldsim.economy.catalog import DEFAULT_ITEMS, Item, ShopTemplate, shop_templates_for
from worldsim.economy.market import EconomyEngine, InventoryEntry, Shop

__all__ = [
    "DEFAULT_ITEMS",
    "Item",
    "ShopTemplate",
    "shop_templates_for",
    "EconomyEngine",
    "InventoryEntry",
    "Shop",
]
