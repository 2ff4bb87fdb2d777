"""
Economy engine — market prices, shop inventories, and trade.

Prices follow aggregate supply (stock held by open shops) against
demand driven by the living population, read from the demographic
registry. Each economy tick:

1. Recompute every item's market price
2. Restock open shops and roll closures for struggling settlements
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from worldsim.core.config import SimulationConfig
from worldsim.core.events import (
    EventBus, PriceChanged, ShopClosed, ShopOpened, WorldEventLog,
)
from worldsim.core.registry import DemographicRegistry
from worldsim.core.settlement import Settlement
from worldsim.economy.catalog import DEFAULT_ITEMS, Item, ShopTemplate, shop_templates_for

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class InventoryEntry:
    item_name: str
    quantity: int
    local_price_modifier: float = 1.0


@dataclass
class Shop:
    """A shop in a settlement. Closed shops stay addressable."""
    id: str
    name: str
    settlement: str
    type: str
    owner_id: str | None = None
    inventory: dict[str, InventoryEntry] = field(default_factory=dict)
    is_open: bool = True
    reputation: float = 50.0

    def stock_of(self, item_name: str) -> int:
        entry = self.inventory.get(item_name)
        return entry.quantity if entry is not None else 0


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class EconomyEngine:
    """Item catalog, market prices and per-settlement shops."""

    def __init__(
        self,
        config: SimulationConfig,
        registry: DemographicRegistry,
        event_log: WorldEventLog,
        bus: EventBus,
        rng: np.random.Generator,
        items: Iterable[Item] = DEFAULT_ITEMS,
    ) -> None:
        self.config = config
        self.ec = config.economy_config
        self.registry = registry
        self.event_log = event_log
        self.bus = bus
        self.rng = rng

        self.items: dict[str, Item] = {}
        self.market_prices: dict[str, float] = {}
        for item in items:
            self.items[item.name] = item
            self.market_prices[item.name] = item.base_price

        self.shops: dict[str, Shop] = {}
        self._next_shop_id = 0

    # ------------------------------------------------------------------
    # Shop creation
    # ------------------------------------------------------------------
    def create_initial_shops(self) -> list[Shop]:
        shops: list[Shop] = []
        for settlement in self.registry.settlements.values():
            shops.extend(self.create_shops_for_settlement(settlement))
        return shops

    def create_shops_for_settlement(self, settlement: Settlement) -> list[Shop]:
        return [
            self.create_shop(template, settlement.name)
            for template in shop_templates_for(settlement.dominant_race)
        ]

    def create_shop(self, template: ShopTemplate, settlement: str) -> Shop:
        self._next_shop_id += 1
        shop = Shop(
            id=f"{_slug(settlement)}_{_slug(template.name)}_{self._next_shop_id:04d}",
            name=template.name,
            settlement=settlement,
            type=template.type,
            owner_id=self._pick_owner(settlement),
            reputation=self.ec["starting_reputation"],
        )

        low_q, high_q = self.ec["starting_stock_range"]
        low_m, high_m = self.ec["local_modifier_range"]
        for item_name in template.items:
            if item_name not in self.items:
                continue
            shop.inventory[item_name] = InventoryEntry(
                item_name=item_name,
                quantity=int(self.rng.integers(low_q, high_q, endpoint=True)),
                local_price_modifier=float(self.rng.uniform(low_m, high_m)),
            )

        self.shops[shop.id] = shop
        self.bus.publish(ShopOpened(shop_id=shop.id, settlement=settlement))
        return shop

    def _pick_owner(self, settlement: str) -> str | None:
        residents = self.registry.npcs_in_settlement(settlement)
        if not residents:
            return None
        merchants = [
            npc for npc in residents
            if "Merchant" in npc.profession or "Trader" in npc.profession
        ]
        pool = merchants or residents
        return pool[int(self.rng.integers(0, len(pool)))].id

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def tick(self) -> None:
        self.update_market_prices()
        self.update_shop_inventories()

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------
    def update_market_prices(self) -> dict[str, tuple[float, float]]:
        """Recompute all prices. Returns {item: (old, new)} for moved prices."""
        changes: dict[str, tuple[float, float]] = {}
        for item_name in list(self.items):
            old_price = self.market_prices[item_name]
            new_price = self.calculate_new_price(item_name)
            if abs(new_price - old_price) > self.ec["price_dead_band"]:
                self.market_prices[item_name] = new_price
                changes[item_name] = (old_price, new_price)
                logger.debug("%s: %.2f -> %.2f", item_name, old_price, new_price)
                self.bus.publish(PriceChanged(
                    item=item_name, old_price=old_price, new_price=new_price,
                ))
        return changes

    def total_supply(self, item_name: str) -> int:
        return sum(
            shop.inventory[item_name].quantity
            for shop in self.shops.values()
            if shop.is_open and item_name in shop.inventory
        )

    def base_demand(self, item: Item) -> float:
        return self.ec["category_base_demand"].get(
            item.category, self.ec["default_base_demand"],
        )

    def total_demand(self, item_name: str) -> float:
        item = self.items[item_name]
        population = self.registry.total_population()
        return self.base_demand(item) * (population / self.ec["demand_population_unit"])

    def price_modifier(self, item_name: str) -> float:
        """Supply/demand pressure on the price, before market noise."""
        ratio = self.total_demand(item_name) / max(1.0, float(self.total_supply(item_name)))
        return 1.0 + (ratio - 1.0) * self.config.supply_demand_influence

    def price_bounds(self, item_name: str) -> tuple[float, float]:
        base = self.items[item_name].base_price
        return base * self.ec["min_price_factor"], base * self.ec["max_price_factor"]

    def calculate_new_price(self, item_name: str) -> float:
        current = self.market_prices[item_name]
        random_factor = 1.0 + (self.rng.random() - 0.5) * self.config.price_fluctuation_rate
        low, high = self.price_bounds(item_name)
        return float(np.clip(current * self.price_modifier(item_name) * random_factor, low, high))

    # ------------------------------------------------------------------
    # Inventories
    # ------------------------------------------------------------------
    def update_shop_inventories(self) -> list[str]:
        """Restock open shops, then roll closures. Returns closed shop ids."""
        closed: list[str] = []
        for shop in list(self.shops.values()):
            if not shop.is_open:
                continue
            self.restock(shop)
            if self.roll_closure(shop):
                closed.append(shop.id)
        return closed

    def restock(self, shop: Shop) -> int:
        """Randomly top up each inventory entry. Returns units added."""
        if not shop.is_open:
            return 0
        low, high = self.ec["restock_range"]
        cap = self.ec["max_stock"]
        added = 0
        for entry in shop.inventory.values():
            if self.rng.random() < self.ec["restock_chance"]:
                before = entry.quantity
                entry.quantity = min(cap, entry.quantity + int(self.rng.integers(low, high, endpoint=True)))
                added += max(0, entry.quantity - before)
        return added

    def roll_closure(self, shop: Shop) -> bool:
        """Shops in a struggling settlement may close for good."""
        settlement = self.registry.get_settlement(shop.settlement)
        if settlement is None or settlement.prosperity >= self.ec["closure_prosperity_threshold"]:
            return False
        if self.rng.random() >= self.ec["closure_chance"]:
            return False
        return self.close_shop(shop.id, "Economic hardship")

    def close_shop(self, shop_id: str, reason: str) -> bool:
        shop = self.shops.get(shop_id)
        if shop is None or not shop.is_open:
            return False
        shop.is_open = False
        self.bus.publish(ShopClosed(shop_id=shop_id, reason=reason))
        self.event_log.record(
            f"{shop.name} in {shop.settlement} has closed due to {reason}.",
            category="shop_closed",
            payload={"shop_id": shop_id, "settlement": shop.settlement, "reason": reason},
        )
        return True

    # ------------------------------------------------------------------
    # Trade
    # ------------------------------------------------------------------
    def purchase_item(self, shop_id: str, item_name: str, quantity: int) -> bool:
        shop = self.shops.get(shop_id)
        if shop is None or not shop.is_open or quantity < 1:
            return False
        entry = shop.inventory.get(item_name)
        if entry is None or entry.quantity < quantity:
            return False
        entry.quantity -= quantity
        shop.reputation += self.ec["purchase_reputation_gain"]
        return True

    def get_current_price(self, item_name: str, shop_id: str | None = None) -> float:
        """Market price, adjusted by the shop's local modifier when given."""
        price = self.market_prices.get(item_name, 0.0)
        shop = self.shops.get(shop_id) if shop_id is not None else None
        if shop is not None and item_name in shop.inventory:
            return price * shop.inventory[item_name].local_price_modifier
        return price

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_market_price(self, item_name: str) -> float | None:
        return self.market_prices.get(item_name)

    def get_item(self, item_name: str) -> Item | None:
        return self.items.get(item_name)

    def get_shop(self, shop_id: str) -> Shop | None:
        return self.shops.get(shop_id)

    def shops_in_settlement(self, settlement: str) -> list[Shop]:
        return [
            shop for shop in self.shops.values()
            if shop.settlement == settlement and shop.is_open
        ]

    def available_items(self) -> list[Item]:
        return list(self.items.values())

    def price_index(self) -> float:
        """
        Mean of price / base price across the catalog (1.0 = at base).

        Items with no base price are left out.
        """
        ratios = [
            self.market_prices[name] / item.base_price
            for name, item in self.items.items()
            if item.base_price > 0
        ]
        if not ratios:
            return 0.0
        return float(np.mean(ratios))
