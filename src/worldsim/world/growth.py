"""
Settlement growth — prosperity drift, construction and trade routes
(yearly), plus per-tick ghost-town detection.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from worldsim.core.config import SimulationConfig
from worldsim.core.events import WorldEventLog
from worldsim.core.registry import DemographicRegistry
from worldsim.core.settlement import Building, Settlement

logger = logging.getLogger(__name__)


class SettlementGrowthEngine:
    """Yearly development of every settlement."""

    def __init__(
        self,
        config: SimulationConfig,
        registry: DemographicRegistry,
        event_log: WorldEventLog,
        rng: np.random.Generator,
    ) -> None:
        self.config = config
        self.gc = config.growth_config
        self.registry = registry
        self.event_log = event_log
        self.rng = rng

    # ------------------------------------------------------------------
    # Yearly
    # ------------------------------------------------------------------
    def process_year(self, year: int) -> dict[str, Any]:
        buildings = 0
        routes = 0
        for settlement in list(self.registry.settlements.values()):
            self.grow_prosperity(settlement)
            if self.maybe_construct(settlement) is not None:
                buildings += 1
            if self.maybe_establish_trade_route(settlement) is not None:
                routes += 1
        return {"year": year, "buildings_built": buildings, "trade_routes_formed": routes}

    def grow_prosperity(self, settlement: Settlement) -> int:
        """Thriving settlements tend to keep thriving. Returns the gain."""
        if settlement.prosperity <= self.gc["prosperity_growth_threshold"]:
            return 0
        if self.rng.random() >= self.gc["prosperity_growth_chance"]:
            return 0
        low, high = self.gc["prosperity_growth_range"]
        gain = int(self.rng.integers(low, high, endpoint=True))
        settlement.adjust_prosperity(gain)
        return gain

    def maybe_construct(self, settlement: Settlement) -> Building | None:
        per_building = self.gc["residents_per_building"]
        if settlement.population <= len(settlement.buildings) * per_building:
            return None
        if self.rng.random() >= self.gc["construction_chance"]:
            return None
        return self.add_random_building(settlement)

    def add_random_building(self, settlement: Settlement) -> Building:
        functions: dict[str, str] = self.gc["building_functions"]
        kinds = list(functions)
        kind = kinds[int(self.rng.integers(0, len(kinds)))]
        building = Building(type=kind, function=functions.get(kind, "General"))
        settlement.buildings.append(building)
        self.event_log.record(
            f"A new {kind} was built in {settlement.name}!",
            category="construction",
            payload={"settlement": settlement.name, "building": kind},
        )
        return building

    def maybe_establish_trade_route(self, settlement: Settlement) -> str | None:
        if settlement.prosperity <= self.gc["trade_prosperity_threshold"]:
            return None
        if len(settlement.trade_routes) >= self.gc["max_trade_routes"]:
            return None
        if self.rng.random() >= self.gc["trade_route_chance"]:
            return None
        return self.establish_trade_route(settlement)

    def establish_trade_route(self, settlement: Settlement) -> str | None:
        """Link with a random settlement not yet on the route list."""
        others = [
            s for s in self.registry.settlements.values()
            if s.name != settlement.name and not settlement.has_route_to(s.name)
        ]
        if not others:
            return None
        partner = others[int(self.rng.integers(0, len(others)))]
        settlement.trade_routes.append(partner.name)
        if not partner.has_route_to(settlement.name):
            partner.trade_routes.append(settlement.name)
        self.event_log.record(
            f"Trade route established between {settlement.name} and {partner.name}!",
            category="trade",
            payload={"settlements": [settlement.name, partner.name]},
        )
        return partner.name

    # ------------------------------------------------------------------
    # Per tick
    # ------------------------------------------------------------------
    def check_ghost_towns(self) -> list[str]:
        """
        Log each settlement once when it empties out.

        A settlement that regains residents is re-armed so a later
        depopulation is reported again.
        """
        abandoned: list[str] = []
        for settlement in self.registry.settlements.values():
            if settlement.population <= 0:
                if not settlement.is_abandoned:
                    settlement.is_abandoned = True
                    abandoned.append(settlement.name)
                    self.event_log.record(
                        f"{settlement.name} has become a ghost town - completely abandoned!",
                        category="ghost_town",
                        payload={"settlement": settlement.name},
                    )
            elif settlement.is_abandoned:
                settlement.is_abandoned = False
        return abandoned
