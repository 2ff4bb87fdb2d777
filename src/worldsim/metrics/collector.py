"""
Metrics Collector — per-year world statistics.

Listens on the event bus for deaths and births as they happen and, at
every year rollover, combines those tallies with a read of the registry
and the market into a :class:`YearMetrics` record. Provides time series
extraction and export for visualization.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from worldsim.core.events import EventBus, NPCBorn, NPCDied
from worldsim.core.registry import DemographicRegistry
from worldsim.economy.market import EconomyEngine


@dataclass
class YearMetrics:
    """World statistics for a single year."""

    year: int
    population_size: int
    population_by_race: dict[str, int]

    # Yearly events
    births: int
    deaths: int
    deaths_by_cause: dict[str, int]
    marriages: int
    evolutions: int

    # Demographics
    mean_age: float
    age_distribution: dict[str, int]

    # Settlements
    mean_prosperity: float
    ghost_towns: int
    buildings: int
    trade_routes: int

    # Economy
    open_shops: int
    price_index: float
    market_prices: dict[str, float] = field(default_factory=dict)


class MetricsCollector:
    """Collects yearly metrics from the registry and the economy."""

    def __init__(
        self,
        registry: DemographicRegistry,
        economy: EconomyEngine | None = None,
    ) -> None:
        self.registry = registry
        self.economy = economy
        self.metrics_history: list[YearMetrics] = []
        self._births = 0
        self._deaths_by_cause: dict[str, int] = {}

    def attach(self, bus: EventBus) -> None:
        """Start tallying births and deaths published on ``bus``."""
        bus.subscribe(NPCBorn, self._on_born)
        bus.subscribe(NPCDied, self._on_died)

    def _on_born(self, event: NPCBorn) -> None:
        self._births += 1

    def _on_died(self, event: NPCDied) -> None:
        self._deaths_by_cause[event.cause] = self._deaths_by_cause.get(event.cause, 0) + 1

    def collect(self, year: int, events: dict[str, Any] | None = None) -> YearMetrics:
        """Close out a year: snapshot the world and reset the tallies."""
        events = events or {}
        living = list(self.registry.living_npcs())
        settlements = list(self.registry.settlements.values())

        metrics = YearMetrics(
            year=year,
            population_size=self.registry.total_population(),
            population_by_race=self.registry.population_by_race(),
            births=self._births,
            deaths=sum(self._deaths_by_cause.values()),
            deaths_by_cause=dict(self._deaths_by_cause),
            marriages=int(events.get("marriages", 0)),
            evolutions=int(events.get("evolutions", 0)),
            mean_age=float(np.mean([n.age for n in living])) if living else 0.0,
            age_distribution=self._compute_age_distribution(living),
            mean_prosperity=(
                float(np.mean([s.prosperity for s in settlements])) if settlements else 0.0
            ),
            ghost_towns=sum(1 for s in settlements if s.population <= 0),
            buildings=sum(len(s.buildings) for s in settlements),
            trade_routes=sum(len(s.trade_routes) for s in settlements) // 2,
            open_shops=(
                sum(1 for shop in self.economy.shops.values() if shop.is_open)
                if self.economy is not None else 0
            ),
            price_index=self.economy.price_index() if self.economy is not None else 0.0,
            market_prices=(
                dict(self.economy.market_prices) if self.economy is not None else {}
            ),
        )

        self._births = 0
        self._deaths_by_cause = {}
        self.metrics_history.append(metrics)
        return metrics

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract a time series for a specific metric field."""
        return [getattr(m, field_name) for m in self.metrics_history]

    def export_for_visualization(self) -> list[dict[str, Any]]:
        """Export all metrics as a list of JSON-serializable dicts."""
        return [asdict(m) for m in self.metrics_history]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _compute_age_distribution(population: list) -> dict[str, int]:
        """Compute age distribution in buckets."""
        buckets = {"0-17": 0, "18-40": 0, "41-80": 0, "81+": 0}
        for npc in population:
            if npc.age <= 17:
                buckets["0-17"] += 1
            elif npc.age <= 40:
                buckets["18-40"] += 1
            elif npc.age <= 80:
                buckets["41-80"] += 1
            else:
                buckets["81+"] += 1
        return buckets
