"""
World simulation facade.

Builds every collaborator explicitly, bootstraps the starting world, and
wires three periodic jobs onto one cooperative scheduler:

1. ``day``      : advance the calendar; on rollover run the yearly batch
                  (lifecycle, settlement growth, metrics)
2. ``world``    : random world events and ghost-town detection
3. ``economy``  : market prices, restocking and shop closures

All mutations go through a re-entrant lock so another thread can take a
consistent :meth:`WorldSimulation.snapshot` at any time.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Callable

import numpy as np

from worldsim.core.calendar import Calendar
from worldsim.core.config import SimulationConfig
from worldsim.core.events import EventBus, WorldEvent, WorldEventLog
from worldsim.core.names import generate_name, random_gender
from worldsim.core.npc import NPC
from worldsim.core.races import RaceCatalog, default_race_catalog
from worldsim.core.registry import DemographicRegistry
from worldsim.core.scheduler import TickScheduler
from worldsim.core.settlement import Building, Settlement
from worldsim.economy.catalog import Item
from worldsim.economy.market import EconomyEngine, Shop
from worldsim.metrics.collector import MetricsCollector, YearMetrics
from worldsim.social.lifecycle import LifecycleEngine
from worldsim.world.growth import SettlementGrowthEngine
from worldsim.world.random_events import RandomEventGenerator

logger = logging.getLogger(__name__)

_STAT_JITTER = 3


class WorldSimulation:
    """Owns one world and drives it forward in simulated seconds."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        races: RaceCatalog | None = None,
        rng: np.random.Generator | None = None,
        bootstrap: bool = True,
    ) -> None:
        self.config = config or SimulationConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.random_seed)
        self.races = races or default_race_catalog()
        self._lock = threading.RLock()

        # Core components
        self.bus = EventBus()
        self.calendar = Calendar(self.bus, self.config.days_per_year)
        self.event_log = WorldEventLog(
            self.bus, self.calendar.now, self.config.event_log_capacity,
        )
        self.registry = DemographicRegistry(self.bus, self.calendar.now)

        # Engines
        self.lifecycle = LifecycleEngine(
            self.config, self.registry, self.event_log, self.bus, self.races, self.rng,
        )
        self.growth = SettlementGrowthEngine(
            self.config, self.registry, self.event_log, self.rng,
        )
        self.random_events = RandomEventGenerator(
            self.config, self.registry, self.event_log, self.rng,
        )
        self.economy = EconomyEngine(
            self.config, self.registry, self.event_log, self.bus, self.rng,
        )
        self.metrics = MetricsCollector(self.registry, self.economy)
        self.metrics.attach(self.bus)
        self.last_year_summary: dict[str, Any] = {}

        # Scheduling
        self.calendar.on_year_rollover(self._on_new_year)
        self.scheduler = TickScheduler()
        self.scheduler.every("day", self.config.day_period, self._day_tick)
        self.scheduler.every("world", self.config.simulation_tick_interval, self._world_tick)
        self.scheduler.every("economy", self.config.price_update_interval, self._economy_tick)

        if bootstrap:
            self.bootstrap()

    # ------------------------------------------------------------------
    # World creation
    # ------------------------------------------------------------------
    def bootstrap(self) -> None:
        """Create starting settlements, then their founders, then shops."""
        with self._lock:
            for template in self.config.settlement_templates:
                self._create_settlement(template)
            for race, (low, high) in self.config.initial_population.items():
                count = int(self.rng.integers(low, high, endpoint=True))
                for _ in range(count):
                    self._create_founder(race)
            self.economy.create_initial_shops()
            logger.info(
                "World '%s' created: %d settlements, %d NPCs, %d shops",
                self.config.world_name,
                len(self.registry.settlements),
                self.registry.total_population(),
                len(self.economy.shops),
            )

    def _create_settlement(self, template: dict[str, Any]) -> Settlement:
        p_low, p_high = self.config.initial_prosperity_range
        d_low, d_high = self.config.initial_defense_range
        x, y = template.get("position", (0.0, 0.0))
        settlement = Settlement(
            name=template["name"],
            position=(float(x), float(y)),
            dominant_race=template["race"],
            prosperity=int(self.rng.integers(p_low, p_high, endpoint=True)),
            defense=int(self.rng.integers(d_low, d_high, endpoint=True)),
            buildings=[
                Building(type=b["type"], function=b["function"])
                for b in self.config.starting_buildings
            ],
        )
        return self.registry.add_settlement(settlement)

    def _create_founder(self, race: str) -> NPC:
        gender = random_gender(self.rng)
        profile = self.races.get(race)
        base_stats = profile.base_stats if profile else {}
        stats = {
            stat: max(1, value + int(self.rng.integers(-_STAT_JITTER, _STAT_JITTER, endpoint=True)))
            for stat, value in base_stats.items()
        }
        professions = self.races.professions(race)
        homes = self.registry.settlements_for_race(race)
        a_low, a_high = self.config.initial_age_range
        return self.registry.create_npc(
            name=generate_name(race, gender, self.rng),
            race=race,
            age=int(self.rng.integers(a_low, a_high, endpoint=True)),
            gender=gender,
            settlement=homes[0].name if homes else None,
            stats=stats,
            profession=professions[int(self.rng.integers(0, len(professions)))],
            traits=self._random_traits(),
            skills=list(profile.starting_skills) if profile else [],
        )

    def _random_traits(self) -> list[str]:
        pool = self.config.personality_traits
        if not pool:
            return []
        count = int(self.rng.integers(2, 4, endpoint=True))
        picks = [pool[int(self.rng.integers(0, len(pool)))] for _ in range(count)]
        return list(dict.fromkeys(picks))

    # ------------------------------------------------------------------
    # Scheduled jobs
    # ------------------------------------------------------------------
    def _day_tick(self) -> None:
        self.calendar.advance_day()

    def _on_new_year(self, year: int) -> None:
        """Yearly batch for the year that just ended."""
        lifecycle = self.lifecycle.process_year(year)
        growth = self.growth.process_year(year)
        metrics = self.metrics.collect(year - 1, lifecycle)
        self.last_year_summary = {**lifecycle, **growth}
        logger.info(
            "Year %d closed: population %d, %d births, %d deaths",
            metrics.year, metrics.population_size, metrics.births, metrics.deaths,
        )

    def _world_tick(self) -> None:
        self.random_events.tick()
        self.growth.check_ghost_towns()

    def _economy_tick(self) -> None:
        self.economy.tick()

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------
    def advance(self, seconds: float) -> int:
        """Advance simulated time. Returns the number of jobs fired."""
        with self._lock:
            return self.scheduler.advance(seconds)

    def advance_days(self, days: int) -> int:
        return self.advance(days * self.config.day_period)

    def advance_years(self, years: int) -> int:
        return self.advance_days(years * self.config.days_per_year)

    def run_realtime(self, duration: float) -> int:
        """Run against the wall clock, releasing the lock between slices."""
        return self.scheduler.run_realtime(duration, step=self.advance)

    def stop(self) -> None:
        self.scheduler.stop()

    @property
    def day_progress(self) -> float:
        """Fraction of the current game day that has elapsed."""
        return self.scheduler.progress("day")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def kill_npc(self, npc_id: str, cause: str) -> bool:
        with self._lock:
            return self.registry.kill_npc(npc_id, cause)

    def purchase_item(self, shop_id: str, item_name: str, quantity: int) -> bool:
        with self._lock:
            return self.economy.purchase_item(shop_id, item_name, quantity)

    def close_shop(self, shop_id: str, reason: str) -> bool:
        with self._lock:
            return self.economy.close_shop(shop_id, reason)

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        with self._lock:
            self.bus.subscribe(event_type, handler)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def total_population(self) -> int:
        return self.registry.total_population()

    def population_by_race(self) -> dict[str, int]:
        return self.registry.population_by_race()

    def is_world_destroyed(self) -> bool:
        return self.registry.is_world_destroyed()

    def npcs_in_settlement(self, name: str) -> list[NPC]:
        with self._lock:
            return self.registry.npcs_in_settlement(name)

    def get_settlement(self, name: str) -> Settlement | None:
        return self.registry.get_settlement(name)

    def get_npc(self, npc_id: str) -> NPC | None:
        return self.registry.get_npc(npc_id)

    def get_shop(self, shop_id: str) -> Shop | None:
        return self.economy.get_shop(shop_id)

    def get_item(self, item_name: str) -> Item | None:
        return self.economy.get_item(item_name)

    def get_current_price(self, item_name: str, shop_id: str | None = None) -> float:
        with self._lock:
            return self.economy.get_current_price(item_name, shop_id)

    def recent_events(self, limit: int | None = None) -> list[WorldEvent]:
        with self._lock:
            return self.event_log.recent(limit)

    @property
    def metrics_history(self) -> list[YearMetrics]:
        return self.metrics.metrics_history

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the whole world state, taken between ticks."""
        with self._lock:
            return copy.deepcopy({
                "day": self.calendar.day,
                "year": self.calendar.year,
                "time": self.scheduler.time,
                "npcs": self.registry.npcs,
                "settlements": self.registry.settlements,
                "shops": self.economy.shops,
                "market_prices": self.economy.market_prices,
                "events": self.event_log.recent(),
            })
