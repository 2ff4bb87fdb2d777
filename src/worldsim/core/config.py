"""
Master configuration for the world simulation.

ALL tunable parameters live here: timing knobs, per-engine probabilities,
and the bootstrap world layout. Nothing in the simulation is hardcoded.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SimulationConfig:
    """
    Master configuration: timing knobs, engine rates and the bootstrap world.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Identity ===
    world_name: str = "default"
    random_seed: int | None = None

    # === Time ===
    time_scale: float = 1.0
    day_duration: float = 120.0            # Real seconds per game day at time_scale 1
    days_per_year: int = 100
    simulation_tick_interval: float = 5.0  # Seconds between random-event ticks
    price_update_interval: float = 10.0    # Seconds between economy ticks

    # === Economy ===
    price_fluctuation_rate: float = 0.1
    supply_demand_influence: float = 0.2

    # === World event log ===
    event_log_capacity: int = 50

    # === Demographic lifecycle (yearly) ===
    lifecycle_config: dict[str, Any] = field(default_factory=lambda: {
        "max_age_by_race": {
            "Human": 80,
            "Goblin": 60,
            "Spider": 40,
            "Demon": 200,
            "Vampire": 1000,
        },
        "default_max_age": 70,
        "old_age_death_chance": 0.3,
        "marriage_min_age": 18,
        "marriage_chance": 0.2,
        "birth_chance": 0.3,
        "stat_variation": 2,
        "trait_inheritance_chance": 0.5,
        "novel_trait_chance": 0.3,
        "novel_traits": [
            "Ambitious", "Creative", "Stubborn", "Curious", "Patient", "Impulsive",
        ],
        "evolution_min_age": 25,
        "evolution_chance": 0.1,
    })

    # === Settlement growth ===
    growth_config: dict[str, Any] = field(default_factory=lambda: {
        "prosperity_growth_threshold": 70,
        "prosperity_growth_chance": 0.3,
        "prosperity_growth_range": [1, 4],
        "residents_per_building": 5,
        "construction_chance": 0.4,
        "building_functions": {
            "House": "Housing",
            "Shop": "Commerce",
            "Temple": "Religion",
            "Workshop": "Crafting",
            "Tavern": "Social",
            "Library": "Knowledge",
            "Barracks": "Defense",
        },
        "trade_prosperity_threshold": 80,
        "max_trade_routes": 3,
        "trade_route_chance": 0.2,
    })

    # === Random world events (per tick) ===
    random_event_config: dict[str, Any] = field(default_factory=lambda: {
        "event_chance": 0.1,
        "raid_prosperity_loss": [10, 30],
        "festival_prosperity_gain": [5, 15],
        "discovery_prosperity_gain": [15, 25],
        "raid_casualty_divisor": 10,
        "plague_casualty_divisor": 5,
        "plague_min_casualties": 2,
    })

    # === Economy engine ===
    economy_config: dict[str, Any] = field(default_factory=lambda: {
        "category_base_demand": {
            "Food": 50.0,
            "Weapon": 20.0,
            "Consumable": 30.0,
            "Material": 15.0,
            "Book": 10.0,
        },
        "default_base_demand": 25.0,
        "demand_population_unit": 100.0,
        "min_price_factor": 0.3,
        "max_price_factor": 3.0,
        "price_dead_band": 0.1,
        "restock_chance": 0.3,
        "restock_range": [1, 4],
        "max_stock": 50,
        "starting_stock_range": [5, 19],
        "local_modifier_range": [0.8, 1.2],
        "closure_prosperity_threshold": 30,
        "closure_chance": 0.1,
        "starting_reputation": 50.0,
        "purchase_reputation_gain": 0.1,
    })

    # === Bootstrap world ===
    settlement_templates: list[dict[str, Any]] = field(default_factory=lambda: [
        {"name": "New Haven", "race": "Human", "position": [0.0, 0.0]},
        {"name": "Goblin Warren", "race": "Goblin", "position": [-150.0, 100.0]},
        {"name": "Spider Sanctuary", "race": "Spider", "position": [150.0, 150.0]},
        {"name": "Infernal Citadel", "race": "Demon", "position": [100.0, -200.0]},
        {"name": "Moonlight Manor", "race": "Vampire", "position": [250.0, 50.0]},
    ])
    # Inclusive [low, high] founding head-count per race
    initial_population: dict[str, list[int]] = field(default_factory=lambda: {
        "Human": [50, 99],
        "Goblin": [30, 59],
        "Spider": [20, 39],
        "Demon": [15, 29],
        "Vampire": [10, 19],
    })
    initial_age_range: list[int] = field(default_factory=lambda: [18, 59])
    initial_prosperity_range: list[int] = field(default_factory=lambda: [50, 99])
    initial_defense_range: list[int] = field(default_factory=lambda: [20, 79])
    starting_buildings: list[dict[str, str]] = field(default_factory=lambda: [
        {"type": "Inn", "function": "Rest"},
        {"type": "Market", "function": "Trade"},
        {"type": "Guard Post", "function": "Defense"},
    ])
    personality_traits: list[str] = field(default_factory=lambda: [
        "Brave", "Cowardly", "Greedy", "Generous", "Aggressive", "Peaceful",
        "Intelligent", "Simple", "Charismatic", "Reclusive", "Loyal", "Treacherous",
    ])

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------
    @property
    def day_period(self) -> float:
        """Real seconds per game day after applying the time scale."""
        if self.time_scale <= 0:
            raise ValueError("time_scale must be positive")
        return self.day_duration / self.time_scale

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict. Nested knobs are copied."""
        d: dict[str, Any] = {}
        for k, v in self.__dict__.items():
            if k.startswith("_"):
                continue
            d[k] = copy.deepcopy(v)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SimulationConfig:
        """Deserialize from a dict."""
        return cls(**{k: copy.deepcopy(v) for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> SimulationConfig:
        return cls.from_dict(json.loads(s))

    def configure(self, section: str, **kwargs: Any) -> None:
        """Update knobs inside one of the ``*_config`` dictionaries."""
        target = getattr(self, f"{section}_config", None)
        if not isinstance(target, dict):
            raise KeyError(f"Unknown config section '{section}'")
        target.update(kwargs)

    def diff(self, other: SimulationConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
