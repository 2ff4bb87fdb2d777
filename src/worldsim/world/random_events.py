"""
Random world events — one low-probability "big event" roll per tick.

Every executed event appends exactly one entry to the world event log.
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from worldsim.core.config import SimulationConfig
from worldsim.core.events import WorldEvent, WorldEventLog
from worldsim.core.names import generate_name, random_gender
from worldsim.core.registry import DemographicRegistry
from worldsim.core.settlement import Settlement

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    RAID = "Raid"
    FESTIVAL = "Festival"
    PLAGUE = "Plague"
    DISCOVERY = "Discovery"
    MERCHANT = "Merchant"
    HERO = "Hero"


_EVENT_ORDER = list(EventKind)


class RandomEventGenerator:
    """Rolls for and executes random world events."""

    def __init__(
        self,
        config: SimulationConfig,
        registry: DemographicRegistry,
        event_log: WorldEventLog,
        rng: np.random.Generator,
    ) -> None:
        self.config = config
        self.rc = config.random_event_config
        self.registry = registry
        self.event_log = event_log
        self.rng = rng

    def tick(self) -> WorldEvent | None:
        """Single Bernoulli roll; on success run one uniformly chosen event."""
        if self.rng.random() >= self.rc["event_chance"]:
            return None
        kind = _EVENT_ORDER[int(self.rng.integers(0, len(_EVENT_ORDER)))]
        return self.trigger(kind)

    def trigger(
        self,
        kind: EventKind | str,
        settlement: str | None = None,
        casualties: int | None = None,
    ) -> WorldEvent | None:
        """
        Execute an event immediately.

        ``settlement`` pins the target instead of drawing one at random and
        ``casualties`` overrides the rolled head-count for raids and plagues.
        Returns None when a settlement-bound event has no settlement to hit.
        """
        kind = EventKind(kind)
        if kind is EventKind.MERCHANT:
            return self._merchant()
        if kind is EventKind.HERO:
            return self._hero()

        target = self._pick_settlement(settlement)
        if target is None:
            return None
        if kind is EventKind.RAID:
            return self._raid(target, casualties)
        if kind is EventKind.FESTIVAL:
            return self._festival(target)
        if kind is EventKind.PLAGUE:
            return self._plague(target, casualties)
        return self._discovery(target)

    # ------------------------------------------------------------------
    # Event branches
    # ------------------------------------------------------------------
    def _raid(self, target: Settlement, casualties: int | None) -> WorldEvent:
        if casualties is None:
            upper = max(1, target.population // self.rc["raid_casualty_divisor"])
            casualties = int(self.rng.integers(1, upper, endpoint=True))
        victims = self.registry.kill_random_members(
            target.name, casualties, "Violence", self.rng,
        )
        low, high = self.rc["raid_prosperity_loss"]
        loss = int(self.rng.integers(low, high, endpoint=True))
        target.adjust_prosperity(-loss)
        return self.event_log.record(
            f"{target.name} was raided! {len(victims)} casualties reported.",
            category=EventKind.RAID.value,
            payload={
                "settlement": target.name,
                "casualties": len(victims),
                "victims": victims,
                "prosperity_loss": loss,
            },
        )

    def _festival(self, target: Settlement) -> WorldEvent:
        low, high = self.rc["festival_prosperity_gain"]
        gain = int(self.rng.integers(low, high, endpoint=True))
        target.adjust_prosperity(gain)
        return self.event_log.record(
            f"{target.name} is hosting a grand festival! Prosperity increases.",
            category=EventKind.FESTIVAL.value,
            payload={"settlement": target.name, "prosperity_gain": gain},
        )

    def _plague(self, target: Settlement, casualties: int | None) -> WorldEvent:
        if casualties is None:
            floor = self.rc["plague_min_casualties"]
            upper = max(floor, target.population // self.rc["plague_casualty_divisor"])
            casualties = int(self.rng.integers(floor, upper, endpoint=True))
        victims = self.registry.kill_random_members(
            target.name, casualties, "Plague", self.rng,
        )
        return self.event_log.record(
            f"A plague strikes {target.name}! {len(victims)} have perished.",
            category=EventKind.PLAGUE.value,
            payload={
                "settlement": target.name,
                "casualties": len(victims),
                "victims": victims,
            },
        )

    def _discovery(self, target: Settlement) -> WorldEvent:
        low, high = self.rc["discovery_prosperity_gain"]
        gain = int(self.rng.integers(low, high, endpoint=True))
        target.adjust_prosperity(gain)
        return self.event_log.record(
            f"{target.name} discovered valuable resources! Great prosperity follows.",
            category=EventKind.DISCOVERY.value,
            payload={"settlement": target.name, "prosperity_gain": gain},
        )

    def _merchant(self) -> WorldEvent:
        return self.event_log.record(
            "A traveling merchant caravan has arrived, bringing exotic goods!",
            category=EventKind.MERCHANT.value,
        )

    def _hero(self) -> WorldEvent:
        name = generate_name("Human", random_gender(self.rng), self.rng)
        return self.event_log.record(
            f"A hero named {name} has emerged, tales of their deeds spread far and wide!",
            category=EventKind.HERO.value,
            payload={"hero": name},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _pick_settlement(self, name: str | None) -> Settlement | None:
        if name is not None:
            return self.registry.get_settlement(name)
        settlements = list(self.registry.settlements.values())
        if not settlements:
            return None
        return settlements[int(self.rng.integers(0, len(settlements)))]
