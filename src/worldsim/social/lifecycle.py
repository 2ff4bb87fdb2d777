"""
Demographic lifecycle — the yearly batch that ages, marries, breeds and
evolves the population.

Phases per year (fixed order):
1. Aging and old-age mortality
2. Marriages
3. Births
4. Evolution-form assignment

Every phase is best-effort: an empty cohort or missing race data just
means nothing happens for that NPC this year.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from worldsim.core.config import SimulationConfig
from worldsim.core.events import EventBus, NPCBorn, WorldEventLog
from worldsim.core.names import generate_name, random_gender
from worldsim.core.npc import NPC
from worldsim.core.races import RaceCatalog
from worldsim.core.registry import DemographicRegistry

logger = logging.getLogger(__name__)


class LifecycleEngine:
    """Yearly demographic transitions for every living NPC."""

    def __init__(
        self,
        config: SimulationConfig,
        registry: DemographicRegistry,
        event_log: WorldEventLog,
        bus: EventBus,
        races: RaceCatalog,
        rng: np.random.Generator,
    ) -> None:
        self.config = config
        self.lc = config.lifecycle_config
        self.registry = registry
        self.event_log = event_log
        self.bus = bus
        self.races = races
        self.rng = rng

    def process_year(self, year: int) -> dict[str, Any]:
        """Run all four phases. Returns per-phase counts."""
        deaths = self.age_population()
        marriages = self.process_marriages()
        births = self.process_births()
        evolutions = self.process_evolution()
        logger.debug(
            "Year %d lifecycle: %d deaths, %d marriages, %d births, %d evolutions",
            year, deaths, marriages, births, evolutions,
        )
        return {
            "year": year,
            "deaths": deaths,
            "marriages": marriages,
            "births": births,
            "evolutions": evolutions,
        }

    # ------------------------------------------------------------------
    # Phase 1: Aging and old-age death
    # ------------------------------------------------------------------
    def max_age_for(self, race: str) -> int:
        return self.lc["max_age_by_race"].get(race, self.lc["default_max_age"])

    def should_die_of_old_age(self, npc: NPC) -> bool:
        """Past the race's max age every year is an independent roll."""
        if npc.age <= self.max_age_for(npc.race):
            return False
        return bool(self.rng.random() < self.lc["old_age_death_chance"])

    def age_population(self) -> int:
        deaths = 0
        for npc in list(self.registry.living_npcs()):
            npc.age += 1
            if self.should_die_of_old_age(npc):
                if self.registry.kill_npc(npc.id, "Old Age"):
                    deaths += 1
        return deaths

    # ------------------------------------------------------------------
    # Phase 2: Marriages
    # ------------------------------------------------------------------
    def process_marriages(self) -> int:
        """
        Each eligible single gets one yearly chance to court someone of
        the same race in the same settlement.
        """
        min_age = self.lc["marriage_min_age"]
        candidates = [
            npc for npc in self.registry.living_npcs()
            if npc.is_eligible_for_marriage(min_age)
        ]

        cohorts: dict[tuple[str, str | None], list[NPC]] = {}
        for npc in candidates:
            cohorts.setdefault((npc.race, npc.settlement), []).append(npc)

        marriages = 0
        for npc in candidates:
            # May have been chosen as someone's partner earlier this pass
            if not npc.is_eligible_for_marriage(min_age):
                continue
            if self.rng.random() >= self.lc["marriage_chance"]:
                continue

            partners = [
                p for p in cohorts[(npc.race, npc.settlement)]
                if p is not npc and p.is_eligible_for_marriage(min_age)
            ]
            if not partners:
                continue

            partner = partners[int(self.rng.integers(0, len(partners)))]
            if self.registry.marry(npc.id, partner.id, min_age):
                marriages += 1
                self.event_log.record(
                    f"{npc.name} and {partner.name} got married in {npc.settlement}!",
                    category="marriage",
                    payload={"npc_ids": [npc.id, partner.id], "settlement": npc.settlement},
                )
        return marriages

    # ------------------------------------------------------------------
    # Phase 3: Births
    # ------------------------------------------------------------------
    def process_births(self) -> int:
        births = 0
        for parent1, parent2 in self.registry.married_couples():
            if self.rng.random() >= self.lc["birth_chance"]:
                continue
            child = self.create_child(parent1, parent2)
            births += 1
            self.event_log.record(
                f"{parent1.name} and {parent2.name} had a child in {parent1.settlement}!",
                category="birth",
                payload={
                    "child_id": child.id,
                    "parent_ids": [parent1.id, parent2.id],
                    "settlement": child.settlement,
                },
            )
            self.bus.publish(NPCBorn(
                child_id=child.id, parent1_id=parent1.id, parent2_id=parent2.id,
            ))
        return births

    def create_child(self, parent1: NPC, parent2: NPC) -> NPC:
        """Create a newborn of the parents' race in the first parent's home."""
        gender = random_gender(self.rng)
        profile = self.races.get(parent1.race)
        return self.registry.create_npc(
            name=generate_name(parent1.race, gender, self.rng),
            race=parent1.race,
            age=0,
            gender=gender,
            settlement=parent1.settlement,
            stats=self.inherit_stats(parent1, parent2),
            profession="Child",
            traits=self.inherit_traits(parent1, parent2),
            skills=list(profile.starting_skills) if profile else [],
            parents=(parent1, parent2),
        )

    def inherit_stats(self, parent1: NPC, parent2: NPC) -> dict[str, int]:
        """Mean of matching parental stats plus a small integer offset."""
        spread = self.lc["stat_variation"]
        stats: dict[str, int] = {}
        for stat in dict.fromkeys([*parent1.stats, *parent2.stats]):
            a = parent1.stats.get(stat, parent2.stats.get(stat, 0))
            b = parent2.stats.get(stat, a)
            offset = int(self.rng.integers(-spread, spread, endpoint=True))
            stats[stat] = max(1, (a + b) // 2 + offset)
        return stats

    def inherit_traits(self, parent1: NPC, parent2: NPC) -> list[str]:
        traits = [
            trait for trait in dict.fromkeys([*parent1.traits, *parent2.traits])
            if self.rng.random() < self.lc["trait_inheritance_chance"]
        ]
        if self.rng.random() < self.lc["novel_trait_chance"]:
            pool = self.lc["novel_traits"]
            novel = pool[int(self.rng.integers(0, len(pool)))]
            if novel not in traits:
                traits.append(novel)
        return traits

    # ------------------------------------------------------------------
    # Phase 4: Evolution
    # ------------------------------------------------------------------
    def can_evolve(self, npc: NPC) -> bool:
        profile = self.races.get(npc.race)
        return (
            npc.is_alive
            and profile is not None
            and profile.can_evolve
            and npc.age >= self.lc["evolution_min_age"]
            and npc.evolution_form is None
        )

    def process_evolution(self) -> int:
        evolutions = 0
        for npc in [n for n in self.registry.living_npcs() if self.can_evolve(n)]:
            if self.rng.random() >= self.lc["evolution_chance"]:
                continue
            paths = self.races.evolution_paths(npc.race)
            if not paths:
                continue
            form = paths[int(self.rng.integers(0, len(paths)))]
            self.evolve(npc, form)
            evolutions += 1
        return evolutions

    def evolve(self, npc: NPC, form: str) -> None:
        npc.evolution_form = form
        npc.name = f"{form} {npc.name}"
        self.event_log.record(
            f"{npc.name} evolved into a {form}!",
            category="evolution",
            payload={"npc_id": npc.id, "form": form},
        )
