"""
Demographic registry — the single owner of NPC and settlement records.

Every membership-affecting mutation (creation, death, marriage) goes
through this class so the derived counters stay exact:

- ``Settlement.population`` equals the number of living members
- the world-wide and per-race living totals match the NPC table

All counters are adjusted in O(1) per event; nothing rescans the
population to repair them.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

import numpy as np

from worldsim.core.events import EventBus, NPCDied
from worldsim.core.npc import NPC, DeathRecord, RelationshipStatus
from worldsim.core.settlement import Settlement

logger = logging.getLogger(__name__)


class DemographicRegistry:
    """Owns NPCs, settlements, and the relations between them."""

    def __init__(
        self, bus: EventBus, clock: Callable[[], tuple[int, int]],
    ) -> None:
        self._bus = bus
        self._clock = clock
        self.npcs: dict[str, NPC] = {}
        self.settlements: dict[str, Settlement] = {}
        self._next_npc_id = 0
        self._living_total = 0
        self._living_by_race: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Settlements
    # ------------------------------------------------------------------
    def add_settlement(self, settlement: Settlement) -> Settlement:
        """
        Register a settlement. Its living-member count is taken as given.

        A name that is already registered keeps its existing record, which
        is returned instead.
        """
        existing = self.settlements.get(settlement.name)
        if existing is not None:
            logger.warning("Settlement %r already registered", settlement.name)
            return existing
        self.settlements[settlement.name] = settlement
        return settlement

    def get_settlement(self, name: str | None) -> Settlement | None:
        if name is None:
            return None
        return self.settlements.get(name)

    def settlements_for_race(self, race: str) -> list[Settlement]:
        return [s for s in self.settlements.values() if s.dominant_race == race]

    # ------------------------------------------------------------------
    # NPC creation
    # ------------------------------------------------------------------
    def create_npc(
        self,
        name: str,
        race: str,
        age: int,
        gender: str,
        settlement: str | None,
        *,
        stats: dict[str, int] | None = None,
        profession: str = "Wanderer",
        traits: list[str] | None = None,
        skills: list[str] | None = None,
        parents: tuple[NPC, NPC] | None = None,
    ) -> NPC:
        """Create a living NPC and add it to its settlement's roster."""
        day, year = self._clock()
        npc = NPC(
            id=self._new_id(),
            name=name,
            race=race,
            age=age,
            gender=gender,
            stats=dict(stats or {}),
            profession=profession,
            traits=list(traits or []),
            skills=list(skills or []),
            settlement=settlement,
            birth_day=day,
            birth_year=year,
        )
        if parents is not None:
            npc.parent_ids = [parents[0].id, parents[1].id]
            parents[0].children_ids.append(npc.id)
            parents[1].children_ids.append(npc.id)

        self.npcs[npc.id] = npc
        self._living_total += 1
        self._living_by_race[race] = self._living_by_race.get(race, 0) + 1

        home = self.settlements.get(settlement) if settlement else None
        if home is not None:
            home.member_ids.append(npc.id)
            home.population += 1
        return npc

    # ------------------------------------------------------------------
    # Death
    # ------------------------------------------------------------------
    def kill_npc(self, npc_id: str, cause: str) -> bool:
        """
        Flag an NPC as dead. Returns False for unknown or already-dead ids.

        A surviving spouse is widowed back to Single; the deceased keeps
        its spouse reference for lineage queries.
        """
        npc = self.npcs.get(npc_id)
        if npc is None or not npc.is_alive:
            return False

        day, year = self._clock()
        npc.is_alive = False
        npc.death = DeathRecord(day=day, year=year, cause=cause)

        self._living_total -= 1
        self._living_by_race[npc.race] -= 1
        if self._living_by_race[npc.race] <= 0:
            del self._living_by_race[npc.race]

        home = self.settlements.get(npc.settlement) if npc.settlement else None
        if home is not None:
            home.population -= 1

        if npc.spouse_id is not None:
            spouse = self.npcs.get(npc.spouse_id)
            if spouse is not None and spouse.is_alive and spouse.spouse_id == npc.id:
                spouse.relationship_status = RelationshipStatus.SINGLE
                spouse.spouse_id = None

        logger.debug("%s (%s) died: %s", npc.name, npc.id, cause)
        self._bus.publish(NPCDied(npc_id=npc.id, cause=cause))
        return True

    def kill_random_members(
        self,
        settlement_name: str,
        count: int,
        cause: str,
        rng: np.random.Generator,
    ) -> list[str]:
        """Kill up to ``count`` distinct living members. Returns the victims."""
        living = [npc.id for npc in self.npcs_in_settlement(settlement_name)]
        n = min(max(count, 0), len(living))
        if n == 0:
            return []
        picks = rng.choice(len(living), size=n, replace=False)
        victims = [living[int(i)] for i in picks]
        for npc_id in victims:
            self.kill_npc(npc_id, cause)
        return victims

    # ------------------------------------------------------------------
    # Marriage
    # ------------------------------------------------------------------
    def marry(self, first_id: str, second_id: str, min_age: int = 18) -> bool:
        """Link two eligible Single NPCs with mutual spouse references."""
        if first_id == second_id:
            return False
        a = self.npcs.get(first_id)
        b = self.npcs.get(second_id)
        if a is None or b is None:
            return False
        if not (a.is_eligible_for_marriage(min_age) and b.is_eligible_for_marriage(min_age)):
            return False

        a.relationship_status = RelationshipStatus.MARRIED
        b.relationship_status = RelationshipStatus.MARRIED
        a.spouse_id = b.id
        b.spouse_id = a.id
        return True

    def married_couples(self) -> list[tuple[NPC, NPC]]:
        """
        Every living married couple exactly once.

        The partner with the lexicographically smaller id is listed first
        and is the one that "visits" the pair.
        """
        couples: list[tuple[NPC, NPC]] = []
        for npc in self.npcs.values():
            if not npc.is_alive or not npc.is_married or npc.spouse_id is None:
                continue
            if npc.id > npc.spouse_id:
                continue
            spouse = self.npcs.get(npc.spouse_id)
            if spouse is None or not spouse.is_alive or spouse.spouse_id != npc.id:
                continue
            couples.append((npc, spouse))
        return couples

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_npc(self, npc_id: str | None) -> NPC | None:
        if npc_id is None:
            return None
        return self.npcs.get(npc_id)

    def living_npcs(self) -> Iterator[NPC]:
        return (npc for npc in self.npcs.values() if npc.is_alive)

    def npcs_in_settlement(self, name: str) -> list[NPC]:
        """Living members of a settlement (empty for unknown names)."""
        settlement = self.settlements.get(name)
        if settlement is None:
            return []
        return [
            self.npcs[npc_id] for npc_id in settlement.member_ids
            if npc_id in self.npcs and self.npcs[npc_id].is_alive
        ]

    def total_population(self) -> int:
        return self._living_total

    def population_by_race(self) -> dict[str, int]:
        return dict(self._living_by_race)

    def is_world_destroyed(self) -> bool:
        return self._living_total == 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _new_id(self) -> str:
        self._next_npc_id += 1
        return f"npc_{self._next_npc_id:06d}"
