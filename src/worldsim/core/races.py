"""
Race catalog — the read-only description of every playable race.

The simulation treats the catalog as an external collaborator: it only
asks for a race's base stats, professions, starting skills, and the
evolution forms it can grow into. Any gap (unknown race, no evolution
paths) simply disables the matching behaviour for that race.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RaceProfile:
    """Static data for one race."""

    name: str
    description: str = ""
    can_evolve: bool = False
    base_stats: dict[str, int] = field(default_factory=dict)
    starting_skills: list[str] = field(default_factory=list)
    evolution_paths: list[str] = field(default_factory=list)
    professions: list[str] = field(default_factory=list)


class RaceCatalog:
    """Lookup of race name -> :class:`RaceProfile`."""

    def __init__(self, profiles: list[RaceProfile] | None = None) -> None:
        self._profiles: dict[str, RaceProfile] = {}
        for profile in profiles or []:
            self.register(profile)

    def register(self, profile: RaceProfile) -> None:
        self._profiles[profile.name] = profile

    def get(self, race: str) -> RaceProfile | None:
        return self._profiles.get(race)

    def evolution_paths(self, race: str) -> list[str]:
        profile = self._profiles.get(race)
        if profile is None or not profile.can_evolve:
            return []
        return list(profile.evolution_paths)

    def professions(self, race: str) -> list[str]:
        profile = self._profiles.get(race)
        if profile is None or not profile.professions:
            return ["Wanderer"]
        return list(profile.professions)

    @property
    def names(self) -> list[str]:
        return list(self._profiles.keys())

    def __contains__(self, race: object) -> bool:
        return race in self._profiles


def _stats(str_: int, int_: int, dex: int, con: int, wis: int, cha: int) -> dict[str, int]:
    return {
        "Strength": str_, "Intelligence": int_, "Dexterity": dex,
        "Constitution": con, "Wisdom": wis, "Charisma": cha,
    }


def default_race_catalog() -> RaceCatalog:
    """The five founding races of the world."""
    return RaceCatalog([
        RaceProfile(
            name="Human",
            description="Versatile beings who excel through professions rather than evolution.",
            can_evolve=False,
            base_stats=_stats(10, 10, 10, 10, 10, 10),
            starting_skills=["BasicSwordplay", "BasicMagic"],
            professions=["Farmer", "Merchant", "Guard", "Priest", "Blacksmith", "Scholar"],
        ),
        RaceProfile(
            name="Goblin",
            description="Small but cunning creatures that evolve into powerful forms.",
            can_evolve=True,
            base_stats=_stats(8, 12, 14, 8, 10, 6),
            starting_skills=["Stealth", "BasicCrafting"],
            evolution_paths=["Hobgoblin", "Goblin Shaman", "Goblin King"],
            professions=["Scavenger", "Tinkerer", "Scout", "Shaman", "Warrior"],
        ),
        RaceProfile(
            name="Spider",
            description="Patient hunters who spin their way up the food chain.",
            can_evolve=True,
            base_stats=_stats(7, 11, 16, 7, 12, 5),
            starting_skills=["WebSpin", "VenomBite"],
            evolution_paths=["Arachne", "Widow Queen", "Phase Spider"],
            professions=["Weaver", "Hunter", "Venomancer", "Silk Merchant"],
        ),
        RaceProfile(
            name="Demon",
            description="Infernal beings fuelled by corruption.",
            can_evolve=True,
            base_stats=_stats(14, 12, 10, 12, 8, 9),
            starting_skills=["Hellfire", "Intimidate"],
            evolution_paths=["Greater Demon", "Archfiend", "Succubus"],
            professions=["Corruptor", "Warrior", "Sorcerer", "Tempter"],
        ),
        RaceProfile(
            name="Vampire",
            description="Ancient nobility sustained by blood.",
            can_evolve=True,
            base_stats=_stats(12, 13, 13, 9, 11, 14),
            starting_skills=["Drain", "NightVision"],
            evolution_paths=["Vampire Lord", "Nosferatu", "Elder Blood"],
            professions=["Noble", "Blood Dealer", "Shadow Assassin", "Ancient Scholar"],
        ),
    ])
