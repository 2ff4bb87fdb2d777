"""
Core NPC dataclass.

NPCs are never deleted: death only flips ``is_alive`` and records a
:class:`DeathRecord`, so lineage (parents, children, spouse) stays
navigable for the whole session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RelationshipStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"


@dataclass(frozen=True)
class DeathRecord:
    day: int
    year: int
    cause: str


@dataclass
class NPC:
    """A simulated inhabitant of the world."""

    # === Identity ===
    id: str
    name: str
    race: str
    age: int
    gender: str

    # === Capabilities ===
    stats: dict[str, int] = field(default_factory=dict)
    profession: str = "Wanderer"
    skills: list[str] = field(default_factory=list)
    traits: list[str] = field(default_factory=list)
    evolution_form: str | None = None

    # === Location ===
    settlement: str | None = None

    # === Relationships ===
    relationship_status: RelationshipStatus = RelationshipStatus.SINGLE
    spouse_id: str | None = None
    parent_ids: list[str] = field(default_factory=list)
    children_ids: list[str] = field(default_factory=list)

    # === Life ===
    is_alive: bool = True
    birth_day: int = 1
    birth_year: int = 1
    death: DeathRecord | None = None

    @property
    def is_married(self) -> bool:
        return self.relationship_status is RelationshipStatus.MARRIED

    def is_eligible_for_marriage(self, min_age: int) -> bool:
        """Check if this NPC can look for a spouse."""
        return (
            self.is_alive
            and self.age >= min_age
            and self.relationship_status is RelationshipStatus.SINGLE
        )

    def lifespan(self, days_per_year: int) -> int:
        """Age in years while alive; years lived (rounded down) once dead."""
        if self.is_alive or self.death is None:
            return self.age
        days = (
            (self.death.year - self.birth_year) * days_per_year
            + (self.death.day - self.birth_day)
        )
        return max(0, days // days_per_year)

    def has_trait(self, trait: str) -> bool:
        return trait in self.traits

    def get_stat(self, name: str) -> int:
        return self.stats.get(name, 0)

    def set_stat(self, name: str, value: int) -> None:
        self.stats[name] = value

    def modify_stat(self, name: str, modifier: int) -> None:
        self.stats[name] = self.stats.get(name, 0) + modifier

    def __repr__(self) -> str:
        status = "alive" if self.is_alive else "dead"
        return (
            f"NPC(id={self.id!r}, name={self.name!r}, race={self.race}, "
            f"age={self.age}, settlement={self.settlement!r}, {status})"
        )
