"""Settlement and building records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Building:
    type: str
    function: str
    level: int = 1
    owner_id: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class Settlement:
    """
    A named town owned by the demographic registry.

    ``population`` counts living members and is maintained incrementally
    by the registry on every birth, arrival and death.
    """

    name: str
    position: tuple[float, float]
    dominant_race: str
    population: int = 0
    prosperity: int = 50
    defense: int = 50
    member_ids: list[str] = field(default_factory=list)
    buildings: list[Building] = field(default_factory=list)
    trade_routes: list[str] = field(default_factory=list)
    resources: dict[str, int] = field(default_factory=dict)
    allies: list[str] = field(default_factory=list)
    enemies: list[str] = field(default_factory=list)
    is_abandoned: bool = False

    def adjust_prosperity(self, delta: int) -> int:
        """Shift prosperity, never below zero. Returns the new value."""
        self.prosperity = max(0, self.prosperity + int(delta))
        return self.prosperity

    def has_route_to(self, other: str) -> bool:
        return other in self.trade_routes
