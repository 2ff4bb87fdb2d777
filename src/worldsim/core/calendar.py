"""Game calendar: day/year counters and year rollover."""

from __future__ import annotations

import logging
from typing import Callable

from worldsim.core.events import DayPassed, EventBus, YearPassed

logger = logging.getLogger(__name__)


class Calendar:
    """
    Tracks ``day`` in ``[1, days_per_year]`` and ``year >= 1``.

    Yearly handlers run on rollover, before ``YearPassed`` and the new
    day's ``DayPassed`` are published.
    """

    def __init__(self, bus: EventBus, days_per_year: int = 100) -> None:
        if days_per_year <= 0:
            raise ValueError("days_per_year must be positive")
        self._bus = bus
        self.days_per_year = days_per_year
        self.day = 1
        self.year = 1
        self._year_handlers: list[Callable[[int], None]] = []

    def now(self) -> tuple[int, int]:
        return self.day, self.year

    def on_year_rollover(self, handler: Callable[[int], None]) -> None:
        """Register a batch job run with the new year number on rollover."""
        self._year_handlers.append(handler)

    def advance_day(self) -> bool:
        """Move to the next day. Returns True when a new year began."""
        self.day += 1
        rolled_over = False

        if self.day > self.days_per_year:
            self.day = 1
            self.year += 1
            rolled_over = True
            for handler in self._year_handlers:
                handler(self.year)
            self._bus.publish(YearPassed(year=self.year))
            logger.debug("=== Year %d has begun ===", self.year)

        self._bus.publish(DayPassed(day=self.day, year=self.year))
        logger.debug("Day %d, Year %d", self.day, self.year)
        return rolled_over

    def advance_to_next_year(self) -> None:
        """Advance day by day until the next rollover has been processed."""
        while not self.advance_day():
            pass
