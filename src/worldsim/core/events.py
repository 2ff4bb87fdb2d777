"""
Typed publish/subscribe bus and the bounded world-event journal.

Events are small frozen dataclasses; subscribers register against the
event class and are called synchronously, in subscription order, inside
the tick that published the event.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DayPassed:
    day: int
    year: int


@dataclass(frozen=True)
class YearPassed:
    year: int


@dataclass(frozen=True)
class NPCBorn:
    child_id: str
    parent1_id: str
    parent2_id: str


@dataclass(frozen=True)
class NPCDied:
    npc_id: str
    cause: str


@dataclass(frozen=True)
class ShopOpened:
    shop_id: str
    settlement: str


@dataclass(frozen=True)
class ShopClosed:
    shop_id: str
    reason: str


@dataclass(frozen=True)
class PriceChanged:
    item: str
    old_price: float
    new_price: float


@dataclass(frozen=True)
class WorldEvent:
    """One immutable journal entry."""
    description: str
    day: int
    year: int
    timestamp: str
    category: str = "general"
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorldEventPosted:
    event: WorldEvent

    @property
    def text(self) -> str:
        return self.event.description


E = TypeVar("E")
Handler = Callable[[Any], None]


# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------

class EventBus:
    """Synchronous, type-keyed publish/subscribe registry."""

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Handler]] = {}

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        handlers = self._subscribers.get(event_type)
        if handlers is None:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            pass

    def publish(self, event: Any) -> None:
        # Copy so handlers may (un)subscribe while being notified
        for handler in list(self._subscribers.get(type(event), [])):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Subscriber %r failed handling %s", handler, type(event).__name__,
                )

    def subscriber_count(self, event_type: type) -> int:
        return len(self._subscribers.get(event_type, []))


# ---------------------------------------------------------------------------
# World event log
# ---------------------------------------------------------------------------

class WorldEventLog:
    """
    Append-only journal of the most recent world events.

    Holds at most ``capacity`` entries; the oldest entry is evicted first.
    Every append is announced on the bus as :class:`WorldEventPosted`.
    """

    def __init__(
        self,
        bus: EventBus,
        clock: Callable[[], tuple[int, int]],
        capacity: int = 50,
    ) -> None:
        self._bus = bus
        self._clock = clock
        self._events: deque[WorldEvent] = deque(maxlen=capacity)
        self.total_recorded = 0

    def record(
        self,
        description: str,
        category: str = "general",
        payload: dict[str, Any] | None = None,
    ) -> WorldEvent:
        day, year = self._clock()
        event = WorldEvent(
            description=description,
            day=day,
            year=year,
            timestamp=datetime.now().isoformat(timespec="seconds"),
            category=category,
            payload=dict(payload or {}),
        )
        self._events.append(event)
        self.total_recorded += 1
        logger.info("[World Event] %s", description)
        self._bus.publish(WorldEventPosted(event))
        return event

    def recent(self, limit: int | None = None) -> list[WorldEvent]:
        """Return retained events, oldest first."""
        events = list(self._events)
        if limit is not None:
            return events[-limit:] if limit > 0 else []
        return events

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def __len__(self) -> int:
        return len(self._events)
