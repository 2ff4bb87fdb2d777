"""
Cooperative periodic scheduler.

Several jobs (the calendar day, the world-event tick, the economy tick)
share one simulated clock. ``advance(seconds)`` replays every firing
that falls inside the window in chronological order; jobs due at the
same instant fire in registration order. Callbacks run synchronously to
completion and never overlap.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


@dataclass
class PeriodicJob:
    name: str
    interval: float
    callback: Callable[[], None]
    elapsed: float = 0.0
    runs: int = 0

    @property
    def time_to_next(self) -> float:
        return max(0.0, self.interval - self.elapsed)

    @property
    def progress(self) -> float:
        return min(1.0, self.elapsed / self.interval)


class TickScheduler:
    """Runs named periodic callbacks against a shared simulated clock."""

    def __init__(self) -> None:
        self._jobs: dict[str, PeriodicJob] = {}
        self._stopped = False
        self._in_tick = False
        self.time = 0.0

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def every(
        self, name: str, interval: float, callback: Callable[[], None],
    ) -> PeriodicJob:
        if interval <= 0:
            raise ValueError(f"Interval for job '{name}' must be positive")
        job = PeriodicJob(name=name, interval=float(interval), callback=callback)
        self._jobs[name] = job
        return job

    def set_interval(self, name: str, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"Interval for job '{name}' must be positive")
        self._jobs[name].interval = float(interval)

    def job(self, name: str) -> PeriodicJob | None:
        return self._jobs.get(name)

    def progress(self, name: str) -> float:
        """Fraction of the current period elapsed for a job (0 if unknown)."""
        job = self._jobs.get(name)
        return job.progress if job is not None else 0.0

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------
    def stop(self) -> None:
        """Stop all future firings. A tick already running completes."""
        self._stopped = True

    def resume(self) -> None:
        self._stopped = False

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------
    def advance(self, seconds: float) -> int:
        """Advance simulated time, firing due jobs. Returns callbacks fired."""
        if self._in_tick:
            raise RuntimeError("TickScheduler.advance() called from inside a tick")
        if seconds <= 0 or not self._jobs:
            return 0

        fired = 0
        remaining = float(seconds)
        while remaining > _EPSILON and not self._stopped:
            step = min(job.time_to_next for job in self._jobs.values())
            if step > remaining + _EPSILON:
                self._elapse(remaining)
                break

            self._elapse(step)
            remaining -= step
            for job in list(self._jobs.values()):
                if self._stopped:
                    break
                if job.elapsed + _EPSILON >= job.interval:
                    job.elapsed = max(0.0, job.elapsed - job.interval)
                    self._fire(job)
                    fired += 1
        return fired

    def run_realtime(
        self,
        duration: float,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], float] = time.monotonic,
        step: Callable[[float], int] | None = None,
    ) -> int:
        """
        Drive the scheduler from the wall clock for ``duration`` seconds.

        ``step`` replaces :meth:`advance` for each slice of elapsed time so
        the caller can wrap every slice, e.g. in a lock.
        """
        step = step or self.advance
        fired = 0
        start = last = now()
        while not self._stopped:
            current = now()
            if current - start >= duration:
                break
            fired += step(current - last)
            last = current
            wait = min((j.time_to_next for j in self._jobs.values()), default=duration)
            sleep(max(0.0, min(wait, duration - (current - start))))
        return fired

    def _elapse(self, seconds: float) -> None:
        self.time += seconds
        for job in self._jobs.values():
            job.elapsed += seconds

    def _fire(self, job: PeriodicJob) -> None:
        self._in_tick = True
        try:
            job.callback()
        finally:
            self._in_tick = False
        job.runs += 1
