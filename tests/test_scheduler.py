"""Tests for the cooperative periodic scheduler."""

import pytest

from worldsim.core.scheduler import TickScheduler


class TestRegistration:
    def test_non_positive_interval_rejected(self):
        s = TickScheduler()
        with pytest.raises(ValueError):
            s.every("bad", 0, lambda: None)
        s.every("ok", 1.0, lambda: None)
        with pytest.raises(ValueError):
            s.set_interval("ok", -1.0)

    def test_unknown_job_progress_is_zero(self):
        assert TickScheduler().progress("nothing") == 0.0


class TestAdvance:
    def test_fires_each_period(self):
        s = TickScheduler()
        calls = []
        s.every("a", 5.0, lambda: calls.append(s.time))
        fired = s.advance(12.0)
        assert fired == 2
        assert calls == [pytest.approx(5.0), pytest.approx(10.0)]
        assert s.job("a").runs == 2
        assert s.progress("a") == pytest.approx(0.4)

    def test_partial_advances_accumulate(self):
        s = TickScheduler()
        calls = []
        s.every("a", 5.0, lambda: calls.append(1))
        for _ in range(4):
            s.advance(1.25)
        assert calls == [1]

    def test_chronological_across_jobs(self):
        s = TickScheduler()
        order = []
        s.every("slow", 3.0, lambda: order.append(("slow", s.time)))
        s.every("fast", 2.0, lambda: order.append(("fast", s.time)))
        s.advance(6.0)
        names = [name for name, _ in order]
        assert names == ["fast", "slow", "fast", "slow", "fast"]

    def test_ties_fire_in_registration_order(self):
        s = TickScheduler()
        order = []
        s.every("day", 10.0, lambda: order.append("day"))
        s.every("world", 5.0, lambda: order.append("world"))
        s.every("economy", 10.0, lambda: order.append("economy"))
        s.advance(10.0)
        assert order == ["world", "day", "world", "economy"]

    def test_reentrant_advance_raises(self):
        s = TickScheduler()
        s.every("a", 1.0, lambda: s.advance(1.0))
        with pytest.raises(RuntimeError):
            s.advance(1.0)

    def test_zero_seconds(self):
        s = TickScheduler()
        s.every("a", 1.0, lambda: None)
        assert s.advance(0) == 0


class TestStop:
    def test_stop_halts_future_firings(self):
        s = TickScheduler()
        calls = []

        def first():
            calls.append("first")
            s.stop()

        s.every("first", 1.0, first)
        s.every("second", 1.0, lambda: calls.append("second"))
        s.advance(5.0)
        assert calls == ["first"]
        assert s.is_stopped

    def test_resume(self):
        s = TickScheduler()
        calls = []
        s.every("a", 1.0, lambda: calls.append(1))
        s.stop()
        assert s.advance(3.0) == 0
        s.resume()
        assert s.advance(1.0) == 1


class TestRunRealtime:
    def test_driven_by_injected_clock(self):
        s = TickScheduler()
        calls = []
        s.every("a", 5.0, lambda: calls.append(1))
        clock = {"t": 0.0}

        def now():
            return clock["t"]

        def sleep(seconds):
            clock["t"] += max(seconds, 0.5)

        s.run_realtime(20.0, sleep=sleep, now=now)
        assert len(calls) >= 3

    def test_custom_step(self):
        s = TickScheduler()
        s.every("a", 1.0, lambda: None)
        steps = []
        clock = {"t": 0.0}

        def sleep(seconds):
            clock["t"] += 1.0

        def step(seconds):
            steps.append(seconds)
            return s.advance(seconds)

        s.run_realtime(3.0, sleep=sleep, now=lambda: clock["t"], step=step)
        assert steps
        assert sum(steps) == pytest.approx(2.0)
