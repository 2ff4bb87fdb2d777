"""
Tests for the WorldSimulation facade: bootstrap, scheduling, the yearly
batch, and the world-wide consistency rules after long runs.
"""

from __future__ import annotations

import threading

import pytest

from worldsim.core.config import SimulationConfig
from worldsim.core.engine import WorldSimulation
from worldsim.core.events import DayPassed, NPCDied, YearPassed


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_config(**overrides) -> SimulationConfig:
    """Short years and small populations for fast tests."""
    defaults = {
        "random_seed": 42,
        "days_per_year": 10,
        "day_duration": 10.0,
        "simulation_tick_interval": 5.0,
        "price_update_interval": 10.0,
        "initial_population": {
            "Human": [20, 30],
            "Goblin": [10, 15],
            "Spider": [8, 12],
            "Demon": [6, 10],
            "Vampire": [4, 8],
        },
    }
    defaults.update(overrides)
    return SimulationConfig(**defaults)


def _assert_world_consistent(sim: WorldSimulation) -> None:
    registry = sim.registry
    min_age = sim.config.lifecycle_config["marriage_min_age"]
    for settlement in registry.settlements.values():
        living = [i for i in settlement.member_ids if registry.npcs[i].is_alive]
        assert settlement.population == len(living)
        assert settlement.prosperity >= 0
    assert sum(sim.population_by_race().values()) == sim.total_population()

    for npc in registry.npcs.values():
        if not npc.is_alive:
            assert npc.death is not None
            continue
        if npc.is_married:
            assert npc.age >= min_age
            spouse = registry.get_npc(npc.spouse_id)
            if spouse.is_alive:
                assert spouse.is_married
                assert spouse.spouse_id == npc.id

    assert len(sim.recent_events()) <= sim.config.event_log_capacity


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

class TestBootstrap:
    def test_settlements_created(self, world):
        names = {s.name for s in world.registry.settlements.values()}
        assert names == {
            "New Haven", "Goblin Warren", "Spider Sanctuary",
            "Infernal Citadel", "Moonlight Manor",
        }

    def test_population_in_configured_ranges(self, world):
        by_race = world.population_by_race()
        for race, (low, high) in world.config.initial_population.items():
            assert low <= by_race[race] <= high

    def test_founders_live_in_their_race_settlement(self, world):
        for npc in world.registry.living_npcs():
            settlement = world.get_settlement(npc.settlement)
            assert settlement.dominant_race == npc.race
            assert 18 <= npc.age <= 59
            assert 1 <= len(npc.traits) <= 4
            assert len(set(npc.traits)) == len(npc.traits)

    def test_settlement_population_matches_members(self, world):
        _assert_world_consistent(world)

    def test_starting_buildings_and_stats(self, world):
        for settlement in world.registry.settlements.values():
            assert [b.type for b in settlement.buildings] == ["Inn", "Market", "Guard Post"]
            assert 50 <= settlement.prosperity <= 99
            assert 20 <= settlement.defense <= 79

    def test_founder_stats_near_race_base(self, world):
        for npc in world.registry.living_npcs():
            base = world.races.get(npc.race).base_stats
            for stat, value in npc.stats.items():
                assert max(1, base[stat] - 3) <= value <= base[stat] + 3

    def test_shops_opened(self, world):
        haven = [s.name for s in world.economy.shops_in_settlement("New Haven")]
        assert haven == ["General Store", "Blacksmith", "Alchemist"]
        assert len(world.economy.shops) == 3 + 4 * 2

    def test_same_seed_same_world(self):
        a = WorldSimulation(_make_config())
        b = WorldSimulation(_make_config())
        assert a.population_by_race() == b.population_by_race()
        assert [n.name for n in a.registry.npcs.values()] == [
            n.name for n in b.registry.npcs.values()
        ]

    def test_bootstrap_skipped(self, empty_world):
        assert empty_world.total_population() == 0
        assert empty_world.is_world_destroyed()


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

class TestScheduling:
    def test_day_advances(self):
        sim = WorldSimulation(_make_config())
        days = []
        sim.subscribe(DayPassed, days.append)
        sim.advance_days(3)
        assert sim.calendar.now() == (4, 1)
        assert len(days) == 3

    def test_year_rollover_runs_batch(self):
        sim = WorldSimulation(_make_config())
        years = []
        sim.subscribe(YearPassed, years.append)
        sim.advance_years(1)
        assert sim.calendar.now() == (1, 2)
        assert years == [YearPassed(year=2)]
        assert len(sim.metrics_history) == 1
        assert sim.metrics_history[0].year == 1
        assert set(sim.last_year_summary) >= {"deaths", "births", "buildings_built"}

    def test_time_scale_shortens_days(self):
        sim = WorldSimulation(_make_config(time_scale=2.0))
        sim.advance(5.0)
        assert sim.calendar.day == 2

    def test_day_progress(self):
        sim = WorldSimulation(_make_config())
        sim.advance(2.5)
        assert sim.day_progress == pytest.approx(0.25)

    def test_day_progress_follows_day_job(self):
        sim = WorldSimulation(SimulationConfig(random_seed=1), bootstrap=False)
        sim.advance(60.0)
        assert sim.day_progress == pytest.approx(0.5)
        assert sim.day_progress == pytest.approx(sim.scheduler.progress("day"))
        sim.advance(90.0)
        assert sim.calendar.day == 2
        assert sim.day_progress == pytest.approx(0.25)
        assert not hasattr(sim.calendar, "day_progress")

    def test_stop(self):
        sim = WorldSimulation(_make_config())
        sim.stop()
        assert sim.advance(100.0) == 0
        assert sim.calendar.now() == (1, 1)

    def test_run_realtime_returns_after_duration(self):
        sim = WorldSimulation(_make_config(time_scale=1000.0))
        sim.run_realtime(0.05)
        assert sim.calendar.day > 1 or sim.calendar.year > 1


# ---------------------------------------------------------------------------
# Long runs
# ---------------------------------------------------------------------------

class TestLongRun:
    def test_invariants_hold_over_years(self):
        config = _make_config()
        config.configure("random_event", event_chance=0.5)
        config.configure("lifecycle", marriage_chance=0.5, birth_chance=0.5)
        sim = WorldSimulation(config)
        for _ in range(6):
            sim.advance_years(1)
            _assert_world_consistent(sim)
        assert len(sim.metrics_history) == 6

    def test_event_log_stays_bounded(self):
        config = _make_config()
        config.configure("random_event", event_chance=1.0)
        sim = WorldSimulation(config)
        sim.advance_years(3)
        assert sim.event_log.total_recorded > 50
        assert len(sim.recent_events()) == 50

    def test_total_population_idempotent(self):
        sim = WorldSimulation(_make_config())
        sim.advance_years(1)
        assert sim.total_population() == sim.total_population()

    def test_same_seed_same_history(self):
        a = WorldSimulation(_make_config())
        b = WorldSimulation(_make_config())
        a.advance_years(3)
        b.advance_years(3)
        assert a.metrics.get_time_series("population_size") == b.metrics.get_time_series(
            "population_size"
        )
        assert a.economy.market_prices == b.economy.market_prices


# ---------------------------------------------------------------------------
# Facade operations
# ---------------------------------------------------------------------------

class TestFacade:
    def test_kill_npc_entry_point(self, world):
        deaths = []
        world.subscribe(NPCDied, deaths.append)
        npc = next(world.registry.living_npcs())
        before = world.total_population()
        assert world.kill_npc(npc.id, "Combat") is True
        assert world.kill_npc(npc.id, "Combat") is False
        assert world.total_population() == before - 1
        assert deaths == [NPCDied(npc_id=npc.id, cause="Combat")]

    def test_purchase_and_close(self, world):
        shop = world.economy.shops_in_settlement("New Haven")[0]
        stock = shop.stock_of("Bread")
        assert world.purchase_item(shop.id, "Bread", 1) is True
        assert world.get_shop(shop.id).stock_of("Bread") == stock - 1
        assert world.close_shop(shop.id, "Owner retired") is True
        assert world.purchase_item(shop.id, "Bread", 1) is False

    def test_lookups(self, world):
        assert world.get_item("Dragon Scale").base_price == 500.0
        assert world.get_item("Unobtainium") is None
        assert world.get_npc("npc_999999") is None
        assert world.get_settlement("Atlantis") is None
        assert world.get_shop("nowhere") is None
        assert world.npcs_in_settlement("Atlantis") == []
        assert world.get_current_price("Bread") == 5.0

    def test_snapshot_is_detached(self, world):
        snap = world.snapshot()
        npc_id = next(iter(snap["npcs"]))
        snap["npcs"][npc_id].age = 999
        snap["settlements"]["New Haven"].population = -1
        assert world.get_npc(npc_id).age != 999
        assert world.get_settlement("New Haven").population >= 0
        assert (snap["day"], snap["year"]) == world.calendar.now()

    def test_snapshot_from_reader_thread(self):
        sim = WorldSimulation(_make_config())
        snapshots = []

        def reader():
            for _ in range(5):
                snapshots.append(sim.snapshot())

        thread = threading.Thread(target=reader)
        thread.start()
        sim.advance_years(1)
        thread.join()
        for snap in snapshots:
            populations = {}
            for npc in snap["npcs"].values():
                if npc.is_alive and npc.settlement:
                    populations[npc.settlement] = populations.get(npc.settlement, 0) + 1
            for name, settlement in snap["settlements"].items():
                assert settlement.population == populations.get(name, 0)
