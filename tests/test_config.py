"""Tests for SimulationConfig."""

import pytest

from worldsim.core.config import SimulationConfig
from worldsim.core.engine import WorldSimulation


class TestConfigDefaults:
    def test_default_world_name(self):
        c = SimulationConfig()
        assert c.world_name == "default"

    def test_default_timing(self):
        c = SimulationConfig()
        assert c.day_duration == 120.0
        assert c.days_per_year == 100
        assert c.simulation_tick_interval == 5.0
        assert c.price_update_interval == 10.0

    def test_default_event_log_capacity(self):
        assert SimulationConfig().event_log_capacity == 50

    def test_race_max_ages(self):
        ages = SimulationConfig().lifecycle_config["max_age_by_race"]
        assert ages["Human"] == 80
        assert ages["Vampire"] == 1000

    def test_five_starting_settlements(self):
        c = SimulationConfig()
        races = {t["race"] for t in c.settlement_templates}
        assert races == {"Human", "Goblin", "Spider", "Demon", "Vampire"}

    def test_instances_do_not_share_knob_dicts(self):
        c1 = SimulationConfig()
        c2 = SimulationConfig()
        c1.lifecycle_config["marriage_chance"] = 1.0
        assert c2.lifecycle_config["marriage_chance"] == 0.2


class TestDayPeriod:
    def test_unscaled(self):
        assert SimulationConfig().day_period == 120.0

    def test_time_scale_speeds_up_days(self):
        assert SimulationConfig(time_scale=2.0).day_period == 60.0

    def test_non_positive_time_scale_rejected(self):
        with pytest.raises(ValueError):
            SimulationConfig(time_scale=0.0).day_period

    def test_simulation_rejects_zero_time_scale(self):
        with pytest.raises(ValueError):
            WorldSimulation(SimulationConfig(time_scale=0.0), bootstrap=False)


class TestConfigure:
    def test_updates_section(self):
        c = SimulationConfig()
        c.configure("economy", closure_chance=0.5)
        assert c.economy_config["closure_chance"] == 0.5
        assert c.economy_config["max_stock"] == 50

    def test_unknown_section_raises(self):
        with pytest.raises(KeyError):
            SimulationConfig().configure("weather", rain=1.0)


class TestSerialization:
    def test_to_dict_roundtrip(self):
        c = SimulationConfig(world_name="test", days_per_year=30)
        c2 = SimulationConfig.from_dict(c.to_dict())
        assert c2.world_name == "test"
        assert c2.days_per_year == 30

    def test_to_json_roundtrip(self):
        c = SimulationConfig(world_name="json_test", random_seed=9)
        c2 = SimulationConfig.from_json(c.to_json())
        assert c2.world_name == "json_test"
        assert c2.random_seed == 9
        assert c2.growth_config == c.growth_config

    def test_diff(self):
        c1 = SimulationConfig(world_name="a", time_scale=1.0)
        c2 = SimulationConfig(world_name="b", time_scale=4.0)
        diffs = c1.diff(c2)
        assert "world_name" in diffs
        assert diffs["time_scale"] == (1.0, 4.0)
        assert "days_per_year" not in diffs

    def test_from_dict_does_not_share_knobs(self):
        base = SimulationConfig()
        clone = SimulationConfig.from_dict(base.to_dict())
        clone.configure("lifecycle", marriage_chance=1.0)
        clone.initial_age_range[0] = 30
        assert base.lifecycle_config["marriage_chance"] == 0.2
        assert base.initial_age_range == [18, 59]
        assert "lifecycle_config" in base.diff(clone)

    def test_to_dict_is_detached(self):
        c = SimulationConfig()
        d = c.to_dict()
        d["economy_config"]["max_stock"] = 1
        assert c.economy_config["max_stock"] == 50
