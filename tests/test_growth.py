"""Tests for settlement growth and ghost-town detection."""

from worldsim.core.settlement import Building, Settlement


def _make_town(world, name="Town", race="Human", prosperity=50, residents=0):
    town = world.registry.add_settlement(
        Settlement(name=name, position=(0.0, 0.0), dominant_race=race, prosperity=prosperity),
    )
    for i in range(residents):
        world.registry.create_npc(f"Resident {i}", race, 30, "Male", name)
    return town


class TestProsperity:
    def test_thriving_settlement_grows(self, empty_world):
        town = _make_town(empty_world, prosperity=75)
        empty_world.config.configure("growth", prosperity_growth_chance=1.0)
        gain = empty_world.growth.grow_prosperity(town)
        assert 1 <= gain <= 4
        assert town.prosperity == 75 + gain

    def test_threshold_is_exclusive(self, empty_world):
        town = _make_town(empty_world, prosperity=70)
        empty_world.config.configure("growth", prosperity_growth_chance=1.0)
        assert empty_world.growth.grow_prosperity(town) == 0
        assert town.prosperity == 70

    def test_prosperity_never_negative(self):
        town = Settlement(name="T", position=(0.0, 0.0), dominant_race="Human", prosperity=5)
        assert town.adjust_prosperity(-30) == 0


class TestConstruction:
    def test_builds_when_crowded(self, empty_world):
        town = _make_town(empty_world, residents=6)
        town.buildings = [Building(type="Inn", function="Rest")]
        empty_world.config.configure("growth", construction_chance=1.0)
        building = empty_world.growth.maybe_construct(town)
        assert building is not None
        assert building.type in empty_world.config.growth_config["building_functions"]
        assert len(town.buildings) == 2
        assert empty_world.event_log.recent(1)[0].category == "construction"

    def test_no_construction_when_roomy(self, empty_world):
        town = _make_town(empty_world, residents=5)
        town.buildings = [Building(type="Inn", function="Rest")]
        empty_world.config.configure("growth", construction_chance=1.0)
        assert empty_world.growth.maybe_construct(town) is None


class TestTradeRoutes:
    def test_route_is_bidirectional(self, empty_world):
        a = _make_town(empty_world, "A", prosperity=90)
        b = _make_town(empty_world, "B")
        empty_world.config.configure("growth", trade_route_chance=1.0)
        assert empty_world.growth.maybe_establish_trade_route(a) == "B"
        assert a.trade_routes == ["B"]
        assert b.trade_routes == ["A"]
        assert empty_world.event_log.recent(1)[0].category == "trade"

    def test_no_duplicate_routes(self, empty_world):
        a = _make_town(empty_world, "A", prosperity=90)
        _make_town(empty_world, "B")
        empty_world.config.configure("growth", trade_route_chance=1.0)
        empty_world.growth.maybe_establish_trade_route(a)
        assert empty_world.growth.maybe_establish_trade_route(a) is None
        assert a.trade_routes == ["B"]

    def test_route_cap(self, empty_world):
        a = _make_town(empty_world, "A", prosperity=90)
        for name in "BCDE":
            _make_town(empty_world, name)
        empty_world.config.configure("growth", trade_route_chance=1.0)
        for _ in range(6):
            empty_world.growth.maybe_establish_trade_route(a)
        assert len(a.trade_routes) == 3

    def test_needs_prosperity(self, empty_world):
        a = _make_town(empty_world, "A", prosperity=80)
        _make_town(empty_world, "B")
        empty_world.config.configure("growth", trade_route_chance=1.0)
        assert empty_world.growth.maybe_establish_trade_route(a) is None


class TestGhostTowns:
    def test_logged_once(self, empty_world):
        _make_town(empty_world, residents=1)
        npc = empty_world.npcs_in_settlement("Town")[0]
        empty_world.kill_npc(npc.id, "Violence")

        assert empty_world.growth.check_ghost_towns() == ["Town"]
        for _ in range(5):
            assert empty_world.growth.check_ghost_towns() == []
        ghost_events = [
            e for e in empty_world.recent_events() if e.category == "ghost_town"
        ]
        assert len(ghost_events) == 1

    def test_rearmed_after_recovery(self, empty_world):
        town = _make_town(empty_world)
        assert empty_world.growth.check_ghost_towns() == ["Town"]
        empty_world.registry.create_npc("Settler", "Human", 30, "Female", "Town")
        assert empty_world.growth.check_ghost_towns() == []
        assert town.is_abandoned is False
        empty_world.kill_npc(town.member_ids[0], "Plague")
        assert empty_world.growth.check_ghost_towns() == ["Town"]


class TestProcessYear:
    def test_summary(self, empty_world):
        _make_town(empty_world, residents=3)
        summary = empty_world.growth.process_year(4)
        assert summary["year"] == 4
        assert set(summary) == {"year", "buildings_built", "trade_routes_formed"}
