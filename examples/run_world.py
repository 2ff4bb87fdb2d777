#!/usr/bin/env python3
"""Run a seeded world for a few decades and print the yearly metrics."""

import logging

from worldsim.core.config import SimulationConfig
from worldsim.core.engine import WorldSimulation


def main():
    logging.basicConfig(level=logging.WARNING, format="%(name)s: %(message)s")

    config = SimulationConfig(world_name="baseline", random_seed=42)
    years = 30

    print(f"=== World: {config.world_name} ===")
    print(f"Days per year: {config.days_per_year}")
    print(f"Settlements: {', '.join(t['name'] for t in config.settlement_templates)}")
    print(f"Years: {years}")
    print()

    sim = WorldSimulation(config)
    print(f"Founding population: {sim.total_population()}")
    print()

    print(f"{'Year':>4} {'Pop':>5} {'Births':>6} {'Deaths':>6} {'Marr':>5} "
          f"{'Evol':>4} {'AvgAge':>6} {'Prosp':>6} {'Ghost':>5} {'Shops':>5} {'Price':>6}")
    print("-" * 72)

    for _ in range(years):
        sim.advance_years(1)
        m = sim.metrics_history[-1]
        print(
            f"{m.year:4d} {m.population_size:5d} {m.births:6d} {m.deaths:6d} "
            f"{m.marriages:5d} {m.evolutions:4d} {m.mean_age:6.1f} "
            f"{m.mean_prosperity:6.1f} {m.ghost_towns:5d} {m.open_shops:5d} "
            f"{m.price_index:6.2f}"
        )
        if sim.is_world_destroyed():
            print("\nThe world has fallen silent.")
            break

    final = sim.metrics_history[-1]
    print()
    print(f"=== Final State (Year {final.year}) ===")
    print(f"Population: {final.population_size}")
    print(f"Total births: {sum(m.births for m in sim.metrics_history)}")
    print(f"Total deaths: {sum(m.deaths for m in sim.metrics_history)}")

    print("\nPopulation by race:")
    for race, count in sorted(final.population_by_race.items()):
        print(f"  {race:10s}: {count:4d}")

    print("\nRecent world events:")
    for event in sim.recent_events(10):
        print(f"  [Y{event.year} D{event.day}] {event.description}")


if __name__ == "__main__":
    main()
