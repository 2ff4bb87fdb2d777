"""
Shared test configuration.

Provides a small, empty world (no bootstrap) wired the same way the
simulation facade wires it, plus a seeded generator.
"""

import numpy as np
import pytest

from worldsim.core.config import SimulationConfig
from worldsim.core.engine import WorldSimulation


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def config():
    return SimulationConfig(random_seed=42)


@pytest.fixture
def empty_world(config):
    """A fully wired simulation with no settlements, NPCs or shops."""
    return WorldSimulation(config, bootstrap=False)


@pytest.fixture
def world():
    """The default bootstrapped world, seeded."""
    return WorldSimulation(SimulationConfig(random_seed=7))
