# conftest.py

import numpy as np
import pytest

from body_store import BodyStore
from config_loader import validate_simulation_config
from parameters import SimulationParameters


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sim_config():
    """A small, fully validated 'simulation' section."""
    return validate_simulation_config({
        'body_count': 40,
        'central_mass': 2000.0,
        'min_mass': 1.0,
        'max_mass': 80.0,
        'gravitational_constant': 100.0,
        'softening_length': 5.0,
    })


@pytest.fixture
def unit_params():
    """G0 = 1, gravity_strength = 1, negligible softening."""
    return SimulationParameters(
        time_scale=1.0,
        gravity_strength=1.0,
        softening_length=1e-3,
        base_gravity=1.0,
    )


@pytest.fixture
def three_body_store():
    return BodyStore(
        positions=[[0.0, 0.0], [30.0, 5.0], [-12.0, 40.0]],
        velocities=[[0.0, 0.0], [0.0, 1.0], [-1.0, 0.0]],
        masses=[500.0, 3.0, 7.0],
    )
