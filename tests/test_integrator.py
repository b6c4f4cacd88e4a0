# test_integrator.py

import numpy as np

from body_store import BodyStore
from forces import ForceAccumulator
from integrator import Integrator


def test_semi_implicit_euler_uses_updated_velocity(three_body_store):
    accelerations = np.array([[1.0, 0.0], [0.0, -2.0], [0.5, 0.5]])
    dt = 0.1
    velocities = three_body_store.velocities.copy()
    positions = three_body_store.positions.copy()

    Integrator().advance(three_body_store, accelerations, dt)

    expected_velocities = velocities + accelerations * dt
    np.testing.assert_allclose(three_body_store.velocities, expected_velocities)
    np.testing.assert_allclose(three_body_store.positions, positions + expected_velocities * dt)


def test_mass_and_radius_are_untouched(three_body_store):
    masses = three_body_store.masses.copy()
    radii = three_body_store.radii.copy()
    Integrator().advance(three_body_store, np.ones((3, 2)), 0.5)
    np.testing.assert_array_equal(three_body_store.masses, masses)
    np.testing.assert_array_equal(three_body_store.radii, radii)


def test_central_body_moves_unless_pinned(three_body_store):
    accelerations = np.ones((3, 2))

    pinned = three_body_store.snapshot()
    Integrator(pin_central_body=True).advance(pinned, accelerations, 1.0)
    np.testing.assert_array_equal(pinned.positions[0], [0.0, 0.0])
    np.testing.assert_array_equal(pinned.velocities[0], [0.0, 0.0])
    assert pinned.positions[1, 0] != three_body_store.positions[1, 0]

    Integrator().advance(three_body_store, accelerations, 1.0)
    np.testing.assert_array_equal(three_body_store.positions[0], [1.0, 1.0])


def test_speed_cap_limits_velocity_magnitude(three_body_store):
    Integrator(max_speed=2.0).advance(three_body_store, np.full((3, 2), 100.0), 1.0)
    speeds = np.linalg.norm(three_body_store.velocities, axis=1)
    assert np.all(speeds <= 2.0 + 1e-12)


def _total_momentum(store):
    return np.sum(store.masses[:, np.newaxis] * store.velocities, axis=0)


def _run(store, steps, dt, g_const=1.0, softening=0.1):
    forces = ForceAccumulator(softening)
    integrator = Integrator()
    for _ in range(steps):
        integrator.advance(store, forces.compute(store.positions, store.masses, g_const), dt)


def test_momentum_conserved_in_symmetric_two_body_system():
    speed = np.sqrt(10.0 / (4 * 50.0))
    store = BodyStore(
        positions=[[-50.0, 0.0], [50.0, 0.0]],
        velocities=[[0.0, -speed], [0.0, speed]],
        masses=[10.0, 10.0],
    )
    _run(store, steps=2000, dt=0.05)
    np.testing.assert_allclose(_total_momentum(store), [0.0, 0.0], atol=1e-12)
    # The pair stays mirrored about the origin.
    np.testing.assert_allclose(store.positions[0], -store.positions[1], atol=1e-9)


def test_momentum_conserved_with_unequal_masses(rng):
    store = BodyStore(
        positions=rng.uniform(-100, 100, (6, 2)),
        velocities=rng.uniform(-1, 1, (6, 2)),
        masses=rng.uniform(1, 100, 6),
    )
    initial = _total_momentum(store)
    _run(store, steps=500, dt=0.01, g_const=10.0, softening=2.0)
    scale = np.sum(store.masses * np.linalg.norm(store.velocities, axis=1))
    np.testing.assert_allclose(_total_momentum(store), initial, atol=scale * 1e-10)


def test_zero_timestep_is_a_no_op(three_body_store):
    positions = three_body_store.positions.copy()
    velocities = three_body_store.velocities.copy()
    Integrator().advance(three_body_store, np.ones((3, 2)), 0.0)
    np.testing.assert_array_equal(three_body_store.positions, positions)
    np.testing.assert_array_equal(three_body_store.velocities, velocities)
