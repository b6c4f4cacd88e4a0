# test_simulation.py

import logging

import numpy as np
import pytest

from body_store import BodyStore
from config_loader import validate_simulation_config
from parameters import SimulationParameters
from simulation import Simulation, SimulationState


def _two_body_simulation(params, max_stable_dt=0.01, max_substeps=100_000):
    central_mass, radius = 1000.0, 100.0
    speed = np.sqrt(params.effective_gravity * central_mass / radius)
    store = BodyStore(
        positions=[[0.0, 0.0], [radius, 0.0]],
        velocities=[[0.0, 0.0], [0.0, speed]],
        masses=[central_mass, 1e-6],
    )
    return Simulation(store, params, max_stable_dt=max_stable_dt, max_substeps=max_substeps)


def test_closed_orbit_returns_to_start(unit_params):
    simulation = _two_body_simulation(unit_params)
    start = simulation.store.positions[1].copy()
    period = 2 * np.pi * np.sqrt(100.0**3 / (unit_params.effective_gravity * 1000.0))

    simulation.step(period / 2)
    assert np.linalg.norm(simulation.store.positions[1] - start) == pytest.approx(200.0, rel=0.01)

    simulation.step(period / 2)
    assert np.linalg.norm(simulation.store.positions[1] - start) < 1.0
    assert simulation.simulated_time == pytest.approx(period)


def test_zero_frame_time_leaves_store_unchanged(three_body_store):
    simulation = Simulation(three_body_store, SimulationParameters())
    positions = three_body_store.positions.copy()
    velocities = three_body_store.velocities.copy()

    simulation.step(0.0)

    assert simulation.last_plan.count == 0
    np.testing.assert_array_equal(simulation.bodies().positions, positions)
    np.testing.assert_array_equal(simulation.bodies().velocities, velocities)


def test_stalled_frame_is_clamped_and_logged(three_body_store, caplog):
    simulation = Simulation(three_body_store, SimulationParameters(), max_stable_dt=0.01, max_substeps=8)
    with caplog.at_level(logging.WARNING, logger="nbody_sim"):
        simulation.step(1e6)
    assert simulation.last_plan.count == 8
    assert simulation.simulated_time == pytest.approx(0.08)
    assert "running behind real time" in caplog.text


def test_one_substep_reads_positions_before_writing(three_body_store):
    params = SimulationParameters(base_gravity=10.0, softening_length=1.0)
    expected = three_body_store.snapshot()
    dt = 0.005

    # Reference: every acceleration from the untouched snapshot, then integrate.
    acc = np.zeros((3, 2))
    for i in range(3):
        for j in range(3):
            if i != j:
                diff = expected.positions[j] - expected.positions[i]
                acc[i] += 10.0 * expected.masses[j] * diff / (diff @ diff + 1.0) ** 1.5
    expected_velocities = expected.velocities + acc * dt
    expected_positions = expected.positions + expected_velocities * dt

    simulation = Simulation(three_body_store, params, max_stable_dt=0.01)
    simulation.step(dt)

    assert simulation.last_plan.count == 1
    np.testing.assert_allclose(three_body_store.velocities, expected_velocities, rtol=1e-12)
    np.testing.assert_allclose(three_body_store.positions, expected_positions, rtol=1e-12)


def test_substeps_match_manual_stepping(three_body_store):
    params = SimulationParameters(base_gravity=10.0, softening_length=1.0)
    dt = 1 / 128
    single = Simulation(three_body_store.snapshot(), params, max_stable_dt=dt)
    stepped = Simulation(three_body_store.snapshot(), params, max_stable_dt=dt)

    single.step(5 * dt)
    for _ in range(5):
        stepped.step(dt)

    assert single.last_plan.count == 5
    np.testing.assert_allclose(single.store.positions, stepped.store.positions, rtol=1e-9)


def test_time_scale_speeds_up_simulated_time(three_body_store):
    params = SimulationParameters()
    simulation = Simulation(three_body_store, params)
    simulation.set_time_scale(4.0)
    simulation.step(0.02)
    assert simulation.simulated_time == pytest.approx(0.08)


def test_parameter_setters_clamp():
    params = SimulationParameters(min_time_scale=0.1, max_time_scale=10.0,
                                  min_gravity_strength=0.5, max_gravity_strength=2.0)
    simulation = Simulation(BodyStore(np.zeros((1, 2)), np.zeros((1, 2)), [1.0]), params)

    assert simulation.set_time_scale(100.0) == 10.0
    assert simulation.set_time_scale(0.0) == 0.1
    assert simulation.set_gravity_strength(3.0) == 2.0
    assert simulation.set_gravity_strength(-1.0) == 0.5
    assert params.effective_gravity == pytest.approx(0.5 * params.base_gravity)


def test_exit_stops_stepping(three_body_store):
    simulation = Simulation(three_body_store, SimulationParameters())
    assert simulation.state is SimulationState.RUNNING
    simulation.exit()
    assert simulation.state is SimulationState.EXITED

    positions = three_body_store.positions.copy()
    simulation.step(0.1)
    np.testing.assert_array_equal(three_body_store.positions, positions)
    assert simulation.frame_count == 0


def test_body_count_never_changes(sim_config, rng):
    simulation = Simulation.from_config(sim_config, rng)
    count = len(simulation.bodies().positions)
    for _ in range(10):
        simulation.step(1 / 60)
    assert len(simulation.bodies().positions) == count == sim_config['body_count'] + 1


def test_pinned_central_body_stays_at_origin(sim_config, rng):
    config = dict(sim_config, pin_central_body=True)
    simulation = Simulation.from_config(config, rng)
    for _ in range(10):
        simulation.step(1 / 60)
    np.testing.assert_array_equal(simulation.store.positions[0], [0.0, 0.0])


def test_from_config_scenario_velocity(rng):
    config = validate_simulation_config({
        'body_count': 1,
        'central_mass': 1000.0,
        'orbit_distribution': "uniform",
        'min_orbit_radius': 100.0,
        'max_orbit_radius': 100.0,
        'gravitational_constant': 1.0,
        'gravity_strength': 1.0,
    })
    simulation = Simulation.from_config(config, rng)
    assert np.linalg.norm(simulation.bodies().velocities[1]) == pytest.approx(np.sqrt(10.0))


def test_diagnostics_for_two_body_system(unit_params):
    simulation = _two_body_simulation(unit_params)
    ke = simulation.get_total_kinetic_energy()
    assert ke == pytest.approx(0.5 * 1e-6 * 10.0)
    assert simulation.get_total_potential_energy() == pytest.approx(-1000.0 * 1e-6 / 100.0)
    np.testing.assert_allclose(simulation.get_total_momentum(), [0.0, 1e-6 * np.sqrt(10.0)])
    np.testing.assert_allclose(simulation.get_center_of_mass(), [1e-4 / (1000.0 + 1e-6), 0.0])


def test_energy_drift_stays_small(sim_config, rng):
    simulation = Simulation.from_config(sim_config, rng)
    initial = simulation.get_total_energy()
    for _ in range(60):
        simulation.step(1 / 60)
    assert simulation.get_total_energy() == pytest.approx(initial, rel=0.05)


def test_central_body_record_tracks_drift(unit_params):
    simulation = _two_body_simulation(unit_params)
    before = simulation.central_body()
    simulation.step(1.0)
    after = simulation.central_body()

    assert before.mass == 1000.0
    assert before.radius == pytest.approx(simulation.store.radii[0])
    np.testing.assert_array_equal(before.position, [0.0, 0.0])
    np.testing.assert_array_equal(after.position, simulation.store.positions[0])
    # The record is a copy, not a window into the store.
    after.position[0] = 123.0
    assert simulation.store.positions[0, 0] != 123.0
