# initial_conditions.py

import logging

import numpy as np

from body_store import BodyStore

logger = logging.getLogger("nbody_sim")

DISTRIBUTIONS = ("shells", "uniform")


def circular_orbit_speed(g_const: float, central_mass: float, radius):
    """Speed for a circular orbit of the given radius: v = sqrt(G * M / r)."""
    return np.sqrt(g_const * central_mass / np.asarray(radius, dtype=np.float64))


def sample_orbit_radii(count: int, config: dict, rng: np.random.Generator) -> np.ndarray:
    """
    Draws orbital radii for `count` bodies.

    - "shells": bodies are spread over `shell_count` concentric shells at
      shell_spacing * (k + 1), each radius jittered by +/- shell_jitter.
    - "uniform": radii drawn uniformly from [min_orbit_radius, max_orbit_radius].
    """
    distribution = config['orbit_distribution']
    if distribution == "shells":
        shells = rng.integers(0, config['shell_count'], count)
        base_distance = config['shell_spacing'] * (shells + 1)
        jitter = config['shell_jitter']
        return base_distance + rng.uniform(-jitter, jitter, count)
    if distribution == "uniform":
        return rng.uniform(config['min_orbit_radius'], config['max_orbit_radius'], count)
    raise ValueError(f"Unknown orbit distribution: {distribution!r}")


def generate_bodies(config: dict, rng: np.random.Generator, g_const: float) -> BodyStore:
    """
    Builds the initial Body Store: a central mass at rest at the origin
    (index 0) followed by `body_count` orbiters on circular orbits around it.

    Data Contract:
    - Inputs:
        - config (dict): The validated 'simulation' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
        - g_const (float): Effective gravitational constant, G0 * gravity_strength.
    - Outputs: A BodyStore with body_count + 1 bodies.
    - Side Effects: Consumes draws from rng.
    - Invariants: Each orbiter's velocity is perpendicular to its radius vector
      with magnitude sqrt(G * M / r), unless the optional speed_factor_range or
      radial_velocity_range are configured to add eccentricity.
    """
    count = config['body_count']
    central_mass = config['central_mass']

    radii = sample_orbit_radii(count, config, rng)
    angles = rng.uniform(0.0, 2.0 * np.pi, count)
    masses = rng.uniform(config['min_mass'], config['max_mass'], count)

    # Unit vectors: outward along the radius, tangent rotated +90 degrees.
    outward = np.column_stack((np.cos(angles), np.sin(angles)))
    tangent = np.column_stack((-outward[:, 1], outward[:, 0]))

    speed_lo, speed_hi = config.get('speed_factor_range', (1.0, 1.0))
    radial_lo, radial_hi = config.get('radial_velocity_range', (0.0, 0.0))
    speed = circular_orbit_speed(g_const, central_mass, radii) * rng.uniform(speed_lo, speed_hi, count)
    radial = rng.uniform(radial_lo, radial_hi, count)

    orbit_positions = outward * radii[:, np.newaxis]
    orbit_velocities = (tangent + outward * radial[:, np.newaxis]) * speed[:, np.newaxis]

    positions = np.vstack((np.zeros((1, 2)), orbit_positions))
    velocities = np.vstack((np.zeros((1, 2)), orbit_velocities))
    all_masses = np.concatenate(([central_mass], masses))

    store = BodyStore(positions, velocities, all_masses)
    logger.info(
        f"Generated {count} orbiters around central mass {central_mass} "
        f"({config['orbit_distribution']} distribution, G={g_const})."
    )
    return store
